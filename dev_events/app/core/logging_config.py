"""
Logging setup for the application.

``setup_logging`` is called once by ``main.create_app``.  Records go to
stderr and, when ``LOG_FILE`` is set, to a size-rotated file.  Modules
log through ``logging.getLogger(__name__)`` and never add handlers of
their own.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO/DEBUG.
NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "uvicorn.access")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Does nothing if the root logger already has handlers (the test
    runner or a previous ``create_app`` call configured it).

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        Path of a log file, rotated at 5 MB with three backups.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = RotatingFileHandler(
            Path(logfile).resolve(), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
