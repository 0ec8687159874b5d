"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
application starts locally without any setup; in a deployment the
database path, public base URL and blob store credentials should be
overridden via environment variables.

AWS credentials themselves are not read here.  ``boto3`` resolves them
through its usual chain (``AWS_ACCESS_KEY_ID``/``AWS_SECRET_ACCESS_KEY``,
shared config files or an instance role).
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Dev Events")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite file backing the document store.  Relative paths
    # are resolved against the project root by ``core.db``.  An empty
    # value is reported as a configuration error on first use.
    database_url: str = os.getenv("DATABASE_URL", "dev_events.db")

    # Base URL the pages use to reach the JSON API of this same
    # deployment.
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")

    # Blob store (S3 or an S3-compatible host) for event images.
    s3_bucket: str = os.getenv("S3_BUCKET", "")
    s3_prefix: str = os.getenv("S3_PREFIX", "events/")
    s3_region: str = os.getenv("S3_REGION", "us-east-1")
    s3_endpoint_url: str = os.getenv("S3_ENDPOINT_URL", "")
    # Optional base URL for public object links, e.g. a CDN in front of
    # the bucket.  When empty, the virtual-hosted S3 URL is used.
    s3_public_url: str = os.getenv("S3_PUBLIC_URL", "")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
