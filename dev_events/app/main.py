"""
Main entrypoint for the Dev Events application.

This module assembles the FastAPI application: it sets up logging,
mounts the JSON API under ``/api`` and the server-rendered pages at the
root.  The app is instantiated at import time as ``app``, so it can be
served with::

    uvicorn dev_events.app.main:app --reload

The document store and blob store are created lazily on first use.
"""

from fastapi import FastAPI

from .core.config import settings
from .core.logging_config import setup_logging
from .api.v1.router import router as api_router
from .web.pages import router as pages_router


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(api_router, prefix="/api")
    app.include_router(pages_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "healthy", "version": settings.api_version}

    return app


app = create_app()
