"""
Top-level package for the Dev Events application.

All functionality lives in submodules under ``app``; the FastAPI
instance is ``dev_events.app.main:app``.
"""

__all__ = []
