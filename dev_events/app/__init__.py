"""
Application package initializer.

The JSON API lives in ``api/v1``, the server-rendered pages in
``web``, business logic in ``services`` and the store adapters in
``core``.
"""

from .main import app  # noqa: F401
