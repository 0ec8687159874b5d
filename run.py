"""Entry point for serving the Dev Events application.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``8000``).  Keep ``PUBLIC_BASE_URL``
pointing at the same address so the pages can reach the API.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from dev_events.app.main import app


async def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
