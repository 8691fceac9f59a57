"""Entry point for the greeting card web application.

This script serves the FastAPI application with Uvicorn.  It is intended
to be executed from the project root, for example under Docker, where
you only specify a single Python file to run.

Configuration such as HOST, PORT, STORAGE_BACKEND, DATABASE_URL and
PUBLIC_BASE_URL is read from environment variables; see
``greeting_card_api/app/core/config.py`` for the full list.  Use
``STORAGE_BACKEND=memory`` for a throwaway demo server.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from greeting_card_api.app.core.config import settings
from greeting_card_api.app.main import app


async def main() -> None:
    """Serve the application until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info(
        "Open http://localhost:%s to create a greeting", settings.port
    )
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
