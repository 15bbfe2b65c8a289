"""Entry point for the Core Template API.

Launches the FastAPI application with Uvicorn.  Host and port are read
from ``API_HOST`` and ``API_PORT`` (see ``core.config``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from core_template_api.app.core.config import settings
from core_template_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Starting API on %s:%s", settings.api_host, settings.api_port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
