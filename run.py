"""Entry point for serving the Movie Rental API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``3000``).  All other settings,
including the required ``JWT_PRIVATE_KEY``, are read by
``movie_rental_api.app.core.config``.

Usage:
    JWT_PRIVATE_KEY=... python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from movie_rental_api.app.main import app


async def main() -> None:
    """Serve the API with Uvicorn until interrupted."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    logging.getLogger(__name__).info("Server is listening on port: %s", port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
