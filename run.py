"""Entry point serving the Library Catalog API with uvicorn.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``4000``).  Other configuration,
such as ``DATABASE_URL`` and ``JWT_SECRET``, may be placed in a
``.env`` file in the working directory.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from library_catalog_api.app.core.config import settings
from library_catalog_api.app.main import app


async def main() -> None:
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Server is now running on http://localhost:%s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
