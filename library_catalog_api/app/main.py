"""
Main entrypoint for the Library Catalog API.

This module assembles the FastAPI application, sets up logging and
mounts the GraphQL router.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Run it with uvicorn, e.g.::

    uvicorn library_catalog_api.app.main:app --port 4000

The application title and version are provided via ``Settings`` from
``core.config``.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.graphql import create_graphql_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .core.pubsub import EventBus


def create_app(event_bus: Optional[EventBus] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    event_bus : Optional[EventBus]
        Bus used to deliver ``bookAdded`` events.  A new bus is created
        when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.event_bus = event_bus or EventBus()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_graphql_router(graphiql=settings.debug))

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies pending migrations.
        init_db()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        # Ends open subscriptions so the server can drain WebSocket clients.
        app.state.event_bus.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
