"""
Per-request GraphQL context.

``get_context`` is installed as the router's FastAPI dependency.  It
resolves the caller from the ``Authorization`` header and hands the
application's event bus to the resolvers.  It depends on
``HTTPConnection`` so the same getter serves plain HTTP requests and
WebSocket subscriptions.
"""

from typing import Optional

from starlette.requests import HTTPConnection
from strawberry.fastapi import BaseContext

from library_catalog_api.app.core.pubsub import EventBus
from library_catalog_api.app.core.security import resolve_current_user
from library_catalog_api.app.schemas.user import UserRead


class CatalogContext(BaseContext):
    """Context object available to resolvers as ``info.context``."""

    def __init__(self, current_user: Optional[UserRead], event_bus: EventBus) -> None:
        super().__init__()
        self.current_user = current_user
        self.event_bus = event_bus


async def get_context(connection: HTTPConnection) -> CatalogContext:
    current_user = await resolve_current_user(connection.headers.get("authorization"))
    return CatalogContext(current_user=current_user, event_bus=connection.app.state.event_bus)
