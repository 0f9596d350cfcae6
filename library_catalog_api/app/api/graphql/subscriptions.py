"""Root ``Subscription`` type."""

from typing import AsyncGenerator

import strawberry
from strawberry.types import Info

from library_catalog_api.app.core.pubsub import BOOK_ADDED

from .types import Book


@strawberry.type
class Subscription:
    @strawberry.subscription(description="Every book added after the subscription starts.")
    async def book_added(self, info: Info) -> AsyncGenerator[Book, None]:
        async for book in info.context.event_bus.subscribe(BOOK_ADDED):
            yield Book.from_read(book)
