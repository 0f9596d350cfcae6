"""
In-process publish/subscribe event bus.

An ``EventBus`` delivers each published event to every subscriber
registered on the topic at the moment of publication.  There is no
backlog: a subscriber only sees events published after it subscribed.
Each subscriber owns an unbounded ``asyncio.Queue``, so a slow
consumer never blocks the publisher.

The application creates one bus in ``create_app`` and hands it to
resolvers through the GraphQL context; tests construct their own.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, AsyncIterator, Dict, Set

BOOK_ADDED = "BOOK_ADDED"

logger = logging.getLogger(__name__)

_CLOSED = object()


class EventBus:
    """Topic-based fan-out of events to async iterators."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)
        self._closed = False

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    async def publish(self, topic: str, payload: Any) -> int:
        """Publish ``payload`` on ``topic`` and return the number of receivers."""
        queues = list(self._subscribers.get(topic, ()))
        for queue in queues:
            queue.put_nowait(payload)
        logger.debug("Published %s to %d subscriber(s)", topic, len(queues))
        return len(queues)

    async def subscribe(self, topic: str) -> AsyncIterator[Any]:
        """Yield events published on ``topic`` until the bus is closed.

        The subscriber is registered on the first ``__anext__`` call and
        detached when the iterator is closed or garbage collected.
        """
        if self._closed:
            return
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers[topic].add(queue)
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    break
                yield item
        finally:
            subscribers = self._subscribers.get(topic)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._subscribers[topic]

    def close(self) -> None:
        """End every active subscription; later subscriptions end immediately."""
        self._closed = True
        for queues in self._subscribers.values():
            for queue in queues:
                queue.put_nowait(_CLOSED)
