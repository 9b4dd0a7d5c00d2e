import asyncio
import logging
from typing import Any, List

from .protocols import Notifier

# Put on every queue by `close()`; watchers stop when they see it.
CLOSED = object()


class QueueNotifier(Notifier):
    """
    Fans published items out to every subscriber queue.

    Each subscriber owns an unbounded `asyncio.Queue`, so a slow consumer never
    holds up a publisher; it just falls behind and catches up later.
    """

    def __init__(self, name: str = "notifier"):
        self._name = name
        self._watchers: List[asyncio.Queue] = []
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def subscribe(self) -> asyncio.Queue:
        """Allows a watcher to subscribe. A closed notifier hands out an already-finished queue."""
        async with self._lock:
            queue = asyncio.Queue()
            if self._closed:
                queue.put_nowait(CLOSED)
            else:
                self._watchers.append(queue)
            return queue

    async def unsubscribe(self, queue: asyncio.Queue):
        """Removes a watcher's queue."""
        async with self._lock:
            if queue in self._watchers:
                self._watchers.remove(queue)

    async def publish(self, item: Any):
        async with self._lock:
            for queue in self._watchers:
                queue.put_nowait(item)

    async def close(self):
        async with self._lock:
            if self._closed:
                return
            self._closed = True
            for queue in self._watchers:
                queue.put_nowait(CLOSED)
            self._watchers.clear()
        logging.info(f"{self._name} closed")
