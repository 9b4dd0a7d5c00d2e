"""
This module defines the abstract protocols for the event store and its notifier.

The timeline service and the layout code talk to these interfaces rather than
to concrete classes, so an alternative store (for example one backed by a
remote source) can be swapped in without changing them.
"""
import asyncio
from typing import Any, AsyncIterator, Protocol

from .models import Event, Result, Snapshot


class Notifier(Protocol):
    """
    Defines the contract for broadcasting new state to watchers.
    """
    async def subscribe(self) -> asyncio.Queue:
        ...

    async def unsubscribe(self, queue: "asyncio.Queue"):
        ...

    async def publish(self, item: Any):
        ...

    async def close(self):
        ...


class EventStore(Protocol):
    """
    Defines the public interface of the authoritative event collection.
    Mutations are serialized; reads always see a complete snapshot.
    """
    def snapshot(self) -> Snapshot:
        ...

    def observe(self) -> AsyncIterator[Snapshot]:
        ...

    async def update(self, event: Event) -> Result[Event]:
        ...

    async def delete(self, event_id: int) -> Result[None]:
        ...

    async def close(self):
        ...
