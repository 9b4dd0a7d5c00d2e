import asyncio
import logging
from typing import AsyncIterator, Iterable, Optional, Tuple

from .models import ErrorKind, Event, Result, Snapshot
from .notifier import CLOSED, QueueNotifier
from .protocols import Notifier


class InMemoryEventStore:
    """
    The single owner of the session's events.

    State is held as one immutable `Snapshot` that is replaced, never edited,
    so readers can take it without locking. Writers go through `_write_lock`:
    read the current snapshot, build the next one, swap it in and publish it,
    all before the next writer may start.
    """

    def __init__(self, events: Iterable[Event] = (), notifier: Optional[Notifier] = None):
        initial = tuple(events)
        if not all(isinstance(e, Event) for e in initial):
            raise TypeError("All items in events must be Event objects")
        seen = set()
        for event in initial:
            if event.id in seen:
                raise ValueError(f"Duplicate event id {event.id} in initial load")
            seen.add(event.id)

        self._snapshot = Snapshot(version=0, events=initial)
        self._notifier = notifier if notifier is not None else QueueNotifier("event store")
        self._write_lock = asyncio.Lock()
        logging.info(f"Event store loaded with {len(initial)} events")

    @property
    def version(self) -> int:
        return self._snapshot.version

    def snapshot(self) -> Snapshot:
        return self._snapshot

    async def observe(self) -> AsyncIterator[Snapshot]:
        """
        Yields the current snapshot, then every snapshot published after it,
        until the store is closed.
        """
        # Subscribing under the write lock means no mutation can land between
        # the first snapshot and the start of the live feed.
        async with self._write_lock:
            queue = await self._notifier.subscribe()
            last = self._snapshot

        try:
            yield last
            while True:
                item = await queue.get()
                if item is CLOSED:
                    return
                if item.version > last.version:
                    last = item
                    yield item
        finally:
            await self._notifier.unsubscribe(queue)

    async def update(self, event: Event) -> Result[Event]:
        if not isinstance(event, Event):
            raise TypeError("update() expects an Event")

        async with self._write_lock:
            events = self._snapshot.events
            index = _index_of(events, event.id)
            if index is None:
                logging.info(f"Update rejected: event {event.id} not found")
                return Result.failure(ErrorKind.NOT_FOUND, f"Event {event.id} not found")

            logging.debug(f"Replacing event {event.id}: {events[index]} -> {event}")
            await self._commit(events[:index] + (event,) + events[index + 1:])

        return Result.success(event)

    async def delete(self, event_id: int) -> Result[None]:
        async with self._write_lock:
            events = self._snapshot.events
            index = _index_of(events, event_id)
            if index is None:
                logging.info(f"Delete rejected: event {event_id} not found")
                return Result.failure(ErrorKind.NOT_FOUND, f"Event {event_id} not found")

            await self._commit(events[:index] + events[index + 1:])

        return Result.success()

    async def close(self):
        """Ends every `observe()` stream. The last snapshot stays readable."""
        async with self._write_lock:
            await self._notifier.close()

    async def _commit(self, events: Tuple[Event, ...]):
        # Caller holds the write lock.
        self._snapshot = Snapshot(version=self._snapshot.version + 1, events=events)
        logging.info(f"Event store at version {self._snapshot.version} ({len(events)} events)")
        await self._notifier.publish(self._snapshot)


def _index_of(events: Tuple[Event, ...], event_id: int) -> Optional[int]:
    for index, event in enumerate(events):
        if event.id == event_id:
            return index
    return None
