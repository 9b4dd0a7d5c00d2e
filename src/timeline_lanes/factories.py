"""
Builds a ready-to-use timeline from a set of seed events.

`timeline_factory` owns every resource it creates: the store, its notifier and
the timeline's background task. Leaving the context closes all of them, which
also ends any `observe()` / `watch()` iteration still running.
"""
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Iterable, List, Optional

from .date_math import DEFAULT_ZOOM_STEP
from .models import Event
from .move import DEFAULT_MAX_YEAR_OFFSET
from .store import InMemoryEventStore
from .timeline import Timeline, validate_event


def load_seed_events(events: Iterable[Event]) -> List[Event]:
    """Drops seed events that could never be edited into a valid state."""
    accepted = []
    for event in events:
        invalid = validate_event(event)
        if invalid is not None:
            logging.warning(f"Skipping seed event {event.id}: {invalid.error.message}")
            continue
        accepted.append(event)
    return accepted


@asynccontextmanager
async def timeline_factory(
    events: Iterable[Event] = (),
    *,
    zoom_level: float = 1.0,
    zoom_step: float = DEFAULT_ZOOM_STEP,
    max_year_offset: int = DEFAULT_MAX_YEAR_OFFSET,
    today: Optional[date] = None,
) -> AsyncIterator[Timeline]:
    if zoom_step <= 1:
        raise ValueError("`zoom_step` must be greater than 1.")
    if max_year_offset < 0:
        raise ValueError("`max_year_offset` must not be negative.")

    store = InMemoryEventStore(load_seed_events(events))
    timeline = Timeline(
        store,
        zoom_level=zoom_level,
        zoom_step=zoom_step,
        max_year_offset=max_year_offset,
        today=today,
    )
    await timeline.start()
    try:
        yield timeline
    finally:
        await timeline.stop()
        await store.close()
