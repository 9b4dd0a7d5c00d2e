import asyncio
import logging
from datetime import date
from typing import AsyncIterator, Optional, Sequence

from . import date_math
from .lanes import assign_lanes
from .models import (
    ErrorKind,
    Event,
    EventPlacement,
    Lane,
    ProcessedTimelineData,
    Result,
    Snapshot,
)
from .move import DEFAULT_MAX_YEAR_OFFSET, evaluate_move
from .notifier import CLOSED, QueueNotifier
from .protocols import EventStore


def compute_layout(events: Sequence[Event], zoom_level: float, version: int = 0) -> ProcessedTimelineData:
    """Lanes, date range, total width and per-event geometry for one set of events."""
    zoom_level = date_math.clamp_zoom(zoom_level)
    if not events:
        return ProcessedTimelineData(zoom_level=zoom_level, snapshot_version=version)

    lanes = tuple(
        Lane(index=index, events=tuple(lane_events))
        for index, lane_events in enumerate(assign_lanes(events))
    )
    min_date = date_math.find_min_date(events)
    max_date = date_math.find_max_date(events)

    placements = tuple(
        EventPlacement(
            event=event,
            lane_index=lane.index,
            x=date_math.x_position(event.start_date, min_date, zoom_level),
            width=date_math.event_width(event.start_date, event.end_date, zoom_level),
        )
        for lane in lanes
        for event in lane.events
    )

    return ProcessedTimelineData(
        lanes=lanes,
        min_date=min_date,
        max_date=max_date,
        total_width=date_math.timeline_width(min_date, max_date, zoom_level),
        zoom_level=zoom_level,
        snapshot_version=version,
        placements=placements,
    )


def validate_event(event: Event) -> Optional[Result]:
    """Returns a failed result for an edit that must not reach the store, else None."""
    if not event.name:
        return Result.failure(ErrorKind.VALIDATION, "Event name cannot be empty")
    if event.end_date < event.start_date:
        return Result.failure(ErrorKind.VALIDATION, "End date cannot be before start date")
    return None


class Timeline:
    """
    Application-facing facade over one event store and the current zoom level.

    Every store publication and every zoom change produces a fresh
    `ProcessedTimelineData`, delivered to `watch()` subscribers. Edits, deletes
    and moves issued through this object run one at a time, so a move's
    collision check and its write see the same state.
    """

    def __init__(
        self,
        store: EventStore,
        *,
        zoom_level: float = 1.0,
        zoom_step: float = date_math.DEFAULT_ZOOM_STEP,
        max_year_offset: int = DEFAULT_MAX_YEAR_OFFSET,
        today: Optional[date] = None,
    ):
        self.store = store
        self.zoom_step = zoom_step
        self.max_year_offset = max_year_offset
        self._today = today
        self._zoom_level = date_math.clamp_zoom(zoom_level)
        self._command_lock = asyncio.Lock()
        self._layouts = QueueNotifier("timeline layout")
        self._layout_version = store.snapshot().version
        self._task: asyncio.Task | None = None

    @property
    def zoom_level(self) -> float:
        return self._zoom_level

    def layout(self) -> ProcessedTimelineData:
        snapshot = self.store.snapshot()
        return compute_layout(snapshot.events, self._zoom_level, snapshot.version)

    async def start(self):
        """Starts following the store so watchers see every change."""
        if self._task:
            return
        if self._layouts.closed:
            self._layouts = QueueNotifier("timeline layout")
        self._layout_version = self.store.snapshot().version
        self._task = asyncio.create_task(self._follow_store())
        logging.info(f"Timeline started at store version {self._layout_version}")

    async def stop(self):
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self._layouts.close()
        logging.info("Timeline stopped")

    async def _follow_store(self):
        async for snapshot in self.store.observe():
            if snapshot.version <= self._layout_version:
                continue
            self._layout_version = snapshot.version
            await self._publish(snapshot)

    async def _publish(self, snapshot: Snapshot):
        await self._layouts.publish(
            compute_layout(snapshot.events, self._zoom_level, snapshot.version)
        )

    async def watch(self) -> AsyncIterator[ProcessedTimelineData]:
        """Yields the current layout, then a new one after every change."""
        queue = await self._layouts.subscribe()
        last = self.layout()
        try:
            yield last
            while True:
                item = await queue.get()
                if item is CLOSED:
                    return
                if item.snapshot_version < last.snapshot_version:
                    continue
                if (item.snapshot_version, item.zoom_level) == (last.snapshot_version, last.zoom_level):
                    continue
                last = item
                yield item
        finally:
            await self._layouts.unsubscribe(queue)

    async def set_zoom(self, zoom_level: float) -> float:
        clamped = date_math.clamp_zoom(zoom_level)
        if clamped != self._zoom_level:
            self._zoom_level = clamped
            logging.debug(f"Zoom level set to {clamped}")
            await self._publish(self.store.snapshot())
        return self._zoom_level

    async def zoom_in(self) -> float:
        return await self.set_zoom(date_math.zoom_in(self._zoom_level, self.zoom_step))

    async def zoom_out(self) -> float:
        return await self.set_zoom(date_math.zoom_out(self._zoom_level, self.zoom_step))

    def find_event(self, event_id: int) -> Optional[Event]:
        for event in self.store.snapshot().events:
            if event.id == event_id:
                return event
        return None

    async def edit_event(self, event: Event) -> Result[Event]:
        invalid = validate_event(event)
        if invalid is not None:
            logging.info(f"Edit of event {event.id} rejected: {invalid.error.message}")
            return invalid
        async with self._command_lock:
            return await self.store.update(event)

    async def delete_event(self, event_id: int) -> Result[None]:
        if event_id <= 0:
            return Result.failure(ErrorKind.VALIDATION, "Event ID must be positive")
        async with self._command_lock:
            return await self.store.delete(event_id)

    async def move_event(self, event_id: int, pixel_offset: float) -> Result[Event]:
        async with self._command_lock:
            event = self.find_event(event_id)
            if event is None:
                return Result.failure(ErrorKind.NOT_FOUND, f"Event {event_id} not found")

            result = evaluate_move(
                event,
                pixel_offset,
                self._zoom_level,
                self.store.snapshot().events,
                today=self._today,
                max_year_offset=self.max_year_offset,
            )
            if not result.ok or result.value == event:
                return result
            return await self.store.update(result.value)
