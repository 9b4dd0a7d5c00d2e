"""
Turns a horizontal drag gesture into a date change for a single event.

`evaluate_move` never touches the store: it receives the other events as input
and returns either the shifted event or the reason the move was refused. The
caller decides whether to persist the result.
"""
import logging
import math
from datetime import date, timedelta
from typing import Iterable, Optional

from .collisions import find_conflicts
from .date_math import pixels_per_day
from .models import ErrorKind, Event, Result

MIN_PIXEL_OFFSET = 1.0
HALF_DAY = 0.5
DEFAULT_MAX_YEAR_OFFSET = 10


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def offset_to_days(pixel_offset: float, zoom_level: float) -> int:
    """
    Whole-day delta for a pixel offset, or 0 when the gesture moved less than
    half a day.
    """
    days_float = pixel_offset / pixels_per_day(zoom_level)
    if abs(days_float) < HALF_DAY:
        return 0
    return _round_half_away_from_zero(days_float)


def shift_event(event: Event, days: int) -> Event:
    delta = timedelta(days=days)
    return event.model_copy(
        update={"start_date": event.start_date + delta, "end_date": event.end_date + delta}
    )


def preview_start_date(event: Event, pixel_offset: float, zoom_level: float) -> date:
    """Start date shown while a drag is still in progress; no commit threshold applies."""
    days = _round_half_away_from_zero(pixel_offset / pixels_per_day(zoom_level))
    return event.start_date + timedelta(days=days)


def evaluate_move(
    event: Event,
    pixel_offset: float,
    zoom_level: float,
    other_events: Iterable[Event],
    *,
    today: Optional[date] = None,
    max_year_offset: int = DEFAULT_MAX_YEAR_OFFSET,
) -> Result[Event]:
    if not math.isfinite(pixel_offset):
        return Result.failure(
            ErrorKind.OUT_OF_BOUNDS, f"Cannot move event {event.id} by a non-finite offset ({pixel_offset}px)"
        )

    if abs(pixel_offset) < MIN_PIXEL_OFFSET:
        logging.debug(f"Ignoring move of event {event.id}: offset {pixel_offset}px below 1px")
        return Result.success(event)

    days = offset_to_days(pixel_offset, zoom_level)
    if days == 0:
        logging.debug(f"Ignoring move of event {event.id}: offset {pixel_offset}px below half a day")
        return Result.success(event)

    try:
        moved = shift_event(event, days)
    except OverflowError:
        return Result.failure(
            ErrorKind.OUT_OF_BOUNDS, f"Cannot move event {event.id} by {days} days: outside the calendar"
        )

    if moved.start_date > moved.end_date:
        return Result.failure(
            ErrorKind.INVALID_RANGE,
            f"Invalid date range after move: {moved.start_date} is after {moved.end_date}",
        )

    current_year = (today or date.today()).year
    if abs(moved.start_date.year - current_year) > max_year_offset:
        return Result.failure(
            ErrorKind.OUT_OF_BOUNDS,
            f"Cannot move event to {moved.start_date.year}: more than "
            f"{max_year_offset} years away from {current_year}",
        )

    conflicts = find_conflicts(moved, other_events)
    if conflicts:
        names = ", ".join(c.name for c in conflicts)
        logging.info(f"Move of event {event.id} by {days} days rejected, conflicts with: {names}")
        return Result.failure(ErrorKind.CONFLICT, f"Event conflicts with: {names}", conflicts)

    logging.info(f"Event {event.id} moved by {days} days ({pixel_offset}px at zoom {zoom_level})")
    return Result.success(moved)
