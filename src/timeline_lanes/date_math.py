"""
Conversions between calendar dates and horizontal pixel offsets.

Everything here is a pure function of its arguments, so it can be called from
any number of tasks or threads at once. Positions are measured from the
earliest date on the timeline; one day is `pixels_per_day(zoom)` pixels wide.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from .models import Event

BASE_PIXELS_PER_DAY = 40.0
MIN_ZOOM = 0.25
MAX_ZOOM = 4.0
DEFAULT_ZOOM_STEP = 1.5

_ONE_DAY = timedelta(days=1)

DateLike = Union[date, datetime]


def clamp_zoom(zoom: float) -> float:
    return min(max(zoom, MIN_ZOOM), MAX_ZOOM)


def zoom_in(zoom: float, step: float = DEFAULT_ZOOM_STEP) -> float:
    return min(zoom * step, MAX_ZOOM)


def zoom_out(zoom: float, step: float = DEFAULT_ZOOM_STEP) -> float:
    return max(zoom / step, MIN_ZOOM)


def pixels_per_day(zoom: float) -> float:
    return BASE_PIXELS_PER_DAY * clamp_zoom(zoom)


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def days_between(a: DateLike, b: DateLike) -> int:
    """
    Whole days from `a` to `b`, negative when `b` is earlier.
    Partial days are truncated toward zero.
    """
    delta = _as_datetime(b) - _as_datetime(a)
    return int(delta / _ONE_DAY)


def duration_days(start: DateLike, end: DateLike) -> int:
    """Inclusive day count; a same-day event lasts one day, never less."""
    return max(1, days_between(start, end) + 1)


def x_position(value: DateLike, min_date: DateLike, zoom: float) -> float:
    return days_between(min_date, value) * pixels_per_day(zoom)


def event_width(start: DateLike, end: DateLike, zoom: float) -> float:
    return duration_days(start, end) * pixels_per_day(zoom)


def timeline_width(min_date: DateLike, max_date: DateLike, zoom: float) -> float:
    return (days_between(min_date, max_date) + 1) * pixels_per_day(zoom)


def find_min_date(events: Iterable[Event]) -> Optional[date]:
    return min((e.start_date for e in events), default=None)


def find_max_date(events: Iterable[Event]) -> Optional[date]:
    return max((e.end_date for e in events), default=None)
