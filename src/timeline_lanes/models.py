"""
This module defines the core data models for the timeline using Pydantic.
These models are immutable value objects: events are replaced wholesale, never
mutated, and every derived view (lanes, layout, snapshots) is rebuilt from them.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class Event(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: str
    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _drop_time_of_day(cls, value: Any) -> Any:
        # Only whole days matter; a datetime is reduced to its calendar date.
        if isinstance(value, datetime):
            return value.date()
        return value


class Snapshot(BaseModel):
    """An immutable, point-in-time copy of the full event collection."""

    model_config = ConfigDict(frozen=True)

    version: int
    events: Tuple[Event, ...] = ()
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Lane(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    events: Tuple[Event, ...]


class EventPlacement(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: Event
    lane_index: int
    x: float
    width: float


class ProcessedTimelineData(BaseModel):
    model_config = ConfigDict(frozen=True)

    lanes: Tuple[Lane, ...] = ()
    min_date: Optional[date] = None
    max_date: Optional[date] = None
    total_width: float = 0.0
    zoom_level: float = 1.0
    snapshot_version: int = 0
    placements: Tuple[EventPlacement, ...] = ()


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    INVALID_RANGE = "invalid_range"
    OUT_OF_BOUNDS = "out_of_bounds"
    CONFLICT = "conflict"


class TimelineError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    # Only populated for conflicts: the events the candidate would overlap.
    conflicts: Tuple[Event, ...] = ()


class Result(BaseModel, Generic[T]):
    """
    Outcome of an operation that can fail in an expected way.
    Exactly one of `value` / `error` is meaningful; check `ok` first.
    """

    model_config = ConfigDict(frozen=True)

    value: Optional[T] = None
    error: Optional[TimelineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, conflicts: Tuple[Event, ...] = ()) -> "Result":
        return cls(error=TimelineError(kind=kind, message=message, conflicts=tuple(conflicts)))
