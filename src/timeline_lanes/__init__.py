# timeline_lanes package

from .models import (
    ErrorKind,
    Event,
    EventPlacement,
    Lane,
    ProcessedTimelineData,
    Result,
    Snapshot,
    TimelineError,
)
from .lanes import assign_lanes
from .collisions import find_conflicts, overlaps
from .move import evaluate_move
from .store import InMemoryEventStore
from .timeline import Timeline, compute_layout
from .factories import timeline_factory

__all__ = [
    "ErrorKind",
    "Event",
    "EventPlacement",
    "Lane",
    "ProcessedTimelineData",
    "Result",
    "Snapshot",
    "TimelineError",
    "assign_lanes",
    "find_conflicts",
    "overlaps",
    "evaluate_move",
    "InMemoryEventStore",
    "Timeline",
    "compute_layout",
    "timeline_factory",
]
