from typing import Iterable, List

from .models import Event


def overlaps(a: Event, b: Event) -> bool:
    # Open intervals: an end that meets the other's start is not an overlap.
    return a.start_date < b.end_date and b.start_date < a.end_date


def find_conflicts(candidate: Event, others: Iterable[Event]) -> List[Event]:
    """Every event in `others` (other than `candidate` itself) that overlaps it, in input order."""
    return [
        other
        for other in others
        if other.id != candidate.id and overlaps(candidate, other)
    ]
