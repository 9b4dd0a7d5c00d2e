from typing import List, Sequence

from .models import Event


def assign_lanes(events: Sequence[Event]) -> List[List[Event]]:
    """
    Partitions events into the fewest lanes such that no two events in a lane
    overlap.

    Events are visited in start-date order (stable, so equal starts keep their
    input order) and each goes into the first lane, in creation order, whose last
    event ends strictly before it starts. An event starting on the day another
    ends does not fit behind it. When no lane fits, a new one is appended.

    Greedy first-fit over left endpoints is optimal for interval graphs: the lane
    count equals the largest number of events sharing a single day.
    """
    lanes: List[List[Event]] = []
    for event in sorted(events, key=lambda e: e.start_date):
        for lane in lanes:
            if lane[-1].end_date < event.start_date:
                lane.append(event)
                break
        else:
            lanes.append([event])
    return lanes
