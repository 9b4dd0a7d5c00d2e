from datetime import date, timedelta

import pytest

from timeline_lanes import Event

DAY1 = date(2024, 3, 1)


def day(n: int) -> date:
    """Calendar date for day `n` of the test timeline (day 1 is DAY1)."""
    return DAY1 + timedelta(days=n - 1)


def make_event(event_id: int, name: str, start: int, end: int) -> Event:
    return Event(id=event_id, name=name, start_date=day(start), end_date=day(end))


@pytest.fixture
def scenario_events():
    return [
        make_event(1, "A", 1, 3),
        make_event(2, "B", 2, 4),
        make_event(3, "C", 5, 6),
    ]
