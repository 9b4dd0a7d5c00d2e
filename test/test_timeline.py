import asyncio
from datetime import date, datetime

import pytest
from pytest_asyncio import fixture

from timeline_lanes import ErrorKind, Event, compute_layout, timeline_factory
from timeline_lanes.date_math import MAX_ZOOM, MIN_ZOOM, pixels_per_day
from timeline_lanes.timeline import validate_event
from conftest import day, make_event

TODAY = date(2024, 6, 1)


@fixture
async def timeline(scenario_events):
    async with timeline_factory(scenario_events, today=TODAY) as timeline:
        yield timeline


async def next_layout(stream):
    return await asyncio.wait_for(stream.__anext__(), timeout=1.0)


def test_layout_of_scenario(scenario_events):
    a, b, c = scenario_events
    layout = compute_layout(scenario_events, 1.0, version=4)

    assert [lane.index for lane in layout.lanes] == [0, 1]
    assert layout.lanes[0].events == (a, c)
    assert layout.lanes[1].events == (b,)
    assert layout.min_date == day(1)
    assert layout.max_date == day(6)
    assert layout.total_width == 6 * 40.0
    assert layout.zoom_level == 1.0
    assert layout.snapshot_version == 4

    geometry = {p.event.id: (p.lane_index, p.x, p.width) for p in layout.placements}
    assert geometry == {1: (0, 0.0, 120.0), 3: (0, 160.0, 80.0), 2: (1, 40.0, 120.0)}


def test_layout_of_nothing():
    layout = compute_layout([], 2.0)
    assert layout.lanes == ()
    assert layout.min_date is None
    assert layout.max_date is None
    assert layout.total_width == 0.0
    assert layout.zoom_level == 2.0


def test_layout_clamps_zoom(scenario_events):
    assert compute_layout(scenario_events, 100.0).zoom_level == MAX_ZOOM


def test_event_normalizes_input():
    event = Event(id=1, name="  Launch  ", start_date=datetime(2024, 1, 1, 18, 30), end_date="2024-01-02")
    assert event.name == "Launch"
    assert event.start_date == date(2024, 1, 1)
    assert event.end_date == date(2024, 1, 2)


def test_validate_event():
    assert validate_event(make_event(1, "A", 1, 1)) is None
    blank = validate_event(make_event(1, "   ", 1, 2))
    assert blank.error.kind == ErrorKind.VALIDATION
    backwards = validate_event(make_event(1, "A", 3, 2))
    assert backwards.error.kind == ErrorKind.VALIDATION
    assert "before start" in backwards.error.message


@pytest.mark.asyncio
async def test_factory_rejects_bad_configuration():
    with pytest.raises(ValueError, match="zoom_step"):
        async with timeline_factory([], zoom_step=1.0):
            pass
    with pytest.raises(ValueError, match="max_year_offset"):
        async with timeline_factory([], max_year_offset=-1):
            pass


@pytest.mark.asyncio
async def test_factory_skips_invalid_seed_events(caplog):
    seeds = [make_event(1, "ok", 1, 2), make_event(2, "", 1, 2), make_event(3, "backwards", 5, 1)]
    async with timeline_factory(seeds) as timeline:
        assert [e.id for e in timeline.store.snapshot().events] == [1]
    assert "Skipping seed event 2" in caplog.text
    assert "Skipping seed event 3" in caplog.text


@pytest.mark.asyncio
async def test_edit_event(timeline):
    result = await timeline.edit_event(make_event(2, "B", 10, 12))
    assert result.ok
    assert timeline.find_event(2).start_date == day(10)
    assert timeline.layout().lanes[0].events[-1].id == 2


@pytest.mark.asyncio
async def test_invalid_edit_never_reaches_the_store(timeline):
    before = timeline.store.snapshot()
    result = await timeline.edit_event(make_event(2, "", 1, 2))
    assert result.error.kind == ErrorKind.VALIDATION
    result = await timeline.edit_event(make_event(2, "B", 4, 2))
    assert result.error.kind == ErrorKind.VALIDATION
    assert timeline.store.snapshot() is before


@pytest.mark.asyncio
async def test_edit_unknown_event(timeline):
    result = await timeline.edit_event(make_event(77, "new", 1, 2))
    assert result.error.kind == ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_event(timeline):
    assert (await timeline.delete_event(0)).error.kind == ErrorKind.VALIDATION
    assert (await timeline.delete_event(8)).error.kind == ErrorKind.NOT_FOUND
    assert (await timeline.delete_event(2)).ok
    assert len(timeline.layout().lanes) == 1


@pytest.mark.asyncio
async def test_move_event_persists_the_shift(timeline):
    result = await timeline.move_event(3, 2 * pixels_per_day(1.0))
    assert result.ok
    moved = timeline.find_event(3)
    assert (moved.start_date, moved.end_date) == (day(7), day(8))
    assert timeline.store.version == 1


@pytest.mark.asyncio
async def test_move_below_threshold_does_not_write(timeline):
    result = await timeline.move_event(3, 0.4 * pixels_per_day(1.0))
    assert result.ok
    assert result.value == timeline.find_event(3)
    assert timeline.store.version == 0


@pytest.mark.asyncio
async def test_conflicting_move_leaves_store_unchanged(timeline):
    before = timeline.store.snapshot()
    result = await timeline.move_event(1, 3 * pixels_per_day(1.0))
    assert result.error.kind == ErrorKind.CONFLICT
    assert [c.id for c in result.error.conflicts] == [3]
    assert timeline.store.snapshot() is before


@pytest.mark.asyncio
async def test_move_unknown_event(timeline):
    result = await timeline.move_event(404, 80.0)
    assert result.error.kind == ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_move_uses_current_zoom(timeline):
    await timeline.set_zoom(2.0)
    await timeline.move_event(3, 2 * pixels_per_day(2.0))
    assert timeline.find_event(3).start_date == day(7)


@pytest.mark.asyncio
async def test_zoom_controls(timeline):
    assert timeline.zoom_level == 1.0
    assert await timeline.zoom_in() == 1.5
    assert await timeline.zoom_out() == 1.0
    assert await timeline.set_zoom(0.01) == MIN_ZOOM
    for _ in range(10):
        await timeline.zoom_in()
    assert timeline.zoom_level == MAX_ZOOM
    assert timeline.layout().total_width == 6 * pixels_per_day(MAX_ZOOM)


@pytest.mark.asyncio
async def test_watch_follows_store_and_zoom(timeline):
    stream = timeline.watch()
    first = await next_layout(stream)
    assert (first.snapshot_version, first.zoom_level) == (0, 1.0)
    assert len(first.lanes) == 2

    await timeline.delete_event(2)
    second = await next_layout(stream)
    assert second.snapshot_version == 1
    assert len(second.lanes) == 1

    await timeline.zoom_in()
    third = await next_layout(stream)
    assert (third.snapshot_version, third.zoom_level) == (1, 1.5)
    assert third.total_width == 6 * pixels_per_day(1.5)
    await stream.aclose()


@pytest.mark.asyncio
async def test_watch_sees_writes_made_directly_on_the_store(timeline):
    stream = timeline.watch()
    await next_layout(stream)
    await timeline.store.update(make_event(1, "A", 20, 21))
    layout = await next_layout(stream)
    assert layout.max_date == day(21)
    await stream.aclose()


@pytest.mark.asyncio
async def test_watchers_finish_when_factory_exits(scenario_events):
    versions = []

    async with timeline_factory(scenario_events, today=TODAY) as timeline:
        async def consume():
            async for layout in timeline.watch():
                versions.append(layout.snapshot_version)

        consumer = asyncio.create_task(consume())
        await asyncio.sleep(0.01)
        await timeline.move_event(3, 2 * pixels_per_day(1.0))
        await asyncio.sleep(0.01)

    await asyncio.wait_for(consumer, timeout=1.0)
    assert versions == [0, 1]


@pytest.mark.asyncio
async def test_non_finite_move_leaves_store_unchanged(timeline):
    before = timeline.store.snapshot()
    result = await timeline.move_event(1, float("nan"))
    assert result.error.kind == ErrorKind.OUT_OF_BOUNDS
    assert timeline.store.snapshot() is before


@pytest.mark.asyncio
async def test_watch_works_after_restart(timeline):
    await timeline.stop()
    await timeline.start()

    stream = timeline.watch()
    first = await next_layout(stream)
    assert first.snapshot_version == 0

    await timeline.delete_event(2)
    second = await next_layout(stream)
    assert second.snapshot_version == 1
    await stream.aclose()
