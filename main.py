import argparse
import asyncio
import logging
from datetime import date

from timeline_lanes import Event, timeline_factory
from timeline_lanes.date_math import pixels_per_day

SAMPLE_EVENTS = [
    Event(id=1, name="First item", start_date=date(2025, 1, 1), end_date=date(2025, 1, 5)),
    Event(id=2, name="Second item", start_date=date(2025, 1, 2), end_date=date(2025, 1, 8)),
    Event(id=3, name="Design pass", start_date=date(2025, 1, 6), end_date=date(2025, 1, 13)),
    Event(id=4, name="Review", start_date=date(2025, 1, 14), end_date=date(2025, 1, 14)),
    Event(id=5, name="Third item", start_date=date(2025, 2, 1), end_date=date(2025, 2, 15)),
    Event(id=6, name="Fourth item with a super long name", start_date=date(2025, 1, 12), end_date=date(2025, 2, 16)),
    Event(id=7, name="Fifth item with a super long name", start_date=date(2025, 2, 1), end_date=date(2025, 2, 2)),
    Event(id=8, name="Kickoff", start_date=date(2025, 1, 1), end_date=date(2025, 1, 5)),
]


def print_layout(layout):
    print(
        f"{len(layout.lanes)} lanes, {layout.min_date} .. {layout.max_date}, "
        f"{layout.total_width:.0f}px at zoom {layout.zoom_level}"
    )
    for placement in layout.placements:
        e = placement.event
        print(
            f"  lane {placement.lane_index}  x={placement.x:>7.0f}  w={placement.width:>6.0f}  "
            f"#{e.id} {e.name} ({e.start_date} - {e.end_date})"
        )


async def main():
    parser = argparse.ArgumentParser(description="Lay out the sample timeline and optionally move one event.")
    parser.add_argument("--zoom", type=float, default=1.0)
    parser.add_argument("--move-id", type=int, help="Event to drag")
    parser.add_argument("--days", type=float, default=0.0, help="Drag distance in days at the current zoom")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(message)s")

    async with timeline_factory(SAMPLE_EVENTS, zoom_level=args.zoom) as timeline:
        print_layout(timeline.layout())
        if args.move_id is None:
            return

        original = timeline.find_event(args.move_id)
        offset = args.days * pixels_per_day(timeline.zoom_level)
        result = await timeline.move_event(args.move_id, offset)
        if not result.ok:
            print(f"\nMove rejected ({result.error.kind.value}): {result.error.message}")
            return
        if result.value == original:
            print(f"\nMove of #{args.move_id} by {offset:.0f}px is below the half-day threshold, nothing changed")
            return
        print(f"\nMoved #{args.move_id} by {offset:.0f}px:")
        print_layout(timeline.layout())


if __name__ == "__main__":
    asyncio.run(main())
