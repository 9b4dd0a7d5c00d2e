import argparse
import random
import time
from datetime import date, timedelta

from timeline_lanes import Event, assign_lanes, compute_layout, evaluate_move
from timeline_lanes.date_math import pixels_per_day


def generate_events(num_events: int, seed: int):
    rng = random.Random(seed)
    base = date.today()
    events = []
    for i in range(num_events):
        start = base + timedelta(days=rng.randint(0, 365))
        end = start + timedelta(days=rng.randint(0, 14))
        events.append(Event(id=i + 1, name=f"event {i + 1}", start_date=start, end_date=end))
    return events


def benchmark(num_events: int, seed: int):
    print(f"Benchmarking with {num_events} events...")
    events = generate_events(num_events, seed)

    start = time.perf_counter()
    lanes = assign_lanes(events)
    lanes_time = time.perf_counter() - start

    start = time.perf_counter()
    compute_layout(events, 1.0)
    layout_time = time.perf_counter() - start

    # Every event dragged one day forward against the full set.
    start = time.perf_counter()
    rejected = 0
    for event in events:
        if not evaluate_move(event, pixels_per_day(1.0), 1.0, events).ok:
            rejected += 1
    move_time = time.perf_counter() - start

    print(f"\n--- Results for {num_events} events ---")
    print(f"Lane assignment - {lanes_time:.4f}s, {len(lanes)} lanes")
    print(f"Full layout     - {layout_time:.4f}s")
    print(f"Move checks     - {move_time:.4f}s ({num_events / move_time if move_time > 0 else 0:,.0f} moves/s, {rejected} rejected)")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--num-events", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()
    benchmark(args.num_events, args.seed)


if __name__ == "__main__":
    main()
