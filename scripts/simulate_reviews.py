"""
Simulate a sequence of reviews for one item.

Replays ratings on an in-memory store with a fixed gap between reviews and
prints the state after each one. Useful for eyeballing how configuration
changes affect intervals.

Usage:
    python -m scripts.simulate_reviews good good hard again good

    # Three days between reviews, custom retention
    python -m scripts.simulate_reviews good good good --gap-days 3 --retention 0.85
"""

import argparse
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from srs_core import fsrs


RATING_NAMES = {rating.name.lower(): rating for rating in fsrs.Rating}


def parse_rating(value: str) -> fsrs.Rating:
    """Accept 'good' / 'GOOD' / '3'."""
    key = value.strip().lower()
    if key in RATING_NAMES:
        return RATING_NAMES[key]
    try:
        return fsrs.Rating(int(key))
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown rating: {value!r}")


def format_state(index: int, rating: fsrs.Rating, state: fsrs.MemoryState) -> str:
    return (
        f"{index:>3}  {rating.name:<6} -> {state.state.name:<10} "
        f"S={state.stability:>9.4f}  D={state.difficulty:>6.3f}  "
        f"R={state.retrievability:.3f}  next={state.scheduled_days:>8.3f}d  "
        f"reps={state.reps} lapses={state.lapses}"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay ratings through the FSRS scheduler")
    parser.add_argument("ratings", nargs="+", type=parse_rating, help="again/hard/good/easy or 1-4")
    parser.add_argument(
        "--gap-days",
        type=float,
        default=None,
        help="Days between reviews (default: review exactly when due)"
    )
    parser.add_argument("--retention", type=float, default=None, help="Target retention")
    parser.add_argument("--no-fuzz", action="store_true", help="Disable interval fuzz")
    parser.add_argument("--item-id", type=str, default="simulated-item")
    args = parser.parse_args(argv)

    config = fsrs.load_config()
    if args.retention is not None:
        config = replace(config, target_retention=args.retention)
    if args.no_fuzz:
        config = replace(config, enable_fuzz=False)
    config = fsrs.sanitize_config(config)

    store = fsrs.InMemoryStore()
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    print("=" * 100)
    print(f"Simulating {len(args.ratings)} reviews of {args.item_id} "
          f"(retention={config.target_retention}, fuzz={config.enable_fuzz})")
    print("=" * 100)

    for index, rating in enumerate(args.ratings, 1):
        state, _ = fsrs.record_review(store, args.item_id, fsrs.ReviewOutcome(rating, now), config)
        print(format_state(index, rating, state))
        if args.gap_days is not None:
            now = now + timedelta(days=args.gap_days)
        else:
            now = state.due

    print("-" * 100)
    print(f"History: {len(store.load_history(args.item_id))} reviews")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
