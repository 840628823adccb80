"""
Intervals - next review interval from stability and target retention

Inverts the forgetting curve to find when R drops to the target retention:
    t = S / FACTOR * (target ^ (1 / DECAY) - 1)

The whole-day interval is clamped to [minimum, maximum] and then fuzzed.
Fuzz is seeded from (item id, repetition count), never from a global PRNG,
so the same inputs always produce the same interval.

Learning and relearning phases use fixed step delays instead.
"""

from __future__ import annotations

import random
from datetime import timedelta
from typing import Optional, Sequence

from srs_core.fsrs.constants import (
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_MINIMUM_INTERVAL,
    FUZZ_MIN_INTERVAL,
    FUZZ_RANGES,
    Rating,
)
from srs_core.fsrs.memory_state import forgetting_curve


def optimal_interval(
    stability: float,
    target_retention: float,
    params: Sequence[float]
) -> float:
    """
    Unrounded days until retrievability falls to target_retention.

    At target_retention == 0.9 this equals the stability itself.
    Lower targets give strictly longer intervals.

    Args:
        stability: Current stability in days
        target_retention: Desired recall probability, in (0, 1)
        params: Parameter vector

    Returns:
        Interval in days (0 for non-positive stability)
    """
    if not stability > 0:
        return 0.0
    decay, factor = forgetting_curve(params)
    return stability / factor * (target_retention ** (1.0 / decay) - 1.0)


def fuzz_key(item_id: str, rep_count: int) -> str:
    """Deterministic fuzz seed for one repetition of one item."""
    return f"{item_id}:{rep_count}"


def fuzz_range(interval: float) -> float:
    """Half-width of the fuzz band for an interval (FSRS-6 bands)."""
    delta = 1.0
    for start, end, factor in FUZZ_RANGES:
        delta += factor * max(min(interval, end) - start, 0.0)
    return delta


def fuzz_interval(
    interval: int,
    key: str,
    minimum_interval: int = DEFAULT_MINIMUM_INTERVAL,
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
) -> int:
    """
    Spread an interval over a deterministic band to avoid review clustering.

    Intervals shorter than 2.5 days are not fuzzed.

    Args:
        interval: Clamped whole-day interval
        key: Seed from fuzz_key()
        minimum_interval: Lower clamp (days)
        maximum_interval: Upper clamp (days)

    Returns:
        Fuzzed interval in days
    """
    if interval < FUZZ_MIN_INTERVAL:
        return interval

    delta = fuzz_range(interval)
    low = max(2, minimum_interval, int(round(interval - delta)))
    high = min(int(round(interval + delta)), maximum_interval)
    low = min(low, high)

    rng = random.Random(key)
    return rng.randint(low, high)


def next_interval(
    stability: float,
    target_retention: float,
    params: Sequence[float],
    minimum_interval: int = DEFAULT_MINIMUM_INTERVAL,
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL,
    key: Optional[str] = None
) -> int:
    """
    Whole-day interval until the next review.

    Args:
        stability: Stability after the review
        target_retention: Desired recall probability, in (0, 1)
        params: Parameter vector
        minimum_interval: Lower clamp (days)
        maximum_interval: Upper clamp (days)
        key: Fuzz seed from fuzz_key(); no fuzz when None

    Returns:
        Interval in days
    """
    raw = optimal_interval(stability, target_retention, params)
    interval = max(minimum_interval, min(int(round(raw)), maximum_interval))
    if key is not None:
        interval = fuzz_interval(interval, key, minimum_interval, maximum_interval)
    return interval


def learning_step_delay(
    steps: Sequence[timedelta],
    step: int,
    rating: Rating
) -> timedelta:
    """
    Fixed delay for a learning/relearning step.

    - Again: back to the first step
    - Hard: repeat the current step (step 0 uses the mean of the first two
      steps, or 1.5x the only step)
    - Good: the given step

    Args:
        steps: Configured step delays (non-empty)
        step: Step index the item is at after this review
        rating: User rating

    Returns:
        Delay until the item is due again
    """
    if rating == Rating.AGAIN:
        return steps[0]
    if rating == Rating.HARD and step == 0:
        if len(steps) == 1:
            return steps[0] * 1.5
        return (steps[0] + steps[1]) / 2
    return steps[min(step, len(steps) - 1)]
