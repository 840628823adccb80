"""
Memory curve projection for reporting.

Compares the model's forgetting curve with what the reviewer actually
recalled. Purely derived from a stored state and its review history.
"""

from __future__ import annotations

import bisect
import math
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional, Sequence, TypeVar

import pandas as pd

from srs_core.fsrs.constants import DEFAULT_WEIGHTS, Rating
from srs_core.fsrs.memory_state import MemoryState, calculate_retrievability, ensure_utc
from srs_core.fsrs.review_log import ReviewHistory
from srs_core.analytics.types import CurvePoint, CurveRange, ReviewMarker


CURVE_COLUMNS = ["day", "predicted_retrievability", "actual_retrievability"]
MARKER_COLUMNS = ["day", "rating", "retrievability"]

# Display presets: days shown from day 0 (None = everything)
CURVE_RANGES: dict[str, Optional[int]] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "all": None,
}

_RECALLED = (Rating.HARD, Rating.GOOD, Rating.EASY)

T = TypeVar("T", CurvePoint, ReviewMarker)


def max_days_for_range(preset: CurveRange) -> Optional[int]:
    """Last day shown by a range preset (None for 'all')."""
    if preset not in CURVE_RANGES:
        raise ValueError(f"Unknown curve range {preset!r}, expected one of {list(CURVE_RANGES)}")
    return CURVE_RANGES[preset]


def filter_by_range(items: Iterable[T], preset: CurveRange) -> list[T]:
    """
    Keep curve points or review markers up to the preset's last day.
    """
    max_days = max_days_for_range(preset)
    if max_days is None:
        return list(items)
    return [item for item in items if item.day <= max_days]


class MemoryCurve:
    """
    Finite, restartable sequence of CurvePoint.

    Points are computed lazily; each iteration starts over from start_day.
    """

    def __init__(
        self,
        anchor: Optional[datetime],
        checkpoints: list[tuple[datetime, float]],
        actual_by_day: dict[int, float],
        markers: Sequence[ReviewMarker],
        range_days: int,
        params: Sequence[float],
        start_day: int = 0
    ):
        self.anchor = anchor
        self.range_days = range_days
        self.start_day = start_day
        self._checkpoints = checkpoints
        self._checkpoint_times = [moment for moment, _ in checkpoints]
        self._actual_by_day = actual_by_day
        self._markers = tuple(markers)
        self._params = params

    def __len__(self) -> int:
        return self.range_days + 1

    def __iter__(self) -> Iterator[CurvePoint]:
        for day in range(self.start_day, self.start_day + self.range_days + 1):
            yield CurvePoint(
                day=day,
                predicted_retrievability=self._predicted(day),
                actual_retrievability=self._actual_by_day.get(day),
            )

    def _predicted(self, day: int) -> float:
        if self.anchor is None:
            return 0.0
        moment = self.anchor + timedelta(days=day)
        index = bisect.bisect_right(self._checkpoint_times, moment) - 1
        if index < 0:
            return 0.0
        reviewed_at, stability = self._checkpoints[index]
        elapsed = (moment - reviewed_at) / timedelta(days=1)
        return calculate_retrievability(elapsed, stability, self._params)

    def to_frame(self) -> pd.DataFrame:
        """
        Materialize the curve as a DataFrame (one row per day).
        """
        rows = [
            (point.day, point.predicted_retrievability, point.actual_retrievability)
            for point in self
        ]
        return pd.DataFrame(rows, columns=CURVE_COLUMNS)

    def review_markers(self) -> tuple[ReviewMarker, ...]:
        """
        Reviews that fall inside the curve's day range, in review order.
        """
        last_day = self.start_day + self.range_days + 1
        return tuple(
            marker for marker in self._markers
            if self.start_day <= marker.day < last_day
        )

    def markers_frame(self) -> pd.DataFrame:
        rows = [
            (marker.day, int(marker.rating), marker.retrievability)
            for marker in self.review_markers()
        ]
        return pd.DataFrame(rows, columns=MARKER_COLUMNS)

    def __repr__(self) -> str:
        return f"<MemoryCurve(start_day={self.start_day}, points={len(self)})>"


def project_curve(
    state: MemoryState,
    history: ReviewHistory,
    range_days: int,
    params: Sequence[float] = DEFAULT_WEIGHTS,
    start_day: int = 0
) -> MemoryCurve:
    """
    Project retrievability day by day, alongside observed recall.

    Day 0 is the first review in the history (or the state's last review
    when the history is empty). Predicted values come from the most recent
    review at or before each day, assuming no later reviews happen. Actual
    values exist only on days with reviews: the share of that day's reviews
    that were recalled (Hard, Good or Easy).

    Args:
        state: Current stored state of the item
        history: Review history of the item
        range_days: Number of days after start_day to cover
        params: 21-weight parameter vector
        start_day: First day offset (may be negative)

    Returns:
        MemoryCurve with range_days + 1 points
    """
    if range_days < 0:
        raise ValueError(f"range_days must be non-negative, got {range_days}")

    entries = history.entries()

    checkpoints: list[tuple[datetime, float]] = [
        (ensure_utc(entry.outcome.timestamp), entry.resulting_state.stability)
        for entry in entries
    ]
    if state.last_review is not None:
        checkpoints.append((ensure_utc(state.last_review), state.stability))
    checkpoints.sort(key=lambda checkpoint: checkpoint[0])

    if entries:
        anchor = ensure_utc(entries[0].outcome.timestamp)
    elif state.last_review is not None:
        anchor = ensure_utc(state.last_review)
    else:
        anchor = None

    actual_by_day: dict[int, float] = {}
    markers: list[ReviewMarker] = []
    if anchor is not None:
        graded: dict[int, list[bool]] = defaultdict(list)
        for entry in entries:
            offset = (ensure_utc(entry.outcome.timestamp) - anchor) / timedelta(days=1)
            graded[math.floor(offset)].append(entry.outcome.rating in _RECALLED)
            markers.append(ReviewMarker(offset, entry.outcome.rating, entry.retrievability))
        actual_by_day = {
            day: sum(recalled) / len(recalled)
            for day, recalled in graded.items()
        }

    return MemoryCurve(anchor, checkpoints, actual_by_day, markers, range_days, params, start_day)
