"""
Memory State - FSRS item state and retrievability

Defines the per-item memory record and the power-law forgetting curve.

Key concepts:
- Stability (S): days until recall probability decays to 90%
- Difficulty (D): intrinsic item hardness (1-10 scale)
- Retrievability (R): probability of successful recall at time t

Forgetting curve (FSRS-6):
    R(t, S) = (1 + FACTOR * t / S) ^ DECAY
    DECAY = -w20, FACTOR = 0.9 ^ (1 / DECAY) - 1
so that R(0) = 1 and R(S) = 0.9.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from srs_core.fsrs.constants import (
    D_MAX,
    D_MIN,
    DEFAULT_DIFFICULTY,
    MIN_DECAY,
    STABILITY_RETENTION,
    ItemState,
    Rating,
)


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single learning item.

    Frozen: the review state machine produces successor states with
    dataclasses.replace() instead of editing in place.
    """
    item_id: str

    # Long-term memory parameters
    stability: float   # S, in days (0 only before the first review)
    difficulty: float  # D, range 1-10

    # Scheduling
    due: datetime
    last_review: Optional[datetime] = None
    elapsed_days: float = 0.0    # Actual gap before the most recent review
    scheduled_days: float = 0.0  # Planned gap after the most recent review

    # Counters
    reps: int = 0
    lapses: int = 0

    state: ItemState = ItemState.NEW
    step: int = 0  # Learning/relearning step index

    # Recall probability observed at the most recent review (derived)
    retrievability: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation (timestamps as ISO strings)."""
        return {
            "item_id": self.item_id,
            "stability": self.stability,
            "difficulty": self.difficulty,
            "due": self.due.isoformat(),
            "last_review": self.last_review.isoformat() if self.last_review else None,
            "elapsed_days": self.elapsed_days,
            "scheduled_days": self.scheduled_days,
            "reps": self.reps,
            "lapses": self.lapses,
            "state": int(self.state),
            "step": self.step,
            "retrievability": self.retrievability,
        }


def memory_state_from_dict(data: dict[str, Any]) -> MemoryState:
    """Inverse of MemoryState.to_dict()."""
    last_review = data.get("last_review")
    return MemoryState(
        item_id=data["item_id"],
        stability=float(data["stability"]),
        difficulty=float(data["difficulty"]),
        due=ensure_utc(datetime.fromisoformat(data["due"])),
        last_review=ensure_utc(datetime.fromisoformat(last_review)) if last_review else None,
        elapsed_days=float(data.get("elapsed_days", 0.0)),
        scheduled_days=float(data.get("scheduled_days", 0.0)),
        reps=int(data.get("reps", 0)),
        lapses=int(data.get("lapses", 0)),
        state=ItemState(int(data.get("state", ItemState.NEW))),
        step=int(data.get("step", 0)),
        retrievability=float(data.get("retrievability", 0.0)),
    )


@dataclass(frozen=True)
class ReviewOutcome:
    """A graded review as reported by the UI layer."""
    rating: Rating
    timestamp: datetime


def ensure_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp into [low, high]; NaN maps to low."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def clamp_difficulty(difficulty: float) -> float:
    return clamp(difficulty, D_MIN, D_MAX)


def forgetting_curve(params: Sequence[float]) -> tuple[float, float]:
    """
    Derive (DECAY, FACTOR) from the decay weight w20.

    Args:
        params: 21-weight parameter vector

    Returns:
        (decay, factor) with decay < 0 and R(S) == 0.9
    """
    decay = -max(params[20], MIN_DECAY)
    factor = STABILITY_RETENTION ** (1.0 / decay) - 1.0
    return decay, factor


def calculate_retrievability(
    elapsed_days: float,
    stability: float,
    params: Sequence[float]
) -> float:
    """
    Calculate retrievability using the power-law forgetting curve.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Interpretation:
    - Immediately after review: R = 1.0
    - t == S: R = 0.9
    - Never-reviewed item (S <= 0): R = 0.0

    Args:
        elapsed_days: Days since the last review (negative clamped to 0)
        stability: Current stability in days
        params: 21-weight parameter vector

    Returns:
        Retrievability between 0 and 1
    """
    if not stability > 0:
        return 0.0
    if not elapsed_days > 0:
        return 1.0
    decay, factor = forgetting_curve(params)
    return clamp((1.0 + factor * elapsed_days / stability) ** decay, 0.0, 1.0)


def get_elapsed_days(last_review: Optional[datetime], now: datetime) -> float:
    """
    Fractional days between the last review and now.

    Returns:
        Days elapsed (0 if never reviewed or if now precedes last_review)
    """
    if last_review is None:
        return 0.0
    delta = ensure_utc(now) - ensure_utc(last_review)
    return max(delta.total_seconds() / 86400.0, 0.0)


def initialize_new_item(
    item_id: str,
    now: Optional[datetime] = None,
    reps: int = 0,
    lapses: int = 0
) -> MemoryState:
    """
    Initialize state for an item that has never been reviewed.

    Args:
        item_id: Stable item identifier
        now: Creation time (default: current UTC time)
        reps: Carried-over review count (used when resetting a corrupted item)
        lapses: Carried-over lapse count

    Returns:
        MemoryState in NEW with stability 0, difficulty 5, due now
    """
    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    return MemoryState(
        item_id=item_id,
        stability=0.0,
        difficulty=DEFAULT_DIFFICULTY,
        due=now,
        reps=reps,
        lapses=lapses,
        state=ItemState.NEW,
    )


def find_state_problems(state: MemoryState) -> list[str]:
    """
    List impossible field combinations in a stored state.

    An empty list means the state is safe to schedule from.
    """
    problems: list[str] = []

    if not isinstance(state.state, ItemState):
        problems.append(f"unknown state {state.state!r}")
        return problems

    if not math.isfinite(state.stability) or state.stability < 0:
        problems.append(f"invalid stability {state.stability!r}")
    elif state.state != ItemState.NEW and state.stability == 0:
        problems.append(f"{state.state.name} item with zero stability")

    if not math.isfinite(state.difficulty) or not D_MIN <= state.difficulty <= D_MAX:
        problems.append(f"difficulty {state.difficulty!r} outside [{D_MIN}, {D_MAX}]")

    if state.state != ItemState.NEW and state.last_review is None:
        problems.append(f"{state.state.name} item without last_review")

    if state.reps < 0 or state.lapses < 0:
        problems.append(f"negative counters (reps={state.reps}, lapses={state.lapses})")
    elif state.lapses > state.reps:
        problems.append(f"lapses={state.lapses} exceeds reps={state.reps}")

    if not state.elapsed_days >= 0 or not state.scheduled_days >= 0:
        problems.append("negative elapsed/scheduled days")

    if state.step < 0:
        problems.append(f"negative step {state.step}")

    return problems
