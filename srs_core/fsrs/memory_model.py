"""
Memory Model - stability/difficulty after a graded review

Ties the LTM and STM formulas together:
- First-ever review: initial S and D from the rating
- Same-day review (elapsed < 1 day): STM stability update
- Otherwise: LTM lapse branch (Again) or recall branch (Hard/Good/Easy)

Every result is clamped so that stability > 0 and difficulty is in [1, 10].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from srs_core.fsrs import ltm_updates, stm_updates
from srs_core.fsrs.constants import S_MAX, S_MIN, Rating
from srs_core.fsrs.memory_state import (
    MemoryState,
    calculate_retrievability,
    clamp,
    clamp_difficulty,
)


@dataclass(frozen=True)
class MemoryUpdate:
    """New memory parameters produced by one review."""
    stability: float
    difficulty: float
    retrievability: float  # R at review time, before the grade


def _clamped(stability: float, difficulty: float, retrievability: float) -> MemoryUpdate:
    return MemoryUpdate(
        stability=clamp(stability, S_MIN, S_MAX),
        difficulty=clamp_difficulty(difficulty),
        retrievability=clamp(retrievability, 0.0, 1.0),
    )


def init_state(rating: Rating, params: Sequence[float]) -> MemoryUpdate:
    """
    Memory parameters after an item's first-ever review.

    Args:
        rating: First rating
        params: Parameter vector

    Returns:
        MemoryUpdate (retrievability 0: nothing was retained before)
    """
    return _clamped(
        ltm_updates.initial_stability(rating, params),
        ltm_updates.initial_difficulty(rating, params),
        0.0,
    )


def next_state(
    state: MemoryState,
    rating: Rating,
    elapsed_days: float,
    params: Sequence[float]
) -> MemoryUpdate:
    """
    Memory parameters after a subsequent review.

    Args:
        state: State before the review
        rating: User rating
        elapsed_days: Days since the previous review
        params: Parameter vector

    Returns:
        MemoryUpdate with clamped stability/difficulty
    """
    if not state.stability > 0:
        return init_state(rating, params)

    elapsed_days = max(elapsed_days, 0.0)
    retrievability = calculate_retrievability(elapsed_days, state.stability, params)

    # Difficulty always uses the pre-review D; so does the stability update
    difficulty = ltm_updates.next_difficulty(state.difficulty, rating, params)

    if elapsed_days < 1.0:
        stability = stm_updates.next_short_term_stability(state.stability, rating, params)
    elif rating == Rating.AGAIN:
        stability = ltm_updates.next_forget_stability(
            state.stability, state.difficulty, retrievability, params
        )
    else:
        stability = ltm_updates.next_recall_stability(
            state.stability, state.difficulty, retrievability, rating, params
        )

    return _clamped(stability, difficulty, retrievability)
