"""
Long-Term Memory (LTM) Updates

Implements the FSRS-6 stability and difficulty formulas for reviews that
happen at least a day after the previous one, plus the first-review
initialization.

Key principles:
- Success grows stability multiplicatively, less so when R is already high
  or the item is hard
- Failure shrinks stability, never above its pre-lapse value
- Difficulty moves with the rating and slowly reverts toward D0(Easy)
"""

from __future__ import annotations

import math
from typing import Sequence

from srs_core.fsrs.constants import S_MIN, Rating
from srs_core.fsrs.memory_state import clamp_difficulty


def initial_stability(rating: Rating, w: Sequence[float]) -> float:
    """
    S0(G) = w[G-1]

    Args:
        rating: First-ever rating
        w: Parameter vector

    Returns:
        Initial stability in days
    """
    return max(w[rating - 1], S_MIN)


def initial_difficulty(rating: Rating, w: Sequence[float], clamp: bool = True) -> float:
    """
    D0(G) = w4 - exp(w5 * (G - 1)) + 1

    Args:
        rating: First-ever rating
        w: Parameter vector
        clamp: Clamp into [1, 10] (the mean-reversion target is unclamped)

    Returns:
        Initial difficulty
    """
    difficulty = w[4] - math.exp(w[5] * (rating - 1)) + 1.0
    return clamp_difficulty(difficulty) if clamp else difficulty


def next_difficulty(difficulty: float, rating: Rating, w: Sequence[float]) -> float:
    """
    Update difficulty after a review.

    Formula:
        delta = -w6 * (G - 3)
        D'    = D + delta * (10 - D) / 9             (linear damping)
        D''   = w7 * D0(Easy) + (1 - w7) * D'        (mean reversion)

    w7 is the reversion rate. Its valid range is narrow because long-run
    difficulty drift is very sensitive to it.

    Returns:
        New difficulty clipped to [1, 10]
    """
    delta = -w[6] * (rating - 3)
    damped = difficulty + delta * (10.0 - difficulty) / 9.0
    target = initial_difficulty(Rating.EASY, w, clamp=False)
    return clamp_difficulty(w[7] * target + (1.0 - w[7]) * damped)


def next_recall_stability(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating,
    w: Sequence[float]
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1) * HP * EB)

    Where:
        - (e^(w10 * (1 - R)) - 1) vanishes as R -> 1 (little gain from
          reviewing something already well retained)
        - (11 - D) shrinks growth for hard items
        - HP = w15 for Hard, EB = w16 for Easy, else 1

    Returns:
        New stability (>= old stability)
    """
    hard_penalty = w[15] if rating == Rating.HARD else 1.0
    easy_bonus = w[16] if rating == Rating.EASY else 1.0

    growth = (
        math.exp(w[8])
        * (11.0 - difficulty)
        * stability ** -w[9]
        * (math.exp(w[10] * (1.0 - retrievability)) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    return stability * (1.0 + growth)


def next_forget_stability(
    stability: float,
    difficulty: float,
    retrievability: float,
    w: Sequence[float]
) -> float:
    """
    Update stability after failed retrieval (Again).

    Formula:
        S_long  = w11 * D^-w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))
        S_short = S / e^(w17 * w18)
        S'      = min(S_long, S_short)

    S_short caps the post-lapse stability below the pre-lapse value.

    Returns:
        New stability (reduced)
    """
    long_term = (
        w[11]
        * difficulty ** -w[12]
        * ((stability + 1.0) ** w[13] - 1.0)
        * math.exp(w[14] * (1.0 - retrievability))
    )
    short_term = stability / math.exp(w[17] * w[18])
    return min(long_term, short_term)
