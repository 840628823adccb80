"""
Short-Term Memory (STM) Updates

Same-day correction: when a review happens less than a day after the
previous one, the long-term formulas would over-reward it (R is still close
to 1). FSRS-6 uses a separate, milder update instead.
"""

from __future__ import annotations

import math
from typing import Sequence

from srs_core.fsrs.constants import Rating


def next_short_term_stability(stability: float, rating: Rating, w: Sequence[float]) -> float:
    """
    Update stability for a review less than one day after the previous one.

    Formula:
        increase = e^(w17 * (G - 3 + w18)) * S^-w19
        S' = S * increase

    Good/Easy never shrink stability (increase floored at 1).

    Args:
        stability: Current stability
        rating: Same-day rating
        w: Parameter vector

    Returns:
        New stability
    """
    increase = math.exp(w[17] * (rating - 3 + w[18])) * stability ** -w[19]
    if rating in (Rating.GOOD, Rating.EASY):
        increase = max(increase, 1.0)
    return stability * increase
