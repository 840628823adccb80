"""
Types for memory-curve analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from srs_core.fsrs.constants import Rating


CurveRange = Literal["7d", "30d", "90d", "all"]


@dataclass(frozen=True)
class CurvePoint:
    """
    One day of a projected memory curve.
    """
    day: int
    predicted_retrievability: float
    actual_retrievability: Optional[float] = None


@dataclass(frozen=True)
class ReviewMarker:
    """
    One review plotted on the curve: when it happened, how it was graded,
    and the recall probability the model gave it at that moment.
    """
    day: float
    rating: Rating
    retrievability: float
