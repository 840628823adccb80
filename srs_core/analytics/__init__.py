"""
Analytics package exports.
"""

from srs_core.analytics.memory_curve import (
    CURVE_COLUMNS,
    CURVE_RANGES,
    MARKER_COLUMNS,
    MemoryCurve,
    filter_by_range,
    max_days_for_range,
    project_curve,
)
from srs_core.analytics.types import CurvePoint, CurveRange, ReviewMarker

__all__ = [
    "CURVE_COLUMNS",
    "CURVE_RANGES",
    "MARKER_COLUMNS",
    "CurvePoint",
    "CurveRange",
    "MemoryCurve",
    "ReviewMarker",
    "filter_by_range",
    "max_days_for_range",
    "project_curve",
]
