"""
FSRS Constants and Parameters

All fixed constants for the FSRS-6 scheduler in one place: rating and
lifecycle enums, the default 21-weight vector, the per-weight valid ranges
and the clamping bounds applied to every computed value.
"""

from datetime import timedelta
from enum import IntEnum
from typing import Final


# ---- Ratings ----

class Rating(IntEnum):
    """User grade for a review."""
    AGAIN = 1   # Forgotten (lapse)
    HARD = 2    # Recalled with high effort
    GOOD = 3    # Recalled normally
    EASY = 4    # Recalled fluently


# ---- Lifecycle ----

class ItemState(IntEnum):
    """Lifecycle state of a learning item."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- Parameter vector ----

PARAMETER_COUNT: Final = 21

# FSRS-6.1.1 defaults (w0..w20)
DEFAULT_WEIGHTS: Final[tuple[float, ...]] = (
    0.212,   # w0:  initial stability (Again)
    1.2931,  # w1:  initial stability (Hard)
    2.3065,  # w2:  initial stability (Good)
    8.2956,  # w3:  initial stability (Easy)
    6.4133,  # w4:  initial difficulty base
    0.8334,  # w5:  initial difficulty rating slope
    3.0194,  # w6:  difficulty delta per rating
    0.001,   # w7:  difficulty mean reversion rate
    1.8722,  # w8:  recall stability growth
    0.1666,  # w9:  recall stability saturation
    0.796,   # w10: recall retrievability influence
    1.4835,  # w11: forget stability base
    0.0614,  # w12: forget difficulty exponent
    0.2629,  # w13: forget stability exponent
    1.6483,  # w14: forget retrievability influence
    0.6014,  # w15: hard penalty
    1.8729,  # w16: easy bonus
    0.5425,  # w17: short-term stability rate
    0.0912,  # w18: short-term rating offset
    0.0658,  # w19: short-term stability saturation
    0.1542,  # w20: forgetting curve decay
)

# Valid [min, max] per weight. Persisted items depend on these exact bounds.
PARAMETER_RANGES: Final[tuple[tuple[float, float], ...]] = (
    (0.1, 2.0),    # w0
    (0.5, 3.0),    # w1
    (1.0, 5.0),    # w2
    (3.0, 15.0),   # w3
    (3.0, 10.0),   # w4
    (0.5, 2.0),    # w5
    (0.5, 5.0),    # w6
    (0.0, 0.5),    # w7
    (0.5, 3.0),    # w8
    (0.0, 1.0),    # w9
    (0.5, 2.0),    # w10
    (0.5, 3.0),    # w11
    (0.0, 2.0),    # w12
    (0.0, 1.0),    # w13
    (0.0, 2.0),    # w14
    (0.5, 1.5),    # w15
    (1.0, 3.0),    # w16
    (0.0, 1.0),    # w17
    (0.0, 0.5),    # w18
    (0.0, 0.5),    # w19
    (0.0, 0.5),    # w20
)


# ---- Clamping bounds ----

S_MIN = 0.001      # Minimum stability (days) once reviewed
S_MAX = 36500.0    # Maximum stability (days)
D_MIN = 1.0        # Minimum difficulty
D_MAX = 10.0       # Maximum difficulty
DEFAULT_DIFFICULTY = 5.0  # Difficulty of a never-reviewed item

# w20 may be 0 per the range table; the decay exponent cannot be
MIN_DECAY = 0.01

# Retrievability at t == S
STABILITY_RETENTION = 0.9


# ---- Scheduling defaults ----

DEFAULT_TARGET_RETENTION = 0.9
DEFAULT_MINIMUM_INTERVAL = 1       # days
DEFAULT_MAXIMUM_INTERVAL = 36500   # days

DEFAULT_LEARNING_STEPS: Final[tuple[timedelta, ...]] = (
    timedelta(minutes=1),
    timedelta(minutes=10),
)
DEFAULT_RELEARNING_STEPS: Final[tuple[timedelta, ...]] = (
    timedelta(minutes=10),
)


# ---- Fuzz bands ----
# (start_days, end_days, factor): the fuzz half-width grows by `factor`
# for each day of the interval that falls inside the band.

FUZZ_MIN_INTERVAL = 2.5
FUZZ_RANGES: Final[tuple[tuple[float, float, float], ...]] = (
    (2.5, 7.0, 0.15),
    (7.0, 20.0, 0.1),
    (20.0, float("inf"), 0.05),
)
