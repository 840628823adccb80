"""
FSRS - Free Spaced Repetition Scheduler (FSRS-6)

Main API for scheduling reviews of learning items.

This module implements the 21-parameter FSRS-6 algorithm with:
- Power-law forgetting curve: R = (1 + FACTOR * t / S) ^ DECAY
- Stability/difficulty updates for recall, lapse and same-day reviews
- Learning/relearning steps and fuzzed review intervals
- Defensive parameter validation with fallback to defaults

Quick start:
    from srs_core import fsrs

    config = fsrs.load_config()
    state = fsrs.initialize_new_item("card-42")

    # Process a review (algorithm only, no DB calls)
    outcome = fsrs.ReviewOutcome(fsrs.Rating.GOOD, timestamp)
    state, log_entry = fsrs.process_review(state, outcome, config)
"""

# Core scheduler API (algorithm logic)
from srs_core.fsrs.scheduler import process_review

# Configuration
from srs_core.fsrs.config import (
    DEFAULT_CONFIG,
    SchedulerConfig,
    load_config,
    sanitize_config,
    validate_config,
)

# Constants and parameters
from srs_core.fsrs.constants import (
    DEFAULT_WEIGHTS,
    PARAMETER_COUNT,
    PARAMETER_RANGES,
    ItemState,
    Rating,
)
from srs_core.fsrs.parameters import (
    ParameterVector,
    ValidationResult,
    effective,
    resolve_parameters,
    validate,
)

# Memory state and model
from srs_core.fsrs.memory_state import (
    MemoryState,
    ReviewOutcome,
    calculate_retrievability,
    forgetting_curve,
    get_elapsed_days,
    initialize_new_item,
)
from srs_core.fsrs.memory_model import MemoryUpdate, init_state, next_state
from srs_core.fsrs.intervals import fuzz_key, next_interval, optimal_interval
from srs_core.fsrs.review_log import ReviewHistory, ReviewLogEntry

# Storage port
from srs_core.fsrs.database import (
    InMemoryStore,
    MemoryStore,
    SqlMemoryStore,
    record_review,
)


__all__ = [
    # Core algorithm
    "process_review",

    # Configuration
    "DEFAULT_CONFIG",
    "SchedulerConfig",
    "load_config",
    "sanitize_config",
    "validate_config",

    # Enums
    "ItemState",
    "Rating",

    # Parameters
    "DEFAULT_WEIGHTS",
    "PARAMETER_COUNT",
    "PARAMETER_RANGES",
    "ParameterVector",
    "ValidationResult",
    "effective",
    "resolve_parameters",
    "validate",

    # Memory state
    "MemoryState",
    "ReviewOutcome",
    "calculate_retrievability",
    "forgetting_curve",
    "get_elapsed_days",
    "initialize_new_item",
    "MemoryUpdate",
    "init_state",
    "next_state",

    # Intervals
    "fuzz_key",
    "next_interval",
    "optimal_interval",

    # Review log
    "ReviewHistory",
    "ReviewLogEntry",

    # Storage
    "InMemoryStore",
    "MemoryStore",
    "SqlMemoryStore",
    "record_review",
]
