"""
Parameter Store - validation of the 21-weight FSRS vector

Weights may come from untrusted configuration. A vector is valid only if it
has exactly 21 finite numeric entries, each inside its documented range.
Any single violation invalidates the whole vector, which then falls back to
DEFAULT_WEIGHTS.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Tuple

from srs_core.fsrs.constants import DEFAULT_WEIGHTS, PARAMETER_COUNT, PARAMETER_RANGES


logger = logging.getLogger(__name__)

ParameterVector = Tuple[float, ...]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a parameter vector."""
    valid: bool
    errors: tuple[str, ...] = ()


def validate(vector: Any) -> ValidationResult:
    """
    Validate a candidate parameter vector.

    All problems are collected, not only the first one.

    Args:
        vector: Candidate weights (any sequence of numbers)

    Returns:
        ValidationResult with valid flag and error messages
    """
    if vector is None or isinstance(vector, (str, bytes)):
        return ValidationResult(False, (f"expected a sequence of {PARAMETER_COUNT} numbers, got {type(vector).__name__}",))
    try:
        values = list(vector)
    except TypeError:
        return ValidationResult(False, (f"expected a sequence of {PARAMETER_COUNT} numbers, got {type(vector).__name__}",))

    errors: list[str] = []
    if len(values) != PARAMETER_COUNT:
        errors.append(f"expected {PARAMETER_COUNT} weights, got {len(values)}")
        return ValidationResult(False, tuple(errors))

    for index, (value, (low, high)) in enumerate(zip(values, PARAMETER_RANGES)):
        if isinstance(value, bool) or not isinstance(value, Real):
            errors.append(f"w{index} is not a number: {value!r}")
        elif not math.isfinite(value):
            errors.append(f"w{index} is not finite: {value!r}")
        elif value < low or value > high:
            errors.append(f"w{index}={value} outside valid range [{low}, {high}]")

    return ValidationResult(not errors, tuple(errors))


def effective(vector: Any) -> ParameterVector:
    """
    Return the vector to schedule with: the input if valid, else the defaults.

    Pure: callers decide whether to log the fallback.
    """
    if validate(vector).valid:
        return tuple(float(w) for w in vector)
    return DEFAULT_WEIGHTS


def resolve_parameters(vector: Any, source: str = "configuration") -> ParameterVector:
    """
    effective() plus a warning when the vector had to be replaced.

    Args:
        vector: Candidate weights
        source: Where the weights came from (for the log message)

    Returns:
        Usable parameter vector
    """
    result = validate(vector)
    if result.valid:
        return tuple(float(w) for w in vector)
    logger.warning(
        "Invalid FSRS weights from %s, using defaults: %s",
        source,
        "; ".join(result.errors),
    )
    return DEFAULT_WEIGHTS


def _check_defaults() -> None:
    result = validate(DEFAULT_WEIGHTS)
    if not result.valid:
        raise RuntimeError(
            "Built-in FSRS default weights are invalid: " + "; ".join(result.errors)
        )


_check_defaults()
