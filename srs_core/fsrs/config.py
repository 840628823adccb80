"""
Scheduler Configuration

Configuration surface for the scheduler: target retention, interval bounds,
learning/relearning steps, fuzz toggle and the 21-weight parameter vector.

Values can be loaded from environment variables (and a .env file):

    FSRS_TARGET_RETENTION   float in (0, 1), default 0.9
    FSRS_MIN_INTERVAL       days, default 1
    FSRS_MAX_INTERVAL       days, at most 36500, default 36500
    FSRS_LEARNING_STEPS     minutes, space separated, default "1 10"
    FSRS_RELEARNING_STEPS   minutes, space separated, default "10"
    FSRS_ENABLE_FUZZ        true/false, default true
    FSRS_WEIGHTS            21 comma-separated floats

Invalid values never abort: each bad field falls back to its default with a
logged warning.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Mapping, Optional

from dotenv import load_dotenv

from srs_core.fsrs import parameters
from srs_core.fsrs.constants import (
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_MINIMUM_INTERVAL,
    DEFAULT_RELEARNING_STEPS,
    DEFAULT_TARGET_RETENTION,
    DEFAULT_WEIGHTS,
)


logger = logging.getLogger(__name__)

# Longest accepted learning/relearning step
MAX_STEP = timedelta(days=DEFAULT_MAXIMUM_INTERVAL)


@dataclass(frozen=True)
class SchedulerConfig:
    """Scheduler settings. Passed explicitly to every scheduling call."""
    target_retention: float = DEFAULT_TARGET_RETENTION
    minimum_interval: int = DEFAULT_MINIMUM_INTERVAL
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
    learning_steps: tuple[timedelta, ...] = DEFAULT_LEARNING_STEPS
    relearning_steps: tuple[timedelta, ...] = DEFAULT_RELEARNING_STEPS
    enable_fuzz: bool = True
    weights: tuple[float, ...] = DEFAULT_WEIGHTS


DEFAULT_CONFIG = SchedulerConfig()


def _valid_steps(steps) -> bool:
    return (
        isinstance(steps, tuple)
        and len(steps) > 0
        and all(isinstance(s, timedelta) and timedelta(0) < s <= MAX_STEP for s in steps)
    )


def validate_config(config: SchedulerConfig) -> list[str]:
    """
    List configuration problems.

    Returns:
        Error messages (empty if the configuration is usable as-is)
    """
    errors: list[str] = []

    retention = config.target_retention
    if not isinstance(retention, (int, float)) or not math.isfinite(retention) or not 0 < retention < 1:
        errors.append(f"target_retention must be in (0, 1), got {retention!r}")

    if not isinstance(config.minimum_interval, int) or config.minimum_interval < 1:
        errors.append(f"minimum_interval must be an integer >= 1, got {config.minimum_interval!r}")
    if not isinstance(config.maximum_interval, int) or not 1 <= config.maximum_interval <= DEFAULT_MAXIMUM_INTERVAL:
        errors.append(f"maximum_interval must be an integer in [1, {DEFAULT_MAXIMUM_INTERVAL}], got {config.maximum_interval!r}")
    elif isinstance(config.minimum_interval, int) and config.minimum_interval > config.maximum_interval:
        errors.append(
            f"minimum_interval {config.minimum_interval} exceeds maximum_interval {config.maximum_interval}"
        )

    if not _valid_steps(config.learning_steps):
        errors.append(f"learning_steps must be a non-empty tuple of positive timedeltas, got {config.learning_steps!r}")
    if not _valid_steps(config.relearning_steps):
        errors.append(f"relearning_steps must be a non-empty tuple of positive timedeltas, got {config.relearning_steps!r}")

    errors.extend(f"weights: {e}" for e in parameters.validate(config.weights).errors)
    return errors


def sanitize_config(config: SchedulerConfig) -> SchedulerConfig:
    """
    Replace every invalid field with its default, logging a warning each time.

    Args:
        config: Possibly invalid configuration

    Returns:
        Usable configuration
    """
    if not validate_config(config):
        return config

    changes = {}
    retention = config.target_retention
    if not isinstance(retention, (int, float)) or not math.isfinite(retention) or not 0 < retention < 1:
        logger.warning("Invalid target_retention %r, using %s", retention, DEFAULT_TARGET_RETENTION)
        changes["target_retention"] = DEFAULT_TARGET_RETENTION

    minimum, maximum = config.minimum_interval, config.maximum_interval
    bad_min = not isinstance(minimum, int) or minimum < 1
    bad_max = not isinstance(maximum, int) or not 1 <= maximum <= DEFAULT_MAXIMUM_INTERVAL
    if bad_min or bad_max or minimum > maximum:
        logger.warning(
            "Invalid interval bounds [%r, %r], using [%s, %s]",
            minimum, maximum, DEFAULT_MINIMUM_INTERVAL, DEFAULT_MAXIMUM_INTERVAL,
        )
        changes["minimum_interval"] = DEFAULT_MINIMUM_INTERVAL
        changes["maximum_interval"] = DEFAULT_MAXIMUM_INTERVAL

    if not _valid_steps(config.learning_steps):
        logger.warning("Invalid learning_steps %r, using defaults", config.learning_steps)
        changes["learning_steps"] = DEFAULT_LEARNING_STEPS
    if not _valid_steps(config.relearning_steps):
        logger.warning("Invalid relearning_steps %r, using defaults", config.relearning_steps)
        changes["relearning_steps"] = DEFAULT_RELEARNING_STEPS

    changes["weights"] = parameters.resolve_parameters(config.weights)
    return replace(config, **changes)


# ---- Environment loading ----

def _parse_float(raw: str) -> float:
    return float(raw.strip())


def _parse_int(raw: str) -> int:
    return int(raw.strip())


def _parse_steps(raw: str) -> tuple[timedelta, ...]:
    minutes = [float(part) for part in raw.replace(",", " ").split()]
    if not all(math.isfinite(m) and m > 0 for m in minutes):
        raise ValueError(f"steps must be positive finite minutes: {raw!r}")
    return tuple(timedelta(minutes=m) for m in minutes)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_weights(raw: str) -> tuple[float, ...]:
    return tuple(float(part) for part in raw.split(",") if part.strip())


_ENV_FIELDS = (
    ("FSRS_TARGET_RETENTION", "target_retention", _parse_float),
    ("FSRS_MIN_INTERVAL", "minimum_interval", _parse_int),
    ("FSRS_MAX_INTERVAL", "maximum_interval", _parse_int),
    ("FSRS_LEARNING_STEPS", "learning_steps", _parse_steps),
    ("FSRS_RELEARNING_STEPS", "relearning_steps", _parse_steps),
    ("FSRS_ENABLE_FUZZ", "enable_fuzz", _parse_bool),
    ("FSRS_WEIGHTS", "weights", _parse_weights),
)


def load_config(environ: Optional[Mapping[str, str]] = None) -> SchedulerConfig:
    """
    Build a SchedulerConfig from environment variables.

    Args:
        environ: Mapping to read from. When omitted, .env is loaded and
            os.environ is used.

    Returns:
        Sanitized configuration
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    values = {}
    for env_name, field_name, parse in _ENV_FIELDS:
        raw = environ.get(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            values[field_name] = parse(raw)
        except (ValueError, OverflowError):
            logger.warning("Could not parse %s=%r, using default", env_name, raw)

    return sanitize_config(SchedulerConfig(**values))
