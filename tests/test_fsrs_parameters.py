"""Tests for srs_core/fsrs/parameters.py -- weight validation and fallback."""

import logging
import math
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from srs_core.fsrs.constants import DEFAULT_WEIGHTS, PARAMETER_COUNT, PARAMETER_RANGES
from srs_core.fsrs.parameters import effective, resolve_parameters, validate


def test_defaults_are_valid():
    result = validate(DEFAULT_WEIGHTS)
    assert result.valid
    assert result.errors == ()
    assert len(DEFAULT_WEIGHTS) == PARAMETER_COUNT == len(PARAMETER_RANGES)


def test_twenty_element_vector_falls_back_to_defaults():
    """A malformed 20-weight vector reports failure and yields the defaults unchanged."""
    short = list(DEFAULT_WEIGHTS[:20])
    result = validate(short)
    assert not result.valid
    assert any("21" in error for error in result.errors)

    chosen = effective(short)
    assert chosen is DEFAULT_WEIGHTS
    assert len(chosen) == 21


def test_nan_and_infinity_rejected():
    weights = list(DEFAULT_WEIGHTS)
    weights[3] = float("nan")
    weights[8] = math.inf
    result = validate(weights)
    assert not result.valid
    assert len(result.errors) == 2
    assert effective(weights) is DEFAULT_WEIGHTS


def test_single_out_of_range_weight_invalidates_whole_vector():
    weights = list(DEFAULT_WEIGHTS)
    weights[7] = 0.6  # w7 range is [0.0, 0.5]
    result = validate(weights)
    assert not result.valid
    assert "w7" in result.errors[0]
    assert effective(weights) == DEFAULT_WEIGHTS


def test_range_bounds_are_inclusive():
    weights = [low for low, _ in PARAMETER_RANGES]
    assert validate(weights).valid
    weights = [high for _, high in PARAMETER_RANGES]
    assert validate(weights).valid


def test_non_numeric_inputs_rejected():
    assert not validate(None).valid
    assert not validate("0.1,0.2").valid
    assert not validate(42).valid
    weights = list(DEFAULT_WEIGHTS)
    weights[0] = True
    assert not validate(weights).valid
    weights[0] = "0.2"
    assert not validate(weights).valid


def test_effective_returns_valid_input_as_floats():
    weights = list(DEFAULT_WEIGHTS)
    weights[2] = 3
    chosen = effective(weights)
    assert chosen[2] == 3.0
    assert isinstance(chosen, tuple)


def test_resolve_parameters_logs_fallback(caplog):
    with caplog.at_level(logging.WARNING, logger="srs_core.fsrs.parameters"):
        chosen = resolve_parameters([1.0] * 5, source="test")
    assert chosen is DEFAULT_WEIGHTS
    assert "test" in caplog.text


def test_resolve_parameters_silent_when_valid(caplog):
    with caplog.at_level(logging.WARNING):
        resolve_parameters(DEFAULT_WEIGHTS)
    assert caplog.records == []
