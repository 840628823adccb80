"""Tests for srs_core/fsrs/scheduler.py -- the review state machine."""

import logging
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from srs_core.fsrs.config import SchedulerConfig
from srs_core.fsrs.constants import DEFAULT_WEIGHTS, ItemState, Rating
from srs_core.fsrs.intervals import next_interval
from srs_core.fsrs.memory_state import ReviewOutcome, initialize_new_item
from srs_core.fsrs.review_log import ReviewHistory
from srs_core.fsrs.scheduler import process_review
from srs_core.fsrs.stm_updates import next_short_term_stability


T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
NO_FUZZ = SchedulerConfig(enable_fuzz=False)


def review(state, rating, when, config=None, history=None):
    return process_review(state, ReviewOutcome(rating, when), config, history)


def test_new_item_rated_good_on_day_zero():
    """Regression triple for the default parameters."""
    state = initialize_new_item("card-1", T0)
    new_state, entry = review(state, Rating.GOOD, T0)

    assert new_state.stability == pytest.approx(2.3065, abs=1e-12)
    assert new_state.difficulty == pytest.approx(2.118103970459, abs=1e-9)
    assert new_state.due == T0 + timedelta(minutes=10)

    assert new_state.state == ItemState.LEARNING
    assert new_state.step == 1
    assert new_state.reps == 1
    assert new_state.lapses == 0
    assert new_state.last_review == T0
    assert entry.previous_state is state
    assert entry.resulting_state is new_state


def test_learning_graduates_after_last_step():
    state, _ = review(initialize_new_item("card-1", T0), Rating.GOOD, T0)
    later = T0 + timedelta(minutes=10)
    state, _ = review(state, Rating.GOOD, later, NO_FUZZ)

    assert state.state == ItemState.REVIEW
    assert state.step == 0
    # Same-day Good keeps stability; interval rounds to 2 days
    assert state.stability == pytest.approx(2.3065)
    assert state.difficulty == pytest.approx(2.111214235785, abs=1e-9)
    assert state.due == later + timedelta(days=2)
    assert state.scheduled_days == 2.0
    assert state.reps == 2


def test_new_item_rated_easy_goes_to_review():
    state, _ = review(initialize_new_item("card-1", T0), Rating.EASY, T0, NO_FUZZ)
    assert state.state == ItemState.REVIEW
    assert state.stability == pytest.approx(8.2956)
    assert state.due == T0 + timedelta(days=8)


def test_new_item_rated_again_or_hard_starts_learning():
    again, _ = review(initialize_new_item("a", T0), Rating.AGAIN, T0)
    assert again.state == ItemState.LEARNING
    assert again.step == 0
    assert again.due == T0 + timedelta(minutes=1)

    hard, _ = review(initialize_new_item("h", T0), Rating.HARD, T0)
    assert hard.state == ItemState.LEARNING
    assert hard.due == T0 + timedelta(minutes=5, seconds=30)


def _review_state(stability=10.0, difficulty=5.0, days_ago=10):
    return replace(
        initialize_new_item("card-9", T0),
        stability=stability,
        difficulty=difficulty,
        last_review=T0 - timedelta(days=days_ago),
        due=T0,
        reps=4,
        lapses=1,
        state=ItemState.REVIEW,
    )


def test_review_again_lapses_into_relearning():
    before = _review_state()
    after, entry = review(before, Rating.AGAIN, T0)

    assert after.state == ItemState.RELEARNING
    assert after.lapses == before.lapses + 1
    assert after.reps == before.reps + 1
    assert after.stability < before.stability
    assert after.due == T0 + timedelta(minutes=10)
    assert entry.retrievability == pytest.approx(0.9)
    assert after.elapsed_days == pytest.approx(10.0)


def test_relearning_recovers_to_review():
    lapsed, _ = review(_review_state(), Rating.AGAIN, T0)
    recovered, _ = review(lapsed, Rating.GOOD, T0 + timedelta(minutes=10), NO_FUZZ)
    assert recovered.state == ItemState.REVIEW
    assert recovered.lapses == lapsed.lapses
    assert recovered.due >= T0 + timedelta(days=1)

    still, _ = review(lapsed, Rating.HARD, T0 + timedelta(minutes=10))
    assert still.state == ItemState.RELEARNING


def test_review_success_stays_in_review():
    after, _ = review(_review_state(), Rating.GOOD, T0)
    assert after.state == ItemState.REVIEW
    assert after.stability > 10.0
    assert after.lapses == 1


def test_counters_monotonic_over_sequence():
    ratings = [Rating.GOOD, Rating.GOOD, Rating.AGAIN, Rating.HARD, Rating.GOOD,
               Rating.AGAIN, Rating.AGAIN, Rating.EASY, Rating.GOOD, Rating.HARD]
    state = initialize_new_item("card-seq", T0)
    now = T0
    for rating in ratings:
        previous = state
        state, _ = review(state, rating, now)
        assert state.reps == previous.reps + 1
        assert state.lapses >= previous.lapses
        assert state.lapses <= state.reps
        assert state.stability > 0
        assert 1.0 <= state.difficulty <= 10.0
        assert 0.0 <= state.retrievability <= 1.0
        assert state.due > now
        now = state.due


def test_history_is_appended():
    history = ReviewHistory("card-h")
    state = initialize_new_item("card-h", T0)
    state, first = review(state, Rating.GOOD, T0, history=history)
    state, second = review(state, Rating.GOOD, T0 + timedelta(minutes=10), history=history)
    assert list(history) == [first, second]
    assert history[0].resulting_state is history[1].previous_state


def test_corrupted_state_is_reset_with_warning(caplog):
    corrupted = replace(_review_state(), last_review=None)
    with caplog.at_level(logging.WARNING, logger="srs_core.fsrs.scheduler"):
        after, entry = review(corrupted, Rating.GOOD, T0)

    assert "card-9" in caplog.text
    assert after.state == ItemState.LEARNING
    assert after.stability == pytest.approx(2.3065)
    # Consistent counters survive the reset
    assert after.reps == corrupted.reps + 1
    assert after.lapses == corrupted.lapses
    assert entry.previous_state is corrupted


def test_negative_stability_is_reset():
    corrupted = replace(_review_state(), stability=-3.0, lapses=9)
    after, _ = review(corrupted, Rating.AGAIN, T0)
    assert after.state == ItemState.LEARNING
    assert after.reps == 1
    assert after.lapses == 0


def test_invalid_weights_fall_back(caplog):
    config = SchedulerConfig(weights=(1.0,) * 20)
    with caplog.at_level(logging.WARNING):
        state, _ = review(initialize_new_item("card-w", T0), Rating.GOOD, T0, config)
    assert state.stability == pytest.approx(2.3065)
    assert "Invalid FSRS weights" in caplog.text


def test_naive_timestamps_treated_as_utc():
    state, _ = review(initialize_new_item("card-n", T0), Rating.GOOD, datetime(2024, 1, 1, 9, 0))
    assert state.last_review == T0


def test_fuzzed_schedule_is_reproducible():
    before = _review_state(stability=30.0, days_ago=30)
    first, _ = review(before, Rating.GOOD, T0)
    second, _ = review(before, Rating.GOOD, T0)
    assert first.due == second.due


@pytest.mark.parametrize("config", [
    SchedulerConfig(target_retention=0.0),
    SchedulerConfig(target_retention=-0.5),
    SchedulerConfig(learning_steps=()),
    SchedulerConfig(relearning_steps=(timedelta(0),)),
    SchedulerConfig(minimum_interval=10, maximum_interval=5),
])
def test_invalid_config_fields_fall_back(config, caplog):
    with caplog.at_level(logging.WARNING, logger="srs_core.fsrs.config"):
        new, _ = review(initialize_new_item("card-c", T0), Rating.GOOD, T0, config)
        easy, _ = review(initialize_new_item("card-e", T0), Rating.EASY, T0, config)
    assert new.state == ItemState.LEARNING
    assert new.due == T0 + timedelta(minutes=10)
    assert easy.state == ItemState.REVIEW
    assert easy.due >= T0 + timedelta(days=1)
    assert caplog.records


def _learning_state(step_rating=Rating.GOOD):
    """NEW + rating at T0: Good lands on step 1, Again on step 0."""
    state, _ = review(initialize_new_item("card-l", T0), step_rating, T0)
    return state


def test_learning_again_restarts_steps():
    state = _learning_state()
    assert state.step == 1
    now = T0 + timedelta(minutes=10)
    after, _ = review(state, Rating.AGAIN, now)
    assert after.state == ItemState.LEARNING
    assert after.step == 0
    assert after.due == now + timedelta(minutes=1)
    assert after.lapses == 0


def test_learning_hard_repeats_step():
    now = T0 + timedelta(minutes=10)
    after, _ = review(_learning_state(), Rating.HARD, now)
    assert after.state == ItemState.LEARNING
    assert after.step == 1
    assert after.due == now + timedelta(minutes=10)

    first = _learning_state(Rating.AGAIN)
    now = T0 + timedelta(minutes=1)
    after, _ = review(first, Rating.HARD, now)
    assert after.step == 0
    assert after.due == now + timedelta(minutes=5, seconds=30)


def test_learning_easy_graduates():
    now = T0 + timedelta(minutes=10)
    after, _ = review(_learning_state(), Rating.EASY, now, NO_FUZZ)
    days = next_interval(after.stability, 0.9, DEFAULT_WEIGHTS)
    assert after.state == ItemState.REVIEW
    assert after.step == 0
    assert after.stability > 2.3065  # same-day Easy still grows stability
    assert after.due == now + timedelta(days=days)
    assert after.scheduled_days == float(days)


def test_relearning_again_restarts_relearning():
    lapsed, _ = review(_review_state(), Rating.AGAIN, T0)
    now = T0 + timedelta(minutes=10)
    after, _ = review(lapsed, Rating.AGAIN, now)
    assert after.state == ItemState.RELEARNING
    assert after.step == 0
    assert after.due == now + timedelta(minutes=10)
    assert after.lapses == lapsed.lapses


def test_relearning_easy_recovers():
    lapsed, _ = review(_review_state(), Rating.AGAIN, T0)
    now = T0 + timedelta(minutes=10)
    after, _ = review(lapsed, Rating.EASY, now, NO_FUZZ)
    days = next_interval(after.stability, 0.9, DEFAULT_WEIGHTS)
    assert after.state == ItemState.REVIEW
    assert after.step == 0
    assert after.due == now + timedelta(days=days)
    assert after.lapses == lapsed.lapses


def test_early_review_again_uses_short_term_path():
    before = _review_state(stability=10.0, days_ago=0.25)
    after, _ = review(before, Rating.AGAIN, T0)
    assert after.state == ItemState.RELEARNING
    assert after.lapses == before.lapses + 1
    assert after.elapsed_days == pytest.approx(0.25)
    assert after.stability == pytest.approx(
        next_short_term_stability(10.0, Rating.AGAIN, DEFAULT_WEIGHTS)
    )
    assert after.stability < before.stability
