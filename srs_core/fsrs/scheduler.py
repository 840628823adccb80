"""
Scheduler - FSRS review state machine

Pure FSRS scheduling and state updates (no database calls).

Lifecycle:
    NEW -> LEARNING -> REVIEW <-> RELEARNING
    NEW + Easy graduates straight to REVIEW.

Main workflow:
1. Load item state (caller's responsibility)
2. Repair corrupted state (reset to NEW with a warning)
3. Compute new stability/difficulty (memory_model)
4. Apply the lifecycle transition and pick the next due time
5. Return new state + immutable log entry

Database I/O is handled by the database module.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Tuple

from srs_core.fsrs import intervals, memory_model, parameters
from srs_core.fsrs.config import DEFAULT_CONFIG, SchedulerConfig, sanitize_config
from srs_core.fsrs.constants import ItemState, Rating
from srs_core.fsrs.memory_state import (
    MemoryState,
    ReviewOutcome,
    ensure_utc,
    find_state_problems,
    get_elapsed_days,
    initialize_new_item,
)
from srs_core.fsrs.review_log import ReviewHistory, ReviewLogEntry


logger = logging.getLogger(__name__)


def process_review(
    state: MemoryState,
    outcome: ReviewOutcome,
    config: Optional[SchedulerConfig] = None,
    history: Optional[ReviewHistory] = None
) -> Tuple[MemoryState, ReviewLogEntry]:
    """
    Process a review and return the updated state + log entry.

    Never raises for bad data: corrupted states are reset to NEW and invalid
    config fields (weights included) fall back to their defaults, both with a
    logged warning.

    Args:
        state: State before the review (may be new or existing)
        outcome: Rating and timestamp of the review
        config: Scheduler configuration (defaults when None)
        history: If given, the log entry is appended to it

    Returns:
        Tuple of (new_state, log_entry)
    """
    config = sanitize_config(config or DEFAULT_CONFIG)
    params = parameters.resolve_parameters(config.weights)
    rating = Rating(outcome.rating)
    now = ensure_utc(outcome.timestamp)
    outcome = ReviewOutcome(rating=rating, timestamp=now)

    previous = state
    problems = find_state_problems(state)
    if problems:
        logger.warning(
            "Resetting corrupted memory state of item %s to NEW: %s",
            state.item_id,
            "; ".join(problems),
        )
        state = _reset_state(state, now)

    if state.state == ItemState.NEW:
        elapsed_days = 0.0
        update = memory_model.init_state(rating, params)
    else:
        elapsed_days = get_elapsed_days(state.last_review, now)
        update = memory_model.next_state(state, rating, elapsed_days, params)

    reviewed = replace(
        state,
        stability=update.stability,
        difficulty=update.difficulty,
        last_review=now,
        elapsed_days=elapsed_days,
        reps=state.reps + 1,
        retrievability=update.retrievability,
    )
    # Steps may have been shortened in config since the item was stored
    steps = config.relearning_steps if state.state == ItemState.RELEARNING else config.learning_steps
    step = min(state.step, len(steps) - 1)
    new_state = _transition(state.state, step, reviewed, rating, config, params)

    entry = ReviewLogEntry(
        item_id=state.item_id,
        previous_state=previous,
        outcome=outcome,
        resulting_state=new_state,
        retrievability=update.retrievability,
        elapsed_days=elapsed_days,
    )
    if history is not None:
        history.append(entry)

    return new_state, entry


def _reset_state(state: MemoryState, now: datetime) -> MemoryState:
    """Fresh NEW state; counters survive only if they are consistent."""
    counters_ok = (
        isinstance(state.reps, int)
        and isinstance(state.lapses, int)
        and 0 <= state.lapses <= state.reps
    )
    if counters_ok:
        return initialize_new_item(state.item_id, now, reps=state.reps, lapses=state.lapses)
    return initialize_new_item(state.item_id, now)


def _transition(
    current: ItemState,
    step: int,
    card: MemoryState,
    rating: Rating,
    config: SchedulerConfig,
    params
) -> MemoryState:
    """
    Apply the lifecycle transition and due-time selection.

    Args:
        current: Lifecycle state before the review
        step: Step index before the review
        card: State with updated memory parameters and counters
        rating: User rating
        config: Scheduler configuration
        params: Effective parameter vector

    Returns:
        Final new state
    """
    if current == ItemState.NEW:
        if rating == Rating.EASY:
            return _graduate(card, config, params)
        if rating == Rating.GOOD:
            return _step(card, ItemState.LEARNING, min(1, len(config.learning_steps) - 1),
                         config.learning_steps, rating)
        return _step(card, ItemState.LEARNING, 0, config.learning_steps, rating)

    if current == ItemState.LEARNING:
        if rating == Rating.AGAIN:
            return _step(card, ItemState.LEARNING, 0, config.learning_steps, rating)
        if rating == Rating.HARD:
            return _step(card, ItemState.LEARNING, step, config.learning_steps, rating)
        if rating == Rating.GOOD and step + 1 < len(config.learning_steps):
            return _step(card, ItemState.LEARNING, step + 1, config.learning_steps, rating)
        return _graduate(card, config, params)

    if current == ItemState.REVIEW:
        if rating == Rating.AGAIN:
            lapsed = replace(card, lapses=card.lapses + 1)
            return _step(lapsed, ItemState.RELEARNING, 0, config.relearning_steps, rating)
        return _graduate(card, config, params)

    # RELEARNING
    if rating == Rating.AGAIN:
        return _step(card, ItemState.RELEARNING, 0, config.relearning_steps, rating)
    if rating == Rating.HARD:
        return _step(card, ItemState.RELEARNING, step, config.relearning_steps, rating)
    return _graduate(card, config, params)


def _step(card: MemoryState, state: ItemState, step: int, steps, rating: Rating) -> MemoryState:
    """Schedule a fixed learning/relearning step."""
    delay = intervals.learning_step_delay(steps, step, rating)
    return replace(
        card,
        state=state,
        step=step,
        due=card.last_review + delay,
        scheduled_days=delay / timedelta(days=1),
    )


def _graduate(card: MemoryState, config: SchedulerConfig, params) -> MemoryState:
    """Schedule a REVIEW interval from stability."""
    key = intervals.fuzz_key(card.item_id, card.reps) if config.enable_fuzz else None
    days = intervals.next_interval(
        card.stability,
        config.target_retention,
        params,
        minimum_interval=config.minimum_interval,
        maximum_interval=config.maximum_interval,
        key=key,
    )
    return replace(
        card,
        state=ItemState.REVIEW,
        step=0,
        due=card.last_review + timedelta(days=days),
        scheduled_days=float(days),
    )
