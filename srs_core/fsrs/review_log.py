"""
Review Log - immutable review snapshots and the per-item history

A ReviewLogEntry records the state before a review, the outcome, and the
state after it. Entries are frozen; ReviewHistory only ever appends.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Iterator

from srs_core.fsrs.constants import Rating
from srs_core.fsrs.memory_state import (
    MemoryState,
    ReviewOutcome,
    ensure_utc,
    memory_state_from_dict,
)


@dataclass(frozen=True)
class ReviewLogEntry:
    """Snapshot of one review."""
    item_id: str
    previous_state: MemoryState
    outcome: ReviewOutcome
    resulting_state: MemoryState
    retrievability: float  # R at review time, before the grade
    elapsed_days: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "previous_state": self.previous_state.to_dict(),
            "rating": int(self.outcome.rating),
            "timestamp": self.outcome.timestamp.isoformat(),
            "resulting_state": self.resulting_state.to_dict(),
            "retrievability": self.retrievability,
            "elapsed_days": self.elapsed_days,
        }


def review_log_entry_from_dict(data: dict[str, Any]) -> ReviewLogEntry:
    """Inverse of ReviewLogEntry.to_dict()."""
    return ReviewLogEntry(
        item_id=data["item_id"],
        previous_state=memory_state_from_dict(data["previous_state"]),
        outcome=ReviewOutcome(
            rating=Rating(int(data["rating"])),
            timestamp=ensure_utc(datetime.fromisoformat(data["timestamp"])),
        ),
        resulting_state=memory_state_from_dict(data["resulting_state"]),
        retrievability=float(data["retrievability"]),
        elapsed_days=float(data["elapsed_days"]),
    )


class ReviewHistory:
    """
    Append-only review history of a single item.

    There is no way to edit, remove or reorder entries once appended.
    """

    def __init__(self, item_id: str, entries: Iterable[ReviewLogEntry] = ()):
        self.item_id = item_id
        self._entries: list[ReviewLogEntry] = []
        for entry in entries:
            self.append(entry)

    def append(self, entry: ReviewLogEntry) -> None:
        if entry.item_id != self.item_id:
            raise ValueError(
                f"Review for item {entry.item_id!r} appended to history of {self.item_id!r}"
            )
        self._entries.append(entry)

    def entries(self) -> tuple[ReviewLogEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[ReviewLogEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> ReviewLogEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"<ReviewHistory({self.item_id}, {len(self._entries)} entries)>"
