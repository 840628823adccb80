"""
SQLAlchemy ORM Models for FSRS Storage

Defines MemoryStateRow and ReviewLogRow for SQL persistence.
Timestamps are stored as ISO-8601 strings so timezone info survives SQLite.
"""

from sqlalchemy import Column, Float, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MemoryStateRow(Base):
    """
    Persistent memory state for a single learning item.
    """
    __tablename__ = 'memory_state'

    item_id = Column(String(255), primary_key=True, nullable=False)

    # Long-term memory parameters
    stability = Column(Float, nullable=False)
    difficulty = Column(Float, nullable=False)

    # Scheduling
    due = Column(String(64), nullable=False)
    last_review = Column(String(64), nullable=True)
    elapsed_days = Column(Float, nullable=False, default=0.0)
    scheduled_days = Column(Float, nullable=False, default=0.0)

    # Counters
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)

    state = Column(Integer, nullable=False)  # 0=NEW, 1=LEARNING, 2=REVIEW, 3=RELEARNING
    step = Column(Integer, nullable=False, default=0)
    retrievability = Column(Float, nullable=False, default=0.0)

    def __repr__(self):
        return f"<MemoryStateRow({self.item_id}, state={self.state})>"


class ReviewLogRow(Base):
    """
    Append-only log entry for a single review.

    The before/after states are kept as JSON snapshots; the flat columns
    exist for querying.
    """
    __tablename__ = 'review_log'
    __table_args__ = (Index('ix_review_log_item_id_id', 'item_id', 'id'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(255), nullable=False)

    timestamp = Column(String(64), nullable=False)
    rating = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    retrievability = Column(Float, nullable=False)
    elapsed_days = Column(Float, nullable=False)

    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    state_after = Column(Integer, nullable=False)

    previous_state_json = Column(Text, nullable=False)
    resulting_state_json = Column(Text, nullable=False)

    def __repr__(self):
        return f"<ReviewLogRow(id={self.id}, {self.item_id}, rating={self.rating})>"
