"""Per-user typing analytics model."""
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import validates

from app.core.analytics.ledger import check_window
from app.db.base import Base
from app.db.types import DailyEntryList


class AnalyticsRecord(Base):
    """Latest snapshot, lifetime totals and rolling daily history for one user."""

    __tablename__ = "analytics"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    wpm = Column(Float, nullable=False, default=0)
    accuracy = Column(Float, nullable=False, default=0)
    test_timings = Column(Float, nullable=False, default=0)
    total_par = Column(Integer, nullable=False, default=0, index=True)
    max_streak = Column(Integer, nullable=False, default=0)
    last_test_taken = Column(DateTime(timezone=True))
    progress = Column(DailyEntryList, nullable=False, default=list)

    # Bumped on every write; conditional updates compare against it
    version = Column(Integer, nullable=False, default=0)

    @validates("wpm", "test_timings")
    def _validate_non_negative(self, key, value):
        if value is not None and value < 0:
            raise ValueError(f"{key} must not be negative")
        return value

    @validates("accuracy")
    def _validate_accuracy(self, key, value):
        if value is not None and not 0 <= value <= 100:
            raise ValueError("accuracy must be between 0 and 100")
        return value

    @validates("progress")
    def _validate_progress(self, key, value):
        return check_window(value or [])
