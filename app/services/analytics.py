"""Analytics service maintaining per-user typing statistics."""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

from app.config import settings
from app.core.analytics import Clock, DailyEntry, UtcClock, merge_submission
from app.db.models.analytics import AnalyticsRecord
from app.db.repositories import AnalyticsRepository
from app.services.users import UserService
from app.utils.exceptions import (
    AnalyticsNotFoundError,
    ConcurrentUpdateError,
    InvalidInputError,
    UserNotFoundError,
)

# Stored averages keep two decimals, rounded half-up on every write
PRECISION = 2


def _round(value: float) -> float:
    quantum = Decimal(1).scaleb(-PRECISION)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _round_entry(entry: DailyEntry) -> DailyEntry:
    return DailyEntry(
        date=entry.date,
        wpm=_round(entry.wpm),
        accuracy=_round(entry.accuracy),
        count=entry.count,
    )


def _validate_result(wpm: float, accuracy: float, test_timings: float, max_streak: int) -> None:
    problems: dict[str, str] = {}
    for name, value in (("wpm", wpm), ("accuracy", accuracy), ("test_timings", test_timings)):
        if value is None or not math.isfinite(value):
            problems[name] = "must be a finite number"
        elif value < 0:
            problems[name] = "must not be negative"
    if "accuracy" not in problems and accuracy > 100:
        problems["accuracy"] = "must be between 0 and 100"
    if max_streak is None or max_streak < 0:
        problems["max_streak"] = "must not be negative"
    if problems:
        raise InvalidInputError("Invalid test result", details=problems)


class AnalyticsService:
    """Read, submit and reset analytics records.

    Day-level merging is delegated to ``merge_submission``; this class owns
    rounding, the aggregate fields and the read-modify-write cycle against
    the record store.
    """

    def __init__(
        self,
        db: Session,
        *,
        repository: AnalyticsRepository | None = None,
        user_service: UserService | None = None,
        clock: Clock | None = None,
        max_write_attempts: int | None = None,
    ) -> None:
        self.db = db
        self.repository = repository or AnalyticsRepository(db)
        self.user_service = user_service or UserService(db)
        self.clock = clock or UtcClock()
        self.max_write_attempts = max_write_attempts or settings.ANALYTICS_MAX_WRITE_ATTEMPTS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_record(self, user_id: uuid.UUID) -> AnalyticsRecord:
        record = self.repository.find_one(user_id)
        if record is None:
            raise AnalyticsNotFoundError("Analytics not found")
        return record

    def submit_result(
        self,
        user_id: uuid.UUID,
        *,
        wpm: float,
        accuracy: float,
        test_timings: float,
        max_streak: int,
        last_test_taken: datetime | None = None,
    ) -> AnalyticsRecord:
        """Apply one finished test to the user's record.

        The write is conditional on the version that was read; a lost race
        re-reads and merges again, up to ``max_write_attempts`` times.
        """

        _validate_result(wpm, accuracy, test_timings, max_streak)
        taken_at = last_test_taken or self.clock.now()

        for attempt in range(1, self.max_write_attempts + 1):
            record = self.get_record(user_id)
            today = self.clock.today()
            try:
                merged = merge_submission(record.progress, today, wpm, accuracy)
            except ValueError as exc:
                raise InvalidInputError(
                    "Test date precedes the latest progress entry",
                    details={"date": today.isoformat()},
                ) from exc
            progress = [_round_entry(entry) for entry in merged]
            values: dict[str, Any] = {
                "wpm": _round(wpm),
                "accuracy": _round(accuracy),
                "test_timings": _round(test_timings),
                "max_streak": max_streak,
                "last_test_taken": taken_at,
                "progress": progress,
                "total_par": AnalyticsRecord.total_par + 1,
            }
            updated = self.repository.update_one(
                user_id, values, expected_version=record.version
            )
            if updated is not None:
                logger.info(
                    "Test result recorded",
                    user_id=str(user_id),
                    day=today.isoformat(),
                    total_par=updated.total_par,
                )
                return updated
            logger.warning(
                "Analytics write lost a race, retrying",
                user_id=str(user_id),
                attempt=attempt,
            )

        raise ConcurrentUpdateError(
            "Analytics were updated concurrently, please resubmit",
            details={"attempts": self.max_write_attempts},
        )

    def reset_record(self, user_id: uuid.UUID) -> AnalyticsRecord:
        """Zero every aggregate and clear the progress history."""

        updated = self.repository.update_one(
            user_id,
            {
                "wpm": 0,
                "accuracy": 0,
                "test_timings": 0,
                "last_test_taken": None,
                "total_par": 0,
                "max_streak": 0,
                "progress": [],
            },
        )
        if updated is None:
            raise AnalyticsNotFoundError("Analytics not found")
        logger.info("Analytics reset", user_id=str(user_id))
        return updated

    def get_public_summary(self, username: str) -> dict[str, Any]:
        """Return the non-sensitive projection shown on a profile page."""

        user_id = self.user_service.resolve_username(username)
        if user_id is None:
            raise UserNotFoundError("User not found")
        profile = self.user_service.resolve_user_id(user_id)
        if profile is None:
            raise UserNotFoundError("User not found")
        record = self.get_record(user_id)
        return {
            "username": profile.username,
            "first_name": profile.first_name,
            "last_name": profile.last_name,
            "wpm": record.wpm,
            "accuracy": record.accuracy,
            "total_par": record.total_par,
        }


__all__ = ["AnalyticsService", "PRECISION"]
