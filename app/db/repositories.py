"""Record store access for analytics documents."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.analytics.ledger import check_window
from app.db.models.analytics import AnalyticsRecord
from app.db.models.user import User
from app.utils.exceptions import StoreUnavailableError


@dataclass(slots=True)
class TopRecord:
    """Analytics snapshot joined with the owner's username."""

    user_id: uuid.UUID
    username: str
    wpm: float
    accuracy: float


class AnalyticsRepository:
    """Read one, write one and top-N queries over the ``analytics`` table.

    Connection-level failures surface as ``StoreUnavailableError``; nothing
    is retried here.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_one(self, user_id: uuid.UUID) -> AnalyticsRecord | None:
        stmt = (
            select(AnalyticsRecord)
            .where(AnalyticsRecord.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        try:
            return self.db.scalars(stmt).first()
        except OperationalError as exc:
            raise StoreUnavailableError("Analytics store is unavailable") from exc

    def find_top_n(self, n: int) -> list[TopRecord]:
        """Return the ``n`` best records by wpm, then accuracy, both descending."""

        stmt = (
            select(AnalyticsRecord.user_id, User.username, AnalyticsRecord.wpm, AnalyticsRecord.accuracy)
            .join(User, User.id == AnalyticsRecord.user_id)
            .order_by(AnalyticsRecord.wpm.desc(), AnalyticsRecord.accuracy.desc())
            .limit(n)
        )
        try:
            rows = self.db.execute(stmt).all()
        except OperationalError as exc:
            raise StoreUnavailableError("Analytics store is unavailable") from exc
        return [
            TopRecord(
                user_id=row.user_id,
                username=row.username,
                wpm=float(row.wpm or 0),
                accuracy=float(row.accuracy or 0),
            )
            for row in rows
        ]

    def update_one(
        self,
        user_id: uuid.UUID,
        values: dict[str, Any],
        *,
        expected_version: int | None = None,
    ) -> AnalyticsRecord | None:
        """Apply ``values`` in a single statement and return the fresh row.

        With ``expected_version`` the write only lands if nobody else has
        written since that version was read; ``None`` is returned otherwise
        (and when no record exists). A ``progress`` value goes through the
        same window check as the ORM attribute, since Core updates skip it.
        """

        if "progress" in values:
            values = {**values, "progress": check_window(values["progress"])}
        stmt = (
            update(AnalyticsRecord)
            .where(AnalyticsRecord.user_id == user_id)
            .values(**values, version=AnalyticsRecord.version + 1)
            .execution_options(synchronize_session=False)
        )
        if expected_version is not None:
            stmt = stmt.where(AnalyticsRecord.version == expected_version)

        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                return None
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("Analytics store is unavailable") from exc
        return self.find_one(user_id)

    def create(self, user_id: uuid.UUID) -> AnalyticsRecord:
        """Stage an empty record; the caller owns the commit."""

        record = AnalyticsRecord(
            user_id=user_id,
            wpm=0,
            accuracy=0,
            test_timings=0,
            total_par=0,
            max_streak=0,
            last_test_taken=None,
            progress=[],
            version=0,
        )
        self.db.add(record)
        return record

    def delete(self, user_id: uuid.UUID) -> int:
        try:
            result = self.db.execute(delete(AnalyticsRecord).where(AnalyticsRecord.user_id == user_id))
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("Analytics store is unavailable") from exc
        return result.rowcount
