"""Custom database column types for cross-database compatibility."""
from __future__ import annotations

import json
from typing import Any

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import Text, TypeDecorator

from app.core.analytics.ledger import DailyEntry


class DailyEntryList(TypeDecorator):
    """Persist a progress history across PostgreSQL and SQLite.

    Entries are stored as ``{"date": "YYYY-MM-DD", "wpm", "accuracy", "count"}``
    objects so a history round-trips without locale-dependent date strings.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            value = []
        payload = [
            entry.to_dict() if isinstance(entry, DailyEntry) else DailyEntry.from_dict(entry).to_dict()
            for entry in value
        ]
        if dialect.name == "postgresql":
            return payload
        return json.dumps(payload)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, str):
            value = json.loads(value)
        return [DailyEntry.from_dict(item) for item in value]
