"""Leaderboard generation and cached snapshot access."""
from __future__ import annotations

import json

from loguru import logger
from sqlalchemy.orm import Session

from app.config import settings
from app.core.analytics import LeaderboardEntry, rank
from app.db.repositories import AnalyticsRepository
from app.utils.cache import CacheBackend, cache_backend, dumps
from app.utils.exceptions import CacheUnavailableError

LEADERBOARD_KEY = "leaderboard"


class LeaderboardCache:
    """Stores the latest ranked snapshot under a single key."""

    def __init__(self, cache: CacheBackend | None = None) -> None:
        self.cache = cache or cache_backend

    def publish(self, entries: list[LeaderboardEntry]) -> None:
        """Replace the snapshot; it never expires on its own."""

        payload = [entry.to_dict() for entry in entries]
        self.cache.set_raw(LEADERBOARD_KEY, dumps(payload))

    def fetch(self) -> list[LeaderboardEntry]:
        """Return the last published snapshot, or ``[]`` if there is none usable."""

        try:
            raw = self.cache.get_raw(LEADERBOARD_KEY)
        except CacheUnavailableError as exc:
            logger.warning("Leaderboard cache unreachable", error=exc.message)
            return []
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable leaderboard snapshot")
            return []
        if not isinstance(entries, list):
            logger.warning("Discarding leaderboard snapshot that is not a list")
            return []
        try:
            return [LeaderboardEntry.from_dict(item) for item in entries]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding leaderboard snapshot with malformed rows", error=str(exc))
            return []


class LeaderboardService:
    """Rank the current top records and publish the result."""

    def __init__(
        self,
        db: Session,
        *,
        repository: AnalyticsRepository | None = None,
        cache: LeaderboardCache | None = None,
    ) -> None:
        self.db = db
        self.repository = repository or AnalyticsRepository(db)
        self.cache = cache or LeaderboardCache()

    def regenerate(self, limit: int | None = None) -> list[LeaderboardEntry]:
        limit = limit or settings.LEADERBOARD_SIZE
        top_records = self.repository.find_top_n(limit)
        entries = rank(top_records, limit=limit)
        self.cache.publish(entries)
        logger.info("Leaderboard regenerated", entries=len(entries))
        return entries

    def current(self) -> list[LeaderboardEntry]:
        return self.cache.fetch()


__all__ = ["LEADERBOARD_KEY", "LeaderboardCache", "LeaderboardService"]
