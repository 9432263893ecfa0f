"""Celery tasks for leaderboard maintenance."""
from __future__ import annotations

from loguru import logger

from app.celery_app import celery_app
from app.db.session import SessionLocal
from app.services.leaderboard import LeaderboardService


@celery_app.task(name="app.tasks.leaderboard.regenerate_leaderboard")
def regenerate_leaderboard(limit: int | None = None) -> dict[str, int]:
    """Rank the current top records and replace the cached snapshot."""

    db = SessionLocal()
    try:
        entries = LeaderboardService(db).regenerate(limit)
        return {"entries": len(entries)}
    except Exception as exc:
        logger.error("Failed to regenerate leaderboard", error=str(exc))
        raise
    finally:
        db.close()
