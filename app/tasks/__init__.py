"""Celery tasks package."""

from app.tasks import content, leaderboard, mail

__all__ = ["content", "leaderboard", "mail"]
