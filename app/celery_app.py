"""Celery application instance and configuration."""
from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from app.config import settings

# Redis transport pops lower priority numbers first
PRIORITY_URGENT = 0
PRIORITY_DEFAULT = 5
PRIORITY_BACKGROUND = 7


def _resolve_broker_url() -> str:
    if settings.CELERY_BROKER_URL is not None:
        return str(settings.CELERY_BROKER_URL)
    return str(settings.REDIS_URL)


def _resolve_result_backend() -> str:
    if settings.CELERY_RESULT_BACKEND is not None:
        return str(settings.CELERY_RESULT_BACKEND)
    return str(settings.REDIS_URL)


celery_app = Celery(
    "typo_typing_analytics",
    broker=_resolve_broker_url(),
    backend=_resolve_result_backend(),
    include=[
        "app.tasks.content",
        "app.tasks.leaderboard",
        "app.tasks.mail",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_default_priority=PRIORITY_DEFAULT,
    broker_transport_options={
        "priority_steps": list(range(10)),
        "sep": ":",
        "queue_order_strategy": "priority",
    },
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)

celery_app.conf.beat_schedule = {
    "regenerate-leaderboard": {
        "task": "app.tasks.leaderboard.regenerate_leaderboard",
        "schedule": settings.LEADERBOARD_REFRESH_MINUTES * 60.0,
        "options": {"priority": PRIORITY_BACKGROUND},
    },
    "preload-paragraphs": {
        "task": "app.tasks.content.preload_paragraphs",
        "schedule": crontab(hour=3, minute=0),
        "options": {"priority": PRIORITY_BACKGROUND},
    },
}

__all__ = ["celery_app", "PRIORITY_URGENT", "PRIORITY_DEFAULT", "PRIORITY_BACKGROUND"]
