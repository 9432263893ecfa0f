"""Celery tasks warming the typing content cache."""
from __future__ import annotations

from loguru import logger

from app.celery_app import celery_app
from app.services.content import ContentService


@celery_app.task(name="app.tasks.content.preload_paragraphs")
def preload_paragraphs(max_items: int | None = None) -> dict[str, int]:
    """Load quotes and word drills into the cache."""

    counts = ContentService().preload(max_items)
    logger.info("Paragraphs preloaded", **counts)
    return counts
