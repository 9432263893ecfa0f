"""Celery tasks for outbound email."""
from __future__ import annotations

from typing import Any

from loguru import logger

from app.celery_app import PRIORITY_DEFAULT, PRIORITY_URGENT, celery_app
from app.services.mail import MailService


@celery_app.task(
    name="app.tasks.mail.send_mail",
    bind=True,
    autoretry_for=(OSError,),
    retry_backoff=True,
    max_retries=5,
)
def send_mail(self, recipient: str, kind: str, context: dict[str, Any] | None = None) -> dict[str, Any]:
    """Render and deliver one mail; SMTP connection errors are retried with backoff."""

    try:
        sent = MailService().send(recipient, kind, context or {})
    except ValueError as exc:
        logger.error("Dropping mail with unknown kind", kind=kind, error=str(exc))
        raise
    return {"kind": kind, "sent": sent}


def enqueue_mail(recipient: str, kind: str, context: dict[str, Any] | None = None, *, urgent: bool = False) -> None:
    """Queue a mail; ``urgent`` mails (one-time codes) jump the queue."""

    priority = PRIORITY_URGENT if urgent else PRIORITY_DEFAULT
    send_mail.apply_async(args=(recipient, kind, context or {}), priority=priority)
    logger.info("Mail queued", kind=kind, priority=priority)
