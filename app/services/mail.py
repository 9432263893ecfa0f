"""Outbound email rendering and delivery."""
from __future__ import annotations

import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage
from typing import Any

from loguru import logger

from app.config import settings

MAIL_KINDS = {
    "welcome": (
        "Welcome to Typo",
        "Hi {first_name},\n\nYour account is ready. Happy typing!\n",
    ),
    "reset-otp": (
        "Your password reset code",
        "Your one-time code is {otp}. It expires in {ttl_minutes} minutes.\n"
        "Requested on {date} at {time} UTC.\n",
    ),
    "delete": (
        "Your account was deleted",
        "Your account and typing statistics were deleted on {date} at {time} UTC.\n",
    ),
}


def format_datetime(moment: datetime | None = None) -> dict[str, str]:
    """Split a timestamp into the ``date``/``time`` strings used in templates."""

    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return {"date": moment.strftime("%d %b %Y"), "time": moment.strftime("%H:%M")}


def render_mail(kind: str, context: dict[str, Any]) -> tuple[str, str]:
    """Return ``(subject, body)`` for a mail kind."""

    try:
        subject, template = MAIL_KINDS[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown mail kind: {kind}") from exc
    values = {**format_datetime(), "ttl_minutes": max(1, settings.OTP_TTL_SECONDS // 60), **context}
    return subject, template.format(**values)


class MailService:
    """Send rendered mails over SMTP."""

    def __init__(self, host: str | None = None, port: int | None = None) -> None:
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT

    def send(self, recipient: str, kind: str, context: dict[str, Any] | None = None) -> bool:
        """Deliver a mail; returns ``False`` when SMTP is not configured."""

        subject, body = render_mail(kind, context or {})
        if not self.host:
            logger.warning("SMTP not configured, skipping mail", kind=kind)
            return False

        message = EmailMessage()
        message["From"] = settings.MAIL_FROM
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USERNAME:
                smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD or "")
            smtp.send_message(message)

        logger.info("Mail sent", kind=kind)
        return True
