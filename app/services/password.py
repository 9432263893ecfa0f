"""One-time-password based password recovery."""
from __future__ import annotations

import json
import secrets
from typing import Any

from loguru import logger
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import generate_otp, get_password_hash
from app.services.mail import format_datetime
from app.services.users import UserService
from app.tasks.mail import enqueue_mail
from app.utils.cache import CacheBackend, cache_backend, dumps
from app.utils.exceptions import (
    OtpAttemptsExceededError,
    OtpError,
    StoreUnavailableError,
    UserNotFoundError,
)


def otp_key(email: str) -> str:
    return f"otp:{email}"


class OtpStore:
    """OTP payloads (``{"otp", "attempts"}``) kept in the cache with a TTL."""

    def __init__(self, cache: CacheBackend | None = None) -> None:
        self.cache = cache or cache_backend

    def put(self, email: str, otp: str, ttl_seconds: int | None = None) -> dict[str, Any]:
        payload = {"otp": otp, "attempts": 0}
        self.cache.set_raw(otp_key(email), dumps(payload), ttl_seconds=ttl_seconds or settings.OTP_TTL_SECONDS)
        return payload

    def get(self, email: str) -> dict[str, Any] | None:
        raw = self.cache.get_raw(otp_key(email))
        if not raw:
            return None
        try:
            payload = json.loads(raw)
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    def record_failure(self, email: str) -> dict[str, Any] | None:
        """Bump the attempt counter without extending the OTP's lifetime."""

        payload = self.get(email)
        if payload is None:
            return None
        payload["attempts"] = int(payload.get("attempts") or 0) + 1
        remaining = self.cache.ttl(otp_key(email)) or settings.OTP_TTL_SECONDS
        self.cache.set_raw(otp_key(email), dumps(payload), ttl_seconds=remaining)
        return payload

    def delete(self, email: str) -> None:
        self.cache.delete_raw(otp_key(email))


class PasswordService:
    """Issue reset codes and apply password resets."""

    def __init__(
        self,
        db: Session,
        *,
        user_service: UserService | None = None,
        otp_store: OtpStore | None = None,
    ) -> None:
        self.db = db
        self.user_service = user_service or UserService(db)
        self.otp_store = otp_store or OtpStore()

    def send_otp(self, email: str) -> None:
        user = self.user_service.find_by_email(email)
        if user is None:
            raise UserNotFoundError("Email not found")

        otp = generate_otp()
        self.otp_store.put(user.email, otp)
        enqueue_mail(user.email, "reset-otp", {**format_datetime(), "otp": otp}, urgent=True)
        logger.info("Password reset code issued", user_id=str(user.id))

    def reset_password(self, email: str, otp: str, new_password: str) -> None:
        user = self.user_service.find_by_email(email)
        if user is None:
            raise UserNotFoundError("Email not found")

        stored = self.otp_store.get(user.email)
        if stored is None:
            raise OtpError("OTP expired or invalid")

        if int(stored.get("attempts") or 0) >= settings.OTP_MAX_ATTEMPTS:
            self.otp_store.delete(user.email)
            raise OtpAttemptsExceededError("Maximum OTP attempts exceeded")

        if not secrets.compare_digest(str(stored.get("otp", "")), otp):
            self.otp_store.record_failure(user.email)
            raise OtpError("Invalid OTP")

        user.hashed_password = get_password_hash(new_password)
        self.db.add(user)
        try:
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("User store is unavailable") from exc
        self.otp_store.delete(user.email)
        logger.info("Password reset", user_id=str(user.id))
