"""Security utilities for password hashing and JWT handling."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings


ALGORITHM = "HS256"
OTP_DIGITS = 6


class InvalidTokenError(Exception):
    """Raised when a JWT cannot be decoded or is invalid."""


class ExpiredTokenError(InvalidTokenError):
    """Raised when a JWT is well-formed but past its expiry."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Validate a plaintext password against a hashed value."""

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password using the configured hashing algorithm."""

    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def generate_otp(digits: int = OTP_DIGITS) -> str:
    """Return a zero-padded numeric one-time password."""

    return f"{secrets.randbelow(10 ** digits):0{digits}d}"


def _create_token(subject: str | Any, expires_delta: timedelta, token_type: str) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    payload: Dict[str, Any] = {
        "exp": expire,
        "sub": str(subject),
        "type": token_type,
        "iss": settings.TOKEN_ISSUER,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(
    subject: str | Any, expires_minutes: int | None = None, *, remember_me: bool = False
) -> str:
    """Create a signed JWT access token for the supplied subject."""

    default = (
        settings.ACCESS_TOKEN_LONG_EXPIRE_MINUTES if remember_me else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    minutes = expires_minutes or default
    return _create_token(subject, timedelta(minutes=minutes), token_type="access")


def create_refresh_token(subject: str | Any, expires_days: int | None = None) -> str:
    """Create a signed JWT refresh token for the supplied subject."""

    days = expires_days or settings.REFRESH_TOKEN_EXPIRE_DAYS
    return _create_token(subject, timedelta(days=days), token_type="refresh")


def decode_token(token: str) -> Dict[str, Any]:
    """Decode a JWT and return its payload, raising ``InvalidTokenError`` if invalid."""

    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=settings.TOKEN_ISSUER,
        )
    except ExpiredSignatureError as exc:
        raise ExpiredTokenError("Token expired") from exc
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
