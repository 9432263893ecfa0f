"""Shared API dependencies."""
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.analytics import Clock, UtcClock
from app.core.security import ExpiredTokenError, InvalidTokenError, decode_token
from app.db.models.user import User
from app.db.session import SessionLocal
from app.schemas import TokenPayload
from app.services.analytics import AnalyticsService
from app.services.content import ContentService
from app.services.leaderboard import LeaderboardCache, LeaderboardService
from app.utils.cache import CacheBackend, cache_backend
from app.utils.exceptions import StoreUnavailableError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_db() -> Session:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_cache() -> CacheBackend:
    return cache_backend


def get_clock() -> Clock:
    return UtcClock()


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Token must be an access token")
        token_data = TokenPayload.model_validate(payload)
    except ExpiredTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please sign in again.",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except (InvalidTokenError, ValidationError, ValueError, KeyError) as exc:
        raise credentials_exception from exc

    user_id = uuid.UUID(str(token_data.sub))
    try:
        user = db.get(User, user_id)
    except OperationalError as exc:
        raise StoreUnavailableError("User store is unavailable") from exc
    if not user:
        raise credentials_exception
    return user


def get_analytics_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AnalyticsService:
    return AnalyticsService(db, clock=clock)


def get_leaderboard_service(
    db: Session = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
) -> LeaderboardService:
    return LeaderboardService(db, cache=LeaderboardCache(cache))


def get_content_service(cache: CacheBackend = Depends(get_cache)) -> ContentService:
    return ContentService(cache)
