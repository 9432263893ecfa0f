"""Service layer for user operations."""
from __future__ import annotations

import uuid
from dataclasses import dataclass

from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.security import verify_password
from app.db.models.user import User
from app.db.repositories import AnalyticsRepository
from app.utils.cache import CacheBackend, cache_backend
from app.utils.exceptions import (
    AuthenticationError,
    ConflictError,
    StoreUnavailableError,
    UserNotFoundError,
)

USERNAME_NAMESPACE = "username"


@dataclass(slots=True)
class PublicProfile:
    username: str
    first_name: str
    last_name: str


class UserService:
    """User directory lookups and account maintenance."""

    def __init__(self, db: Session, *, cache: CacheBackend | None = None):
        self.db = db
        self.cache = cache or cache_backend

    def get(self, user_id: uuid.UUID) -> User:
        """Return a user by identifier or raise ``UserNotFoundError``."""

        try:
            user = self.db.get(User, user_id)
        except OperationalError as exc:
            raise StoreUnavailableError("User store is unavailable") from exc
        if not user:
            raise UserNotFoundError("User not found")
        return user

    def find_by_identifier(self, identifier: str) -> User | None:
        """Look a user up by email (case-insensitive) or exact username."""

        lookup = identifier.strip()
        stmt = select(User).where(
            or_(User.email == lookup.lower(), User.username == lookup)
        )
        try:
            return self.db.scalar(stmt)
        except OperationalError as exc:
            raise StoreUnavailableError("User store is unavailable") from exc

    def find_by_email(self, email: str) -> User | None:
        try:
            return self.db.scalar(select(User).where(User.email == email.strip().lower()))
        except OperationalError as exc:
            raise StoreUnavailableError("User store is unavailable") from exc

    def resolve_username(self, username: str) -> uuid.UUID | None:
        try:
            return self.db.scalar(select(User.id).where(User.username == username.strip()))
        except OperationalError as exc:
            raise StoreUnavailableError("User store is unavailable") from exc

    def resolve_user_id(self, user_id: uuid.UUID) -> PublicProfile | None:
        try:
            user = self.db.get(User, user_id)
        except OperationalError as exc:
            raise StoreUnavailableError("User store is unavailable") from exc
        if user is None:
            return None
        return PublicProfile(
            username=user.username, first_name=user.first_name, last_name=user.last_name
        )

    # ------------------------------------------------------------------
    # Usernames
    # ------------------------------------------------------------------
    def remember_username(self, username: str) -> None:
        """Mark ``username`` as taken so availability checks skip the database."""

        self.cache.set(
            USERNAME_NAMESPACE,
            username,
            1,
            ttl_seconds=settings.USERNAME_CACHE_TTL_SECONDS,
        )

    def forget_username(self, username: str) -> None:
        self.cache.invalidate(USERNAME_NAMESPACE, key=username)

    def username_exists(self, username: str) -> bool:
        username = username.strip()
        if self.cache.get(USERNAME_NAMESPACE, username) is not None:
            return True
        try:
            count = self.db.scalar(select(func.count(User.id)).where(User.username == username))
        except OperationalError as exc:
            raise StoreUnavailableError("User store is unavailable") from exc
        if count:
            self.remember_username(username)
            return True
        return False

    def change_username(self, user: User, new_username: str) -> User:
        new_username = new_username.strip()
        if new_username == user.username:
            return user
        if self.username_exists(new_username):
            raise ConflictError("Username is already taken")

        old_username = user.username
        user.username = new_username
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Username is already taken") from exc
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("User store is unavailable") from exc
        self.db.refresh(user)

        self.forget_username(old_username)
        self.remember_username(new_username)
        logger.info("Username changed", user_id=str(user.id))
        return user

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------
    def delete_account(self, user: User, password: str) -> None:
        """Delete ``user`` and then its analytics record.

        The two deletes are separate commits; a record orphaned by a crash in
        between is harmless and is removed by the next delete attempt.
        """

        if not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid password")

        user_id = user.id
        username = user.username
        try:
            self.db.delete(user)
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("User store is unavailable") from exc

        AnalyticsRepository(self.db).delete(user_id)
        self.forget_username(username)
        logger.info("Account deleted", user_id=str(user_id))
