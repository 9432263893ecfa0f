"""Authentication service layer."""
from __future__ import annotations

import uuid

from loguru import logger
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.core.security import (
    ExpiredTokenError,
    InvalidTokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.db.models.user import User
from app.db.repositories import AnalyticsRepository
from app.schemas import Token, UserCreate
from app.services.users import UserService
from app.tasks.mail import enqueue_mail
from app.utils.exceptions import (
    AuthenticationError,
    ConflictError,
    StoreUnavailableError,
    UserNotFoundError,
)


class AuthService:
    """Encapsulates user registration and authentication logic."""

    def __init__(self, db: Session, *, user_service: UserService | None = None):
        self.db = db
        self.user_service = user_service or UserService(db)

    def register_user(self, payload: UserCreate) -> User:
        """Create a user together with its empty analytics record."""

        if self.user_service.find_by_email(payload.email) or self.user_service.username_exists(
            payload.username
        ):
            raise ConflictError("Email or username already exists")

        user = User(
            email=payload.email,
            username=payload.username,
            hashed_password=get_password_hash(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
        user.mark_login()
        self.db.add(user)
        try:
            self.db.flush([user])
            AnalyticsRepository(self.db).create(user.id)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Email or username already exists") from exc
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("User store is unavailable") from exc
        self.db.refresh(user)

        self.user_service.remember_username(user.username)
        enqueue_mail(user.email, "welcome", {"first_name": user.first_name})
        logger.info("User registered", user_id=str(user.id))
        return user

    def authenticate_user(self, identifier: str, password: str) -> User:
        """Validate credentials and return the associated user."""

        user = self.user_service.find_by_identifier(identifier)
        if not user or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid credentials")

        user.mark_login()
        self.db.add(user)
        try:
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            raise StoreUnavailableError("User store is unavailable") from exc
        self.db.refresh(user)
        self.user_service.remember_username(user.username)
        return user

    def create_tokens(self, user: User, *, remember_me: bool = False) -> Token:
        """Generate access and refresh tokens for a user."""

        user_id = uuid.UUID(str(user.id))
        access = create_access_token(str(user_id), remember_me=remember_me)
        refresh = create_refresh_token(str(user_id))
        return Token(access_token=access, refresh_token=refresh)

    def refresh_tokens(self, refresh_token: str, *, remember_me: bool = False) -> Token:
        """Issue a new pair from a valid refresh token."""

        try:
            payload = decode_token(refresh_token)
        except ExpiredTokenError as exc:
            raise AuthenticationError("Session expired. Please sign in again.") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid refresh token") from exc

        if payload.get("type") != "refresh":
            raise AuthenticationError("Invalid token type - refresh token required")

        try:
            user_id = uuid.UUID(str(payload.get("sub")))
        except ValueError as exc:
            raise AuthenticationError("Invalid refresh token") from exc
        try:
            user = self.user_service.get(user_id)
        except UserNotFoundError as exc:
            raise AuthenticationError("Invalid refresh token") from exc
        return self.create_tokens(user, remember_me=remember_me)
