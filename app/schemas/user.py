"""Pydantic models for user API interactions."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.schemas.analytics import AnalyticsRead
from app.schemas.auth import Token

USERNAME_PATTERN = r"^[A-Za-z0-9_.]+$"
PASSWORD_RULES = "Password must contain upper and lower case letters, a digit and a symbol"


def _check_password_strength(value: str) -> str:
    if not (
        any(ch.islower() for ch in value)
        and any(ch.isupper() for ch in value)
        and any(ch.isdigit() for ch in value)
        and any(not ch.isalnum() for ch in value)
    ):
        raise ValueError(PASSWORD_RULES)
    return value


class PasswordConfirmation(BaseModel):
    """Mixin for payloads that repeat the password."""

    password: str = Field(min_length=8, max_length=50)
    confirm_password: str = Field(min_length=1)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordConfirmation":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserCreate(PasswordConfirmation):
    """Schema for user registration input."""

    email: EmailStr
    username: str = Field(min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    first_name: str = Field(min_length=2, max_length=30)
    last_name: str = Field(min_length=2, max_length=30)
    remember_me: bool = False

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_password_strength(value)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("username", "first_name", "last_name", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        return value.strip() if isinstance(value, str) else value


class UserLogin(BaseModel):
    """Schema for user login request; ``identifier`` is an email or username."""

    identifier: str = Field(min_length=3)
    password: str = Field(min_length=1)
    remember_me: bool = False


class UserRead(BaseModel):
    """Profile fields safe to return to the account owner."""

    id: uuid.UUID
    email: EmailStr
    username: str
    first_name: str
    last_name: str
    last_login: Optional[datetime] = None
    date_of_joining: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Profile, analytics and tokens returned by register and login."""

    user: UserRead
    analytics: AnalyticsRead | None = None
    tokens: Token


class UsernameAvailability(BaseModel):
    username: str
    available: bool
    message: str


class UsernameUpdate(BaseModel):
    new_username: str = Field(min_length=3, max_length=20, pattern=USERNAME_PATTERN)

    @field_validator("new_username", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        return value.strip() if isinstance(value, str) else value


class AccountDelete(PasswordConfirmation):
    """Password confirmation required to delete an account."""

    password: str = Field(min_length=1, max_length=50)
