"""Pydantic schemas package."""

from app.schemas.analytics import (
    AccountAnalytics,
    AnalyticsRead,
    DailyEntryRead,
    LeaderboardEntryRead,
    ResultSubmission,
)
from app.schemas.auth import RefreshRequest, Token, TokenPayload
from app.schemas.content import ContentKind, ParagraphRead
from app.schemas.password import MessageResponse, OtpRequest, PasswordReset
from app.schemas.user import (
    AccountDelete,
    AuthResponse,
    UserCreate,
    UserLogin,
    UsernameAvailability,
    UsernameUpdate,
    UserRead,
)

__all__ = [
    "AccountAnalytics",
    "AnalyticsRead",
    "DailyEntryRead",
    "LeaderboardEntryRead",
    "ResultSubmission",
    "RefreshRequest",
    "Token",
    "TokenPayload",
    "ContentKind",
    "ParagraphRead",
    "MessageResponse",
    "OtpRequest",
    "PasswordReset",
    "AccountDelete",
    "AuthResponse",
    "UserCreate",
    "UserLogin",
    "UsernameAvailability",
    "UsernameUpdate",
    "UserRead",
]
