"""API endpoint modules for v1."""

from app.api.v1.endpoints import (
    analytics,
    auth,
    content,
    leaderboard,
    password,
    users,
)

__all__ = [
    "analytics",
    "auth",
    "content",
    "leaderboard",
    "password",
    "users",
]
