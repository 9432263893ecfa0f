"""Database models package."""
from app.db.models.user import User
from app.db.models.analytics import AnalyticsRecord

__all__ = [
    "User",
    "AnalyticsRecord",
]
