"""Pydantic models for analytics and leaderboard endpoints."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DailyEntryRead(BaseModel):
    """One day of the rolling progress history."""

    date: date
    wpm: float
    accuracy: float
    count: int

    model_config = ConfigDict(from_attributes=True)


class AnalyticsRead(BaseModel):
    """Full analytics record for the account owner."""

    wpm: float
    accuracy: float
    test_timings: float
    total_par: int
    max_streak: int
    last_test_taken: Optional[datetime] = None
    progress: List[DailyEntryRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ResultSubmission(BaseModel):
    """Result of one completed typing test."""

    wpm: float = Field(..., ge=0)
    accuracy: float = Field(..., ge=0, le=100)
    test_timings: float = Field(..., ge=0, description="Test duration in seconds")
    max_streak: int = Field(0, ge=0)
    last_test_taken: Optional[datetime] = Field(
        None, description="When the test finished; defaults to the time of submission"
    )


class AccountAnalytics(BaseModel):
    """Public summary shown on a user's profile page."""

    username: str
    first_name: str
    last_name: str
    wpm: float
    accuracy: float
    total_par: int


class LeaderboardEntryRead(BaseModel):
    """Ranked leaderboard row."""

    rank: int
    user_id: uuid.UUID
    username: str
    wpm: float
    accuracy: float
    weighted_score: float

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "DailyEntryRead",
    "AnalyticsRead",
    "ResultSubmission",
    "AccountAnalytics",
    "LeaderboardEntryRead",
]
