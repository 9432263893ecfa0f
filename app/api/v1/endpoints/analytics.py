"""Typing analytics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api import deps
from app.db.models.analytics import AnalyticsRecord
from app.db.models.user import User
from app.schemas import AccountAnalytics, AnalyticsRead, ResultSubmission
from app.services.analytics import AnalyticsService


router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/me", response_model=AnalyticsRead)
def read_analytics(
    *,
    current_user: User = Depends(deps.get_current_user),
    service: AnalyticsService = Depends(deps.get_analytics_service),
) -> AnalyticsRecord:
    """Return the authenticated user's analytics and daily history."""

    return service.get_record(current_user.id)


@router.post("/me", response_model=AnalyticsRead)
def submit_result(
    *,
    payload: ResultSubmission,
    current_user: User = Depends(deps.get_current_user),
    service: AnalyticsService = Depends(deps.get_analytics_service),
) -> AnalyticsRecord:
    """Record a finished typing test."""

    return service.submit_result(
        current_user.id,
        wpm=payload.wpm,
        accuracy=payload.accuracy,
        test_timings=payload.test_timings,
        max_streak=payload.max_streak,
        last_test_taken=payload.last_test_taken,
    )


@router.put("/me/reset", response_model=AnalyticsRead)
def reset_analytics(
    *,
    current_user: User = Depends(deps.get_current_user),
    service: AnalyticsService = Depends(deps.get_analytics_service),
) -> AnalyticsRecord:
    """Clear all statistics for the authenticated user."""

    return service.reset_record(current_user.id)


@router.get("/accounts/{username}", response_model=AccountAnalytics)
def read_account_analytics(
    username: str,
    _: User = Depends(deps.get_current_user),
    service: AnalyticsService = Depends(deps.get_analytics_service),
) -> dict:
    """Return another user's public typing summary."""

    return service.get_public_summary(username)
