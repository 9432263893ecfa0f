"""Leaderboard endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api import deps
from app.core.analytics import LeaderboardEntry
from app.db.models.user import User
from app.schemas import LeaderboardEntryRead
from app.services.leaderboard import LeaderboardService

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[LeaderboardEntryRead])
def read_leaderboard(
    service: LeaderboardService = Depends(deps.get_leaderboard_service),
) -> list[LeaderboardEntry]:
    """Return the last published ranking; empty until the first regeneration."""

    return service.current()


@router.post("/refresh", response_model=list[LeaderboardEntryRead])
def refresh_leaderboard(
    limit: int | None = Query(None, ge=1, le=100),
    _: User = Depends(deps.get_current_user),
    service: LeaderboardService = Depends(deps.get_leaderboard_service),
) -> list[LeaderboardEntry]:
    """Recompute the ranking now instead of waiting for the scheduler."""

    return service.regenerate(limit)
