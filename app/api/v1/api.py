"""API router for version 1."""
from fastapi import APIRouter

from app.api.v1.endpoints import (
    analytics,
    auth,
    content,
    leaderboard,
    password,
    users,
)


api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(password.router)
api_router.include_router(analytics.router)
api_router.include_router(leaderboard.router)
api_router.include_router(content.router)
