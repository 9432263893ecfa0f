"""Authentication API endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.db.models.user import User
from app.db.repositories import AnalyticsRepository
from app.schemas import AuthResponse, RefreshRequest, Token, UserCreate, UserLogin
from app.services.auth import AuthService


router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(db: Session, service: AuthService, user: User, remember_me: bool) -> AuthResponse:
    return AuthResponse.model_validate(
        {
            "user": user,
            "analytics": AnalyticsRepository(db).find_one(user.id),
            "tokens": service.create_tokens(user, remember_me=remember_me),
        },
        from_attributes=True,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)) -> AuthResponse:
    """Register a new user, returning profile, empty analytics and tokens."""

    service = AuthService(db)
    user = service.register_user(payload)
    return _auth_response(db, service, user, payload.remember_me)


@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, db: Session = Depends(get_db)) -> AuthResponse:
    """Authenticate by email or username."""

    service = AuthService(db)
    user = service.authenticate_user(payload.identifier, payload.password)
    return _auth_response(db, service, user, payload.remember_me)


@router.post("/refresh", response_model=Token)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)) -> Token:
    """Exchange a refresh token for a fresh token pair."""

    return AuthService(db).refresh_tokens(payload.refresh_token, remember_me=payload.remember_me)
