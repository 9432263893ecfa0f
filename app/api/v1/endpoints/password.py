"""Password recovery endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas import MessageResponse, OtpRequest, PasswordReset
from app.services.password import OtpStore, PasswordService
from app.services.users import UserService
from app.utils.cache import CacheBackend

router = APIRouter(prefix="/password", tags=["password"])


def _service(db: Session, cache: CacheBackend) -> PasswordService:
    return PasswordService(
        db,
        user_service=UserService(db, cache=cache),
        otp_store=OtpStore(cache),
    )


@router.post("/otp", response_model=MessageResponse)
def send_otp(
    payload: OtpRequest,
    db: Session = Depends(deps.get_db),
    cache: CacheBackend = Depends(deps.get_cache),
) -> MessageResponse:
    """Email a one-time code for resetting the password."""

    _service(db, cache).send_otp(payload.email)
    return MessageResponse(message="OTP sent successfully")


@router.post("/reset", response_model=MessageResponse)
def reset_password(
    payload: PasswordReset,
    db: Session = Depends(deps.get_db),
    cache: CacheBackend = Depends(deps.get_cache),
) -> MessageResponse:
    """Set a new password using the emailed one-time code."""

    _service(db, cache).reset_password(payload.email, payload.otp, payload.password)
    return MessageResponse(message="Password reset successfully")
