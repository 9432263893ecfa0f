"""User management endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.db.models.user import User
from app.schemas import AccountDelete, UsernameAvailability, UsernameUpdate, UserRead
from app.services.mail import format_datetime
from app.services.users import UserService
from app.tasks.mail import enqueue_mail
from app.utils.cache import CacheBackend

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/check-username", response_model=UsernameAvailability)
def check_username(
    username: str = Query(..., min_length=3, max_length=20, pattern=r"^[A-Za-z0-9_.]+$"),
    db: Session = Depends(deps.get_db),
    cache: CacheBackend = Depends(deps.get_cache),
) -> UsernameAvailability:
    """Report whether a username can still be registered."""

    taken = UserService(db, cache=cache).username_exists(username)
    return UsernameAvailability(
        username=username,
        available=not taken,
        message="Username is already taken" if taken else "Username is available",
    )


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(deps.get_current_user)) -> User:
    """Return the authenticated user profile."""

    return current_user


@router.put("/username", response_model=UserRead)
def change_username(
    payload: UsernameUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    cache: CacheBackend = Depends(deps.get_cache),
) -> User:
    """Rename the authenticated account."""

    return UserService(db, cache=cache).change_username(current_user, payload.new_username)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    payload: AccountDelete,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    cache: CacheBackend = Depends(deps.get_cache),
) -> None:
    """Delete the account and its analytics after re-checking the password."""

    email = current_user.email
    UserService(db, cache=cache).delete_account(current_user, payload.password)
    enqueue_mail(email, "delete", format_datetime())
