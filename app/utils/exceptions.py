"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class TypoException(Exception):
    """Base exception for the application."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(TypoException):
    """A referenced user or record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class UserNotFoundError(NotFoundError):
    """Raised when a user lookup fails."""


class AnalyticsNotFoundError(NotFoundError):
    """Raised when a user has no analytics record."""


class InvalidInputError(TypoException):
    """Submitted values are malformed or out of range."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ConflictError(TypoException):
    """The request clashes with existing state."""

    status_code = status.HTTP_409_CONFLICT


class ConcurrentUpdateError(ConflictError):
    """A conditional write kept losing against concurrent writers."""


class AuthenticationError(TypoException):
    """Authentication and authorization errors."""

    status_code = status.HTTP_401_UNAUTHORIZED


class OtpError(TypoException):
    """The supplied one-time password is missing, expired or wrong."""


class OtpAttemptsExceededError(OtpError):
    """Too many wrong guesses for the current one-time password."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class StoreUnavailableError(TypoException):
    """Transient record store failure; callers may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class CacheUnavailableError(TypoException):
    """Transient cache failure; callers may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


_TRANSIENT_DETAIL = "Service temporarily unavailable. Please try again later."


async def handle_typo_exception(request: Request, exc: TypoException) -> JSONResponse:
    """Translate a domain error into a JSON response."""

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{type(exc).__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": _TRANSIENT_DETAIL})

    logger.warning(f"{type(exc).__name__}: {exc.message}")
    content: Dict[str, Any] = {"detail": exc.message}
    if exc.details:
        content["details"] = exc.details
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handler to the application."""

    app.add_exception_handler(TypoException, handle_typo_exception)
