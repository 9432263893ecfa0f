"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.config import settings
from app.utils.exceptions import register_exception_handlers


tags_metadata: List[dict[str, str]] = [
    {"name": "auth", "description": "Register accounts and issue authentication tokens."},
    {"name": "users", "description": "Usernames and account deletion."},
    {"name": "password", "description": "One-time-password based password recovery."},
    {"name": "analytics", "description": "Submit typing tests and read progress history."},
    {"name": "leaderboard", "description": "Cached ranking of the fastest typists."},
    {"name": "content", "description": "Preloaded quotes and word drills."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Typing test backend with per-user analytics and a leaderboard.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc), "message": "Validation failed"},
        )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Drop non-serialisable ``ctx`` payloads (e.g. the raised ValueError)."""

    return [{key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()]


app = create_app()
