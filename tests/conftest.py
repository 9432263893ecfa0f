"""Pytest fixtures for API tests."""

import os
from collections.abc import Generator
from datetime import datetime, timezone

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["USE_REDIS_CACHE"] = "false"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_clock, get_db
from app.core.analytics import FixedClock
from app.db.base import Base
from app.db.models import AnalyticsRecord, User
from app.main import create_app
from app.utils.cache import cache_backend

STRONG_PASSWORD = "Typ1ng!Fast"


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__, AnalyticsRecord.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[AnalyticsRecord.__table__, User.__table__])


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(AnalyticsRecord).delete()
        db.query(User).delete()
        db.commit()
        db.close()


@pytest.fixture(autouse=True)
def clear_cache() -> Generator[None, None, None]:
    cache_backend.clear()
    try:
        yield
    finally:
        cache_backend.clear()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def client(db_session: Session, clock: FixedClock) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client


def register(
    client: TestClient,
    username: str,
    *,
    email: str | None = None,
    password: str = STRONG_PASSWORD,
    first_name: str = "Ada",
    last_name: str = "Lovelace",
) -> dict:
    """Register an account and return the JSON body of the response."""

    payload = {
        "email": email or f"{username}@example.com",
        "username": username,
        "first_name": first_name,
        "last_name": last_name,
        "password": password,
        "confirm_password": password,
    }
    response = client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(body: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {body['tokens']['access_token']}"}
