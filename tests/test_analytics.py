"""Tests for the analytics record manager and its endpoints."""
from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.analytics import PROGRESS_WINDOW, DailyEntry, FixedClock
from app.core.security import get_password_hash
from app.db.models import AnalyticsRecord, User
from app.db.repositories import AnalyticsRepository
from app.services.analytics import AnalyticsService
from app.utils.exceptions import (
    AnalyticsNotFoundError,
    ConcurrentUpdateError,
    InvalidInputError,
    UserNotFoundError,
)
from conftest import auth_headers, register


def _make_user(db_session, username: str) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=get_password_hash("irrelevant"),
        first_name="Grace",
        last_name="Hopper",
    )
    db_session.add(user)
    db_session.flush()
    AnalyticsRepository(db_session).create(user.id)
    db_session.commit()
    return user


@pytest.fixture()
def typist(db_session) -> User:
    return _make_user(db_session, "grace")


@pytest.fixture()
def service(db_session, clock) -> AnalyticsService:
    return AnalyticsService(db_session, clock=clock)


def _submit(service: AnalyticsService, user_id, wpm: float, accuracy: float, **extra) -> AnalyticsRecord:
    values = {"test_timings": 60, "max_streak": 12, **extra}
    return service.submit_result(user_id, wpm=wpm, accuracy=accuracy, **values)


class RacingRepository(AnalyticsRepository):
    """Lets another writer sneak in before the first ``races`` conditional writes."""

    def __init__(self, db, races: int) -> None:
        super().__init__(db)
        self.races = races
        self.conditional_calls = 0

    def update_one(self, user_id, values, *, expected_version=None):
        if expected_version is not None:
            self.conditional_calls += 1
            if self.conditional_calls <= self.races:
                super().update_one(user_id, {"max_streak": 99})
        return super().update_one(user_id, values, expected_version=expected_version)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------
def test_new_record_is_zeroed(service: AnalyticsService, typist: User) -> None:
    record = service.get_record(typist.id)

    assert record.wpm == 0
    assert record.accuracy == 0
    assert record.total_par == 0
    assert record.last_test_taken is None
    assert record.progress == []


def test_same_day_results_merge_with_rounding(service: AnalyticsService, typist: User, clock) -> None:
    _submit(service, typist.id, 85, 95)
    record = _submit(service, typist.id, 90, 98)

    assert record.wpm == 90
    assert record.accuracy == 98
    assert record.progress == [DailyEntry(date=clock.today(), wpm=87.5, accuracy=96.5, count=2)]

    record = _submit(service, typist.id, 88, 97)

    assert record.progress == [DailyEntry(date=clock.today(), wpm=87.67, accuracy=96.67, count=3)]
    assert record.total_par == 3


def test_snapshot_fields_are_rounded(service: AnalyticsService, typist: User) -> None:
    record = _submit(service, typist.id, 71.23456, 93.98765, test_timings=30.555)

    assert record.wpm == 71.23
    assert record.accuracy == 93.99
    assert record.test_timings == 30.56
    assert record.progress[0].wpm == 71.23


def test_rolling_window_evicts_oldest_day(service: AnalyticsService, typist: User, clock) -> None:
    first_day = clock.today()
    for offset in range(PROGRESS_WINDOW + 1):
        clock.moment = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc) + timedelta(days=offset)
        record = _submit(service, typist.id, 50 + offset, 90)

    assert len(record.progress) == PROGRESS_WINDOW
    assert record.progress[0].date == first_day + timedelta(days=1)
    assert record.progress[-1].date == first_day + timedelta(days=PROGRESS_WINDOW)
    assert record.total_par == PROGRESS_WINDOW + 1


def test_day_gaps_do_not_backfill(service: AnalyticsService, typist: User, clock) -> None:
    _submit(service, typist.id, 60, 90)
    clock.moment = clock.moment + timedelta(days=4)
    record = _submit(service, typist.id, 70, 95)

    assert [entry.date for entry in record.progress] == [date(2024, 3, 1), date(2024, 3, 5)]


def test_clock_moving_backwards_is_rejected(service: AnalyticsService, typist: User, clock) -> None:
    _submit(service, typist.id, 60, 90)
    clock.moment = clock.moment - timedelta(days=1)

    with pytest.raises(InvalidInputError):
        _submit(service, typist.id, 70, 95)

    record = service.get_record(typist.id)
    assert record.total_par == 1
    assert [entry.date for entry in record.progress] == [date(2024, 3, 1)]


def test_unordered_progress_write_is_refused(db_session, typist: User) -> None:
    repository = AnalyticsRepository(db_session)
    progress = [
        DailyEntry(date=date(2024, 3, 2), wpm=60, accuracy=90),
        DailyEntry(date=date(2024, 3, 1), wpm=70, accuracy=95),
    ]

    with pytest.raises(ValueError):
        repository.update_one(typist.id, {"progress": progress})

    assert repository.find_one(typist.id).progress == []


def test_last_test_taken_defaults_to_clock(service: AnalyticsService, typist: User, clock) -> None:
    record = _submit(service, typist.id, 60, 90)

    assert record.last_test_taken.replace(tzinfo=timezone.utc) == clock.now()


def test_reset_clears_everything(service: AnalyticsService, typist: User) -> None:
    _submit(service, typist.id, 60, 90)
    _submit(service, typist.id, 65, 91)

    record = service.reset_record(typist.id)

    assert record.wpm == 0
    assert record.accuracy == 0
    assert record.test_timings == 0
    assert record.total_par == 0
    assert record.max_streak == 0
    assert record.last_test_taken is None
    assert record.progress == []


def test_reset_after_reset_is_stable(service: AnalyticsService, typist: User) -> None:
    service.reset_record(typist.id)
    record = service.reset_record(typist.id)

    assert record.total_par == 0
    assert record.progress == []


def test_missing_record_is_not_found(service: AnalyticsService) -> None:
    missing = uuid.uuid4()

    with pytest.raises(AnalyticsNotFoundError):
        service.get_record(missing)
    with pytest.raises(AnalyticsNotFoundError):
        _submit(service, missing, 60, 90)
    with pytest.raises(AnalyticsNotFoundError):
        service.reset_record(missing)


@pytest.mark.parametrize(
    ("wpm", "accuracy", "field"),
    [(-1, 90, "wpm"), (60, 101, "accuracy"), (60, -0.5, "accuracy"), (float("nan"), 90, "wpm")],
)
def test_invalid_result_rejected_before_write(
    service: AnalyticsService, typist: User, wpm: float, accuracy: float, field: str
) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        _submit(service, typist.id, wpm, accuracy)

    assert field in excinfo.value.details
    assert service.get_record(typist.id).total_par == 0


def test_users_do_not_contaminate_each_other(service: AnalyticsService, db_session) -> None:
    first = _make_user(db_session, "first")
    second = _make_user(db_session, "second")

    _submit(service, first.id, 100, 99)
    _submit(service, first.id, 100, 99)
    _submit(service, second.id, 40, 80)

    assert service.get_record(first.id).total_par == 2
    other = service.get_record(second.id)
    assert other.total_par == 1
    assert other.progress[0].wpm == 40


def test_lost_race_is_retried(db_session, typist: User, clock) -> None:
    repository = RacingRepository(db_session, races=1)
    service = AnalyticsService(db_session, repository=repository, clock=clock)

    record = _submit(service, typist.id, 80, 95)

    assert repository.conditional_calls == 2
    assert record.total_par == 1
    assert record.max_streak == 12
    assert record.version == 2


def test_persistent_contention_gives_up(db_session, typist: User, clock) -> None:
    repository = RacingRepository(db_session, races=10)
    service = AnalyticsService(db_session, repository=repository, clock=clock, max_write_attempts=3)

    with pytest.raises(ConcurrentUpdateError):
        _submit(service, typist.id, 80, 95)

    record = service.get_record(typist.id)
    assert repository.conditional_calls == 3
    assert record.total_par == 0
    assert record.progress == []


def test_stale_version_write_is_refused(db_session, typist: User) -> None:
    repository = AnalyticsRepository(db_session)
    stale_version = repository.find_one(typist.id).version
    repository.update_one(typist.id, {"wpm": 10})

    assert repository.update_one(typist.id, {"wpm": 20}, expected_version=stale_version) is None
    assert repository.find_one(typist.id).wpm == 10


def test_public_summary(service: AnalyticsService, typist: User) -> None:
    _submit(service, typist.id, 77.777, 96)

    summary = service.get_public_summary("grace")

    assert summary == {
        "username": "grace",
        "first_name": "Grace",
        "last_name": "Hopper",
        "wpm": 77.78,
        "accuracy": 96.0,
        "total_par": 1,
    }


def test_public_summary_unknown_user(service: AnalyticsService) -> None:
    with pytest.raises(UserNotFoundError):
        service.get_public_summary("nobody")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
def test_registration_creates_empty_analytics(client: TestClient) -> None:
    body = register(client, "newbie")

    assert body["analytics"]["total_par"] == 0
    assert body["analytics"]["progress"] == []

    response = client.get("/api/v1/analytics/me", headers=auth_headers(body))
    assert response.status_code == 200
    assert response.json()["wpm"] == 0


def test_submit_and_read_progress(client: TestClient) -> None:
    headers = auth_headers(register(client, "speedy"))

    for wpm, accuracy in ((85, 95), (90, 98), (88, 97)):
        response = client.post(
            "/api/v1/analytics/me",
            json={"wpm": wpm, "accuracy": accuracy, "test_timings": 60, "max_streak": 20},
            headers=headers,
        )
        assert response.status_code == 200, response.text

    data = client.get("/api/v1/analytics/me", headers=headers).json()
    assert data["total_par"] == 3
    assert data["wpm"] == 88
    assert data["progress"] == [
        {"date": "2024-03-01", "wpm": 87.67, "accuracy": 96.67, "count": 3}
    ]


def test_submit_rejects_out_of_range_accuracy(client: TestClient) -> None:
    headers = auth_headers(register(client, "careless"))

    response = client.post(
        "/api/v1/analytics/me",
        json={"wpm": 50, "accuracy": 120, "test_timings": 60},
        headers=headers,
    )

    assert response.status_code == 422
    assert client.get("/api/v1/analytics/me", headers=headers).json()["total_par"] == 0


def test_reset_endpoint(client: TestClient) -> None:
    headers = auth_headers(register(client, "resetter"))
    client.post(
        "/api/v1/analytics/me",
        json={"wpm": 50, "accuracy": 90, "test_timings": 60},
        headers=headers,
    )

    response = client.put("/api/v1/analytics/me/reset", headers=headers)

    assert response.status_code == 200
    assert response.json()["total_par"] == 0
    assert response.json()["progress"] == []


def test_account_summary_endpoint(client: TestClient) -> None:
    viewer = auth_headers(register(client, "viewer"))
    target = auth_headers(register(client, "target", first_name="Alan", last_name="Turing"))
    client.post(
        "/api/v1/analytics/me",
        json={"wpm": 101.5, "accuracy": 99, "test_timings": 30},
        headers=target,
    )

    response = client.get("/api/v1/analytics/accounts/target", headers=viewer)

    assert response.status_code == 200
    assert response.json() == {
        "username": "target",
        "first_name": "Alan",
        "last_name": "Turing",
        "wpm": 101.5,
        "accuracy": 99.0,
        "total_par": 1,
    }


def test_account_summary_unknown_user(client: TestClient) -> None:
    headers = auth_headers(register(client, "lonely"))

    response = client.get("/api/v1/analytics/accounts/ghost", headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_analytics_requires_authentication(client: TestClient) -> None:
    assert client.get("/api/v1/analytics/me").status_code == 401
