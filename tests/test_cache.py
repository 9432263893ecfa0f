"""Tests for the cache backend and domain error mapping."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import redis
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.utils.cache import CacheBackend
from app.utils.exceptions import (
    CacheUnavailableError,
    ConcurrentUpdateError,
    InvalidInputError,
    register_exception_handlers,
)


def test_local_cache_round_trip_and_expiry(monkeypatch) -> None:
    cache = CacheBackend()
    now = [1000.0]
    monkeypatch.setattr("app.utils.cache.time.time", lambda: now[0])

    cache.set("username", "ada", 1, ttl_seconds=10)
    assert cache.get("username", "ada") == 1
    assert cache.ttl("username:ada") == 10

    now[0] += 11
    assert cache.get("username", "ada") is None


def test_entries_without_ttl_never_expire() -> None:
    cache = CacheBackend()
    cache.set_raw("leaderboard", "[]")

    assert cache.ttl("leaderboard") is None
    assert cache.exists("leaderboard")

    cache.delete_raw("leaderboard")
    assert not cache.exists("leaderboard")


def test_redis_errors_become_cache_unavailable() -> None:
    cache = CacheBackend()
    cache._redis = MagicMock()
    cache._redis.get.side_effect = redis.ConnectionError("down")

    with pytest.raises(CacheUnavailableError):
        cache.get_raw("leaderboard")


@pytest.fixture()
def error_client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    def conflict():
        raise ConcurrentUpdateError("Analytics were updated concurrently", details={"attempts": 3})

    @app.get("/invalid")
    def invalid():
        raise InvalidInputError("Invalid test result", details={"wpm": "must not be negative"})

    @app.get("/unavailable")
    def unavailable():
        raise CacheUnavailableError("redis down at 10.0.0.5")

    return TestClient(app)


def test_domain_errors_map_to_status_codes(error_client: TestClient) -> None:
    conflict = error_client.get("/conflict")
    assert conflict.status_code == 409
    assert conflict.json() == {
        "detail": "Analytics were updated concurrently",
        "details": {"attempts": 3},
    }

    assert error_client.get("/invalid").status_code == 422


def test_transient_errors_hide_internal_message(error_client: TestClient) -> None:
    response = error_client.get("/unavailable")

    assert response.status_code == 503
    assert "10.0.0.5" not in response.json()["detail"]
