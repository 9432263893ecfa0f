"""Caching utilities backed by Redis with an in-process fallback."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Any

import redis
from loguru import logger

from app.config import settings
from app.utils.exceptions import CacheUnavailableError


def _json_default(value: Any) -> Any:
    """Serialize values not supported by ``json`` out of the box."""

    if hasattr(value, "isoformat"):
        return value.isoformat()  # datetime and date objects
    if isinstance(value, set):
        return sorted(value)
    if hasattr(value, "hex") and callable(getattr(value, "hex")):
        return value.hex()
    raise TypeError(f"Object of type {type(value)!r} is not JSON serializable")


def dumps(value: Any) -> str:
    """Serialize ``value`` the same way every cache writer does."""

    return json.dumps(value, default=_json_default)


@dataclass
class _CacheEntry:
    expires_at: float | None
    payload: str


class CacheBackend:
    """Key-value cache writing to Redis when configured.

    Without a Redis URL entries live in a process-local dictionary, which is
    what the test-suite and single-process development rely on. Redis
    failures are surfaced as ``CacheUnavailableError``; the caller decides
    whether a cache miss is acceptable.
    """

    def __init__(self, redis_url: str | None = None) -> None:
        self._lock = threading.Lock()
        self._local: dict[str, _CacheEntry] = {}
        self._redis: redis.Redis | None = None
        if redis_url:
            self._redis = redis.Redis.from_url(redis_url, decode_responses=True)

    @staticmethod
    def _compose(namespace: str, key: str) -> str:
        return f"{namespace}:{key}"

    # ------------------------------------------------------------------
    # Raw string access
    # ------------------------------------------------------------------
    def get_raw(self, key: str) -> str | None:
        if self._redis is not None:
            try:
                return self._redis.get(key)
            except redis.RedisError as exc:
                raise CacheUnavailableError(f"Cache read failed for {key}") from exc
        with self._lock:
            entry = self._local.get(key)
            if not entry:
                return None
            if entry.expires_at is not None and entry.expires_at < time.time():
                self._local.pop(key, None)
                return None
            return entry.payload

    def set_raw(self, key: str, payload: str, ttl_seconds: int | None = None) -> None:
        """Store ``payload`` under ``key``; no ``ttl_seconds`` means no expiry."""

        if self._redis is not None:
            try:
                self._redis.set(key, payload, ex=ttl_seconds or None)
            except redis.RedisError as exc:
                raise CacheUnavailableError(f"Cache write failed for {key}") from exc
            return
        with self._lock:
            expires_at = time.time() + ttl_seconds if ttl_seconds else None
            self._local[key] = _CacheEntry(expires_at=expires_at, payload=payload)

    def delete_raw(self, key: str) -> None:
        if self._redis is not None:
            try:
                self._redis.delete(key)
            except redis.RedisError as exc:
                raise CacheUnavailableError(f"Cache delete failed for {key}") from exc
            return
        with self._lock:
            self._local.pop(key, None)

    def exists(self, key: str) -> bool:
        return self.get_raw(key) is not None

    def ttl(self, key: str) -> int | None:
        """Return the remaining lifetime in whole seconds, ``None`` if unbounded or absent."""

        if self._redis is not None:
            try:
                remaining = self._redis.ttl(key)
            except redis.RedisError as exc:
                raise CacheUnavailableError(f"Cache ttl lookup failed for {key}") from exc
            return remaining if remaining > 0 else None
        with self._lock:
            entry = self._local.get(key)
            if not entry or entry.expires_at is None:
                return None
            remaining = int(entry.expires_at - time.time())
            return remaining if remaining > 0 else None

    # ------------------------------------------------------------------
    # Namespaced JSON access
    # ------------------------------------------------------------------
    def get(self, namespace: str, key: str) -> Any | None:
        value = self.get_raw(self._compose(namespace, key))
        if value is None:
            return None
        return json.loads(value)

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        self.set_raw(self._compose(namespace, key), dumps(value), ttl_seconds=ttl_seconds)

    def invalidate(self, namespace: str, *, key: str) -> None:
        self.delete_raw(self._compose(namespace, key))

    def clear(self, *, include_redis: bool = False) -> None:
        """Reset the in-memory cache (and optionally Redis) for test environments."""

        with self._lock:
            self._local.clear()
        if include_redis and self._redis is not None:
            try:
                self._redis.flushdb()
            except redis.RedisError as exc:
                logger.warning("Could not flush Redis", error=str(exc))


def _cache_url() -> str | None:
    if not settings.USE_REDIS_CACHE or settings.REDIS_URL is None:
        return None
    return str(settings.REDIS_URL)


cache_backend = CacheBackend(_cache_url())


__all__ = ["cache_backend", "CacheBackend", "dumps"]
