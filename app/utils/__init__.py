"""Utility helpers package."""

from app.utils.cache import CacheBackend, cache_backend

__all__ = ["CacheBackend", "cache_backend"]
