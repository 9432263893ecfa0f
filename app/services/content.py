"""Preloaded typing material served from the cache."""
from __future__ import annotations

import random

from app.config import settings
from app.data.paragraphs import (
    EASY_WORDS,
    HARD_WORDS,
    LONG_DRILL_WORDS,
    QUOTES,
    SHORT_DRILL_WORDS,
)
from app.schemas.content import ContentKind
from app.utils.cache import CacheBackend, cache_backend

PARAGRAPH_NAMESPACE = "paragraph"

_KEY_PREFIX = {
    ContentKind.quote: "qo",
    ContentKind.easy_short: "wes",
    ContentKind.easy_long: "wel",
    ContentKind.hard_short: "whs",
    ContentKind.hard_long: "whl",
}

_DRILLS = {
    ContentKind.easy_short: (EASY_WORDS, SHORT_DRILL_WORDS),
    ContentKind.easy_long: (EASY_WORDS, LONG_DRILL_WORDS),
    ContentKind.hard_short: (HARD_WORDS, SHORT_DRILL_WORDS),
    ContentKind.hard_long: (HARD_WORDS, LONG_DRILL_WORDS),
}


def build_drill(words: list[str], length: int, seed: int) -> str:
    """Return a reproducible sequence of ``length`` words drawn from ``words``."""

    rng = random.Random(seed)
    return " ".join(rng.choice(words) for _ in range(length))


class ContentService:
    """Generate, store and hand out typing paragraphs per bucket."""

    def __init__(self, cache: CacheBackend | None = None, *, rng: random.Random | None = None) -> None:
        self.cache = cache or cache_backend
        self.rng = rng or random.Random()

    def _items_for(self, kind: ContentKind, max_items: int) -> list[tuple[str, str]]:
        prefix = _KEY_PREFIX[kind]
        if kind is ContentKind.quote:
            texts = QUOTES[:max_items]
        else:
            words, length = _DRILLS[kind]
            texts = [build_drill(words, length, seed=index) for index in range(max_items)]
        return [(f"{prefix}{index + 1}", text) for index, text in enumerate(texts)]

    def preload(self, max_items: int | None = None) -> dict[str, int]:
        """Write every bucket and its index; returns items stored per bucket."""

        max_items = max_items or settings.PARAGRAPH_PRELOAD_MAX
        counts: dict[str, int] = {}
        for kind in ContentKind:
            items = self._items_for(kind, max_items)
            for item_id, text in items:
                self.cache.set(PARAGRAPH_NAMESPACE, item_id, text)
            self.cache.set(PARAGRAPH_NAMESPACE, f"index:{kind.value}", [item_id for item_id, _ in items])
            counts[kind.value] = len(items)
        return counts

    def random_paragraph(self, kind: ContentKind) -> dict[str, str] | None:
        ids = self.cache.get(PARAGRAPH_NAMESPACE, f"index:{kind.value}") or []
        if not ids:
            return None
        item_id = self.rng.choice(ids)
        content = self.cache.get(PARAGRAPH_NAMESPACE, item_id)
        if content is None:
            return None
        return {"id": item_id, "kind": kind.value, "content": content}
