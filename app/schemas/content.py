"""Schemas for preloaded typing content."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ContentKind(str, Enum):
    """Buckets of typing material kept warm in the cache."""

    quote = "quote"
    easy_short = "easy-short"
    easy_long = "easy-long"
    hard_short = "hard-short"
    hard_long = "hard-long"


class ParagraphRead(BaseModel):
    id: str
    kind: ContentKind
    content: str
