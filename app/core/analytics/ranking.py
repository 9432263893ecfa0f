"""Leaderboard ranking over pre-sorted analytics records."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping, Protocol

WPM_WEIGHT = 0.7
ACCURACY_WEIGHT = 0.3
DEFAULT_LIMIT = 10


class RankCandidate(Protocol):
    """Anything carrying the fields a leaderboard row is built from."""

    user_id: Any
    username: str
    wpm: float
    accuracy: float


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    rank: int
    user_id: str
    username: str
    wpm: float
    accuracy: float
    weighted_score: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LeaderboardEntry":
        """Rebuild a row from ``to_dict`` output.

        Raises:
            KeyError, TypeError, ValueError: when the payload is not a row.
        """
        return cls(
            rank=int(payload["rank"]),
            user_id=str(payload["user_id"]),
            username=str(payload["username"]),
            wpm=float(payload["wpm"]),
            accuracy=float(payload["accuracy"]),
            weighted_score=float(payload["weighted_score"]),
        )


def weighted_score(wpm: float, accuracy: float) -> float:
    """Blend speed and correctness into a single display score."""

    return round(wpm * WPM_WEIGHT + accuracy * ACCURACY_WEIGHT, 2)


def rank(candidates: Iterable[RankCandidate], limit: int = DEFAULT_LIMIT) -> list[LeaderboardEntry]:
    """Number the candidates in the order given.

    Callers hand in records already sorted by wpm then accuracy, both
    descending. The weighted score is informational and never re-sorts.
    """
    entries: list[LeaderboardEntry] = []
    for position, candidate in enumerate(candidates):
        if position >= limit:
            break
        entries.append(
            LeaderboardEntry(
                rank=position + 1,
                user_id=str(candidate.user_id),
                username=candidate.username or "Unknown",
                wpm=round(candidate.wpm, 2),
                accuracy=round(candidate.accuracy, 2),
                weighted_score=weighted_score(candidate.wpm, candidate.accuracy),
            )
        )
    return entries
