"""Progress aggregation and leaderboard ranking primitives."""

from .clock import Clock, FixedClock, UtcClock
from .ledger import PROGRESS_WINDOW, DailyEntry, check_window, merge_submission
from .ranking import LeaderboardEntry, RankCandidate, rank, weighted_score

__all__ = [
    "Clock",
    "DailyEntry",
    "FixedClock",
    "LeaderboardEntry",
    "PROGRESS_WINDOW",
    "RankCandidate",
    "UtcClock",
    "check_window",
    "merge_submission",
    "rank",
    "weighted_score",
]
