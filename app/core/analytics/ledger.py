"""Rolling daily progress history for typing analytics."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

# Number of calendar days kept in a record's progress history
PROGRESS_WINDOW = 10


@dataclass(frozen=True, slots=True)
class DailyEntry:
    """One calendar day of merged test results."""

    date: dt.date
    wpm: float
    accuracy: float
    count: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.date, dt.datetime) or not isinstance(self.date, dt.date):
            raise ValueError(f"DailyEntry.date must be a calendar date, got {self.date!r}")
        if self.count < 1:
            raise ValueError("DailyEntry.count must be at least 1")

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "wpm": self.wpm,
            "accuracy": self.accuracy,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DailyEntry":
        raw_date = payload["date"]
        day = raw_date if isinstance(raw_date, dt.date) else dt.date.fromisoformat(str(raw_date)[:10])
        return cls(
            date=day,
            wpm=float(payload["wpm"]),
            accuracy=float(payload["accuracy"]),
            count=int(payload.get("count", 1)),
        )


def check_window(progress: Iterable[DailyEntry]) -> list[DailyEntry]:
    """Validate window length and strict date ordering.

    Raises:
        ValueError: when the history is too long, unordered or repeats a day.
    """
    entries = list(progress)
    if len(entries) > PROGRESS_WINDOW:
        raise ValueError(f"Progress history holds at most {PROGRESS_WINDOW} entries")
    for previous, current in zip(entries, entries[1:]):
        if current.date <= previous.date:
            raise ValueError("Progress entries must be in ascending date order without duplicates")
    return entries


def merge_submission(
    progress: Iterable[DailyEntry],
    today: dt.date,
    wpm: float,
    accuracy: float,
) -> list[DailyEntry]:
    """Fold one test result into the daily history.

    A result on the same day as the newest entry updates that entry's
    running means; any other day starts a new entry, evicting the oldest
    one when the window is full. Values are not rounded here.

    Args:
        progress: Existing history, oldest first.
        today: Calendar day the result belongs to.
        wpm: Words per minute of the new test.
        accuracy: Accuracy percentage of the new test.

    Returns:
        A new list; the input sequence is left untouched.

    Raises:
        ValueError: when ``today`` precedes the newest entry.
    """
    entries = list(progress)
    last = entries[-1] if entries else None
    if last is not None and today < last.date:
        raise ValueError(f"Result day {today.isoformat()} precedes latest entry {last.date.isoformat()}")

    if last is None or last.date != today:
        if len(entries) >= PROGRESS_WINDOW:
            entries = entries[len(entries) - PROGRESS_WINDOW + 1:]
        entries.append(DailyEntry(date=today, wpm=wpm, accuracy=accuracy, count=1))
        return entries

    new_count = last.count + 1
    entries[-1] = replace(
        last,
        wpm=(last.wpm * last.count + wpm) / new_count,
        accuracy=(last.accuracy * last.count + accuracy) / new_count,
        count=new_count,
    )
    return entries
