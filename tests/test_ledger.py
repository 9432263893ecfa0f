"""Unit tests for the daily progress ledger."""
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from app.core.analytics import PROGRESS_WINDOW, DailyEntry, check_window, merge_submission


D0 = date(2024, 1, 1)


def _history(days: int) -> list[DailyEntry]:
    return [DailyEntry(date=D0 + timedelta(days=i), wpm=50 + i, accuracy=90) for i in range(days)]


def test_first_submission_starts_history() -> None:
    progress = merge_submission([], D0, 85, 95)

    assert progress == [DailyEntry(date=D0, wpm=85, accuracy=95, count=1)]


def test_same_day_submissions_keep_exact_running_mean() -> None:
    progress = merge_submission([], D0, 85, 95)
    progress = merge_submission(progress, D0, 90, 98)

    assert len(progress) == 1
    assert progress[0].wpm == pytest.approx(87.5)
    assert progress[0].accuracy == pytest.approx(96.5)
    assert progress[0].count == 2

    progress = merge_submission(progress, D0, 88, 97)
    assert progress[0].wpm == pytest.approx(263 / 3)
    assert progress[0].accuracy == pytest.approx(290 / 3)
    assert progress[0].count == 3


def test_new_day_appends_entry() -> None:
    progress = merge_submission(_history(2), D0 + timedelta(days=5), 70, 99)

    assert [entry.date for entry in progress] == [D0, D0 + timedelta(days=1), D0 + timedelta(days=5)]
    assert progress[-1].count == 1


def test_full_window_evicts_oldest_day() -> None:
    history = _history(PROGRESS_WINDOW)
    day_eleven = D0 + timedelta(days=PROGRESS_WINDOW)

    progress = merge_submission(history, day_eleven, 60, 91)

    assert len(progress) == PROGRESS_WINDOW
    assert progress[0].date == D0 + timedelta(days=1)
    assert progress[-1] == DailyEntry(date=day_eleven, wpm=60, accuracy=91, count=1)


def test_same_day_on_full_window_does_not_evict() -> None:
    history = _history(PROGRESS_WINDOW)
    last_day = history[-1].date

    progress = merge_submission(history, last_day, 100, 100)

    assert len(progress) == PROGRESS_WINDOW
    assert progress[0].date == D0
    assert progress[-1].count == 2


def test_merge_does_not_mutate_input() -> None:
    history = _history(3)
    snapshot = list(history)

    merge_submission(history, history[-1].date, 10, 10)

    assert history == snapshot


def test_daily_entry_round_trips_through_dict() -> None:
    entry = DailyEntry(date=D0, wpm=87.67, accuracy=96.67, count=3)

    payload = entry.to_dict()

    assert payload == {"date": "2024-01-01", "wpm": 87.67, "accuracy": 96.67, "count": 3}
    assert DailyEntry.from_dict(payload) == entry


def test_daily_entry_rejects_datetime() -> None:
    with pytest.raises(ValueError):
        DailyEntry(date=datetime(2024, 1, 1, 9, 30), wpm=1, accuracy=1)


@pytest.mark.parametrize(
    "history",
    [
        _history(PROGRESS_WINDOW + 1),
        [DailyEntry(date=D0, wpm=1, accuracy=1), DailyEntry(date=D0, wpm=2, accuracy=2)],
        list(reversed(_history(2))),
    ],
)
def test_check_window_rejects_malformed_history(history: list[DailyEntry]) -> None:
    with pytest.raises(ValueError):
        check_window(history)


def test_result_before_latest_day_is_rejected() -> None:
    history = _history(3)

    with pytest.raises(ValueError):
        merge_submission(history, history[-1].date - timedelta(days=1), 70, 95)
