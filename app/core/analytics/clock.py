"""Calendar sources used to bucket test results by day."""
from __future__ import annotations

import datetime as dt
from typing import Protocol

TZ = dt.timezone.utc


class Clock(Protocol):
    def now(self) -> dt.datetime: ...

    def today(self) -> dt.date: ...


class UtcClock:
    """Wall clock with a UTC day boundary."""

    def now(self) -> dt.datetime:
        return dt.datetime.now(TZ)

    def today(self) -> dt.date:
        return self.now().date()


class FixedClock:
    """Clock pinned to a given moment; handy for scheduling and tests."""

    def __init__(self, moment: dt.datetime | dt.date) -> None:
        if not isinstance(moment, dt.datetime):
            moment = dt.datetime.combine(moment, dt.time(12, 0), tzinfo=TZ)
        self.moment = moment

    def now(self) -> dt.datetime:
        return self.moment

    def today(self) -> dt.date:
        return self.moment.astimezone(TZ).date()
