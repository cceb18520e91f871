"""Single source of "now" for every time-dependent computation.

Promotion windows compare calendar dates, opening hours compare wall-clock
minutes and countdowns compare instants; all three are derived from the same
clock, evaluated in the restaurant's configured time zone.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    def __init__(self, tz: str = "UTC"):
        self.tz = ZoneInfo(tz)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """A clock frozen at `at` until advanced explicitly."""

    def __init__(self, at: datetime):
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self.at = at

    def now(self) -> datetime:
        return self.at

    def today(self) -> date:
        return self.at.date()

    def advance(self, **delta) -> None:
        self.at = self.at + timedelta(**delta)
