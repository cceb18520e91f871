from datetime import date, datetime

from menuboard.errors import InvalidArgument


def _as_day(value, name: str) -> date | None:
    if value is None:
        return None
    # datetime is a date subclass; refuse it so time-of-day never leaks in
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidArgument(f"{name} must be a calendar date, got {type(value).__name__}")
    return value


def is_within_window(today: date, start: date | None, end: date | None) -> bool:
    """True iff `today` lies in the inclusive [start, end] window.

    Each bound is checked on its own, so a window whose start is after its
    end can never be satisfied.
    """
    today = _as_day(today, "today")
    if today is None:
        raise InvalidArgument("today is required")
    start = _as_day(start, "start")
    end = _as_day(end, "end")

    if start is not None and today < start:
        return False
    if end is not None and today > end:
        return False
    return True
