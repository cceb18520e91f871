import re
from datetime import datetime
from typing import Any, Mapping

from menuboard.errors import InvalidArgument

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    if not isinstance(value, str):
        raise InvalidArgument(f"time must be an HH:MM string, got {value!r}")
    m = _HHMM.match(value)
    if not m:
        raise InvalidArgument(f"malformed time {value!r}, expected zero-padded HH:MM")
    return int(m.group(1)) * 60 + int(m.group(2))


def _field(day: Any, key: str, default=None):
    if isinstance(day, Mapping):
        return day.get(key, default)
    return getattr(day, key, default)


def default_schedule() -> dict[str, dict]:
    return {d: {"open": "08:00", "close": "22:00", "closed": False} for d in WEEKDAYS}


def validate_schedule(schedule: Mapping[str, Any]) -> None:
    for key, day in schedule.items():
        if key not in WEEKDAYS:
            raise InvalidArgument(f"unknown weekday {key!r}")
        if _field(day, "closed", False):
            continue
        parse_hhmm(_field(day, "open"))
        parse_hhmm(_field(day, "close"))


def is_open_at(day: Any, minute: int) -> bool:
    if day is None or _field(day, "closed", False):
        return False
    open_m = parse_hhmm(_field(day, "open"))
    close_m = parse_hhmm(_field(day, "close"))
    if close_m < open_m:
        # overnight, e.g. 18:00 -> 02:00
        return minute >= open_m or minute <= close_m
    return open_m <= minute <= close_m


def is_open_now(schedule: Mapping[str, Any] | None, now: datetime) -> bool:
    """Whether the restaurant is open at wall-clock `now`.

    Only the record for `now`'s own weekday is consulted, including for the
    early-morning part of an overnight shift. Both boundaries are inclusive.
    """
    if not schedule:
        return False
    day = schedule.get(WEEKDAYS[now.weekday()])
    return is_open_at(day, now.hour * 60 + now.minute)
