"""Banner rotation among eligible promotions, plus countdown arithmetic.

The controller is a small state machine: ``Idle`` when there is nothing to
show, ``Showing(index)`` otherwise. A recurring tick advances the index;
``next``/``prev`` are manual navigation. The promotion snapshot is an
immutable tuple that is swapped whole by ``replace``, so a reader iterating
``promotions`` never sees a half-updated list.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterable, Sequence
from zoneinfo import ZoneInfo

from menuboard.services.clock import Clock

logger = logging.getLogger("menuboard.rotation")

DAY = 86400
HOUR = 3600
MINUTE = 60


class RotationState(Enum):
    IDLE = "idle"
    SHOWING = "showing"


@dataclass(frozen=True)
class TimeLeft:
    days: int
    hours: int
    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.days * DAY + self.hours * HOUR + self.minutes * MINUTE + self.seconds

    def display(self) -> str:
        hms = f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"
        return f"{self.days}d {hms}" if self.days > 0 else hms


def time_left(end: datetime, now: datetime) -> TimeLeft | None:
    """Whole seconds until `end`, or None once `end` is reached.

    The remainder is truncated, so the final sub-second fraction already
    counts as expired: the last non-None value is one second.
    """
    remaining = int((end - now).total_seconds())
    if remaining <= 0:
        return None
    days, rest = divmod(remaining, DAY)
    hours, rest = divmod(rest, HOUR)
    minutes, seconds = divmod(rest, MINUTE)
    return TimeLeft(days, hours, minutes, seconds)


def promotion_end_instant(end_date: date, tz: str | ZoneInfo) -> datetime:
    # end dates are inclusive: the promotion runs until the next local midnight
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    return datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=zone)


class RotationController:
    def __init__(self, promotions: Iterable[Any] = (), clock: Clock | None = None, period: float = 5.0):
        self.clock = clock
        self.period = period
        self._promotions: tuple = tuple(promotions)
        self._index = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._wanted = False

    # ---------- state ----------

    @property
    def promotions(self) -> Sequence[Any]:
        return self._promotions

    @property
    def state(self) -> RotationState:
        return RotationState.SHOWING if self._promotions else RotationState.IDLE

    @property
    def index(self) -> int | None:
        return self._index if self._promotions else None

    @property
    def current(self):
        snapshot = self._promotions
        if not snapshot:
            return None
        return snapshot[self._index % len(snapshot)]

    @property
    def auto_advance(self) -> bool:
        return len(self._promotions) > 1

    show_navigation = auto_advance

    # ---------- transitions ----------

    def replace(self, promotions: Iterable[Any]) -> None:
        snapshot = tuple(promotions)
        with self._lock:
            self._promotions = snapshot
            self._index = self._index % len(snapshot) if snapshot else 0
        logger.info("rotation snapshot replaced: %d promotions", len(snapshot))
        if not snapshot:
            self._halt()
        elif self._wanted:
            # the timer follows the set: resume once there is something to rotate
            self.start()

    def goto(self, index: int) -> int | None:
        with self._lock:
            if not self._promotions:
                return None
            self._index = index % len(self._promotions)
            return self._index

    def next(self) -> int | None:
        with self._lock:
            if not self._promotions:
                return None
            self._index = (self._index + 1) % len(self._promotions)
            return self._index

    def prev(self) -> int | None:
        with self._lock:
            if not self._promotions:
                return None
            self._index = (self._index - 1) % len(self._promotions)
            return self._index

    def tick(self) -> int | None:
        if not self.auto_advance:
            return self.index
        return self.next()

    # ---------- countdown ----------

    def countdown(self, tz: str | ZoneInfo, promotion: Any = None) -> TimeLeft | None:
        promotion = promotion if promotion is not None else self.current
        if promotion is None or promotion.end_date is None or self.clock is None:
            return None
        return time_left(promotion_end_instant(promotion.end_date, tz), self.clock.now())

    # ---------- timer ----------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        self._wanted = True
        if self.running or not self.auto_advance:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="promotion-rotation", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._wanted = False
        self._halt()

    def _halt(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.period + 1)

    def _run(self) -> None:
        while not self._stop.wait(self.period):
            if not self._promotions:
                break
            self.tick()
