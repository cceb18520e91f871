import time
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace as NS
from zoneinfo import ZoneInfo

from menuboard.services.clock import FixedClock
from menuboard.services.rotation import (
    RotationController,
    RotationState,
    TimeLeft,
    promotion_end_instant,
    time_left,
)

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def test_next_and_prev_wrap_around():
    rot = RotationController(["a", "b", "c"])
    assert rot.goto(2) == 2
    assert rot.next() == 0
    assert rot.prev() == 2
    assert rot.current == "c"


def test_empty_controller_is_idle():
    rot = RotationController([])
    assert rot.state is RotationState.IDLE
    assert rot.current is None
    assert rot.next() is None and rot.prev() is None and rot.tick() is None
    assert not rot.auto_advance


def test_single_promotion_does_not_auto_advance():
    rot = RotationController(["only"])
    assert rot.state is RotationState.SHOWING
    assert not rot.auto_advance and not rot.show_navigation
    assert rot.tick() == 0
    rot.start()
    assert not rot.running


def test_tick_advances_with_several_promotions():
    rot = RotationController(["a", "b"])
    assert rot.tick() == 1
    assert rot.tick() == 0


def test_replace_clamps_index_and_goes_idle_when_empty():
    rot = RotationController(["a", "b", "c"])
    rot.goto(2)
    rot.replace(["x", "y"])
    assert rot.index == 0
    assert rot.current == "x"
    rot.replace([])
    assert rot.state is RotationState.IDLE
    assert rot.index is None


def test_timer_rotates_and_stops():
    rot = RotationController(["a", "b", "c"], period=0.01)
    rot.start()
    deadline = time.monotonic() + 2
    seen = {rot.index}
    while len(seen) < 2 and time.monotonic() < deadline:
        time.sleep(0.005)
        seen.add(rot.index)
    assert len(seen) > 1
    rot.stop()
    assert not rot.running
    rot.stop()  # idempotent


def test_emptying_the_set_stops_the_timer():
    rot = RotationController(["a", "b"], period=0.01)
    rot.start()
    rot.replace([])
    assert not rot.running


def test_timer_resumes_when_set_grows_from_one():
    rot = RotationController(["only"], period=0.01)
    rot.start()
    assert not rot.running
    rot.replace(["a", "b", "c"])
    assert rot.running
    rot.stop()


def test_timer_resumes_after_set_was_emptied():
    rot = RotationController(["a", "b"], period=0.01)
    rot.start()
    rot.replace([])
    assert not rot.running
    rot.replace(["x", "y", "z"])
    assert rot.running
    deadline = time.monotonic() + 2
    seen = {rot.index}
    while len(seen) < 2 and time.monotonic() < deadline:
        time.sleep(0.005)
        seen.add(rot.index)
    assert len(seen) > 1
    rot.stop()


def test_stopped_timer_stays_off_on_replace():
    rot = RotationController(["a", "b"], period=0.01)
    rot.start()
    rot.stop()
    rot.replace(["x", "y", "z"])
    assert not rot.running


def test_time_left_breakdown():
    end = NOW + timedelta(days=2, hours=3, minutes=4, seconds=5)
    left = time_left(end, NOW)
    assert left == TimeLeft(2, 3, 4, 5)
    assert left.display() == "2d 03:04:05"
    assert left.total_seconds == 2 * 86400 + 3 * 3600 + 4 * 60 + 5


def test_time_left_without_days():
    left = time_left(NOW + timedelta(seconds=59), NOW)
    assert left == TimeLeft(0, 0, 0, 59)
    assert left.display() == "00:00:59"


def test_countdown_expires_exactly_at_end():
    assert time_left(NOW, NOW) is None
    assert time_left(NOW - timedelta(seconds=1), NOW) is None
    assert time_left(NOW + timedelta(seconds=1), NOW) == TimeLeft(0, 0, 0, 1)
    assert time_left(NOW + timedelta(milliseconds=500), NOW) is None


def test_end_instant_is_midnight_after_inclusive_end_date():
    end = promotion_end_instant(date(2024, 1, 31), "America/Sao_Paulo")
    assert end == datetime(2024, 2, 1, 0, 0, tzinfo=ZoneInfo("America/Sao_Paulo"))


def test_controller_countdown_uses_injected_clock():
    clock = FixedClock(datetime(2024, 1, 15, 23, 59, 50, tzinfo=timezone.utc))
    rot = RotationController([NS(end_date=date(2024, 1, 15)), NS(end_date=None)], clock=clock)
    assert rot.countdown("UTC") == TimeLeft(0, 0, 0, 10)
    clock.advance(seconds=10)
    assert rot.countdown("UTC") is None
    rot.next()
    assert rot.countdown("UTC") is None
