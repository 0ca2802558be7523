"""Tests for Clock."""

import time

import pytest

from simplechess.core.enums import Color
from simplechess.game.clock import Clock, format_seconds
from simplechess.game.interfaces import TimeControl


class TestClockBasics:
    def test_initial_remaining(self) -> None:
        clock = Clock(TimeControl(300, 0))
        assert clock.remaining(Color.WHITE) == 300.0
        assert clock.remaining(Color.BLACK) == 300.0

    def test_not_running_initially(self) -> None:
        clock = Clock(TimeControl(300, 0))
        assert not clock.is_running
        assert clock.active_color is None

    def test_start_sets_running(self) -> None:
        clock = Clock(TimeControl(300, 0))
        clock.start(Color.WHITE)
        assert clock.is_running
        assert clock.active_color == Color.WHITE

    def test_stop_pauses(self) -> None:
        clock = Clock(TimeControl(300, 0))
        clock.start(Color.WHITE)
        clock.stop()
        assert not clock.is_running
        frozen = clock.remaining(Color.WHITE)
        time.sleep(0.02)
        assert clock.remaining(Color.WHITE) == frozen

    def test_time_decreases(self) -> None:
        clock = Clock(TimeControl(300, 0))
        clock.start(Color.WHITE)
        time.sleep(0.05)
        assert clock.remaining(Color.WHITE) < 300.0
        assert clock.remaining(Color.BLACK) == 300.0  # opponent not ticking

    def test_reset(self) -> None:
        clock = Clock(TimeControl(300, 0))
        clock.start(Color.WHITE)
        time.sleep(0.02)
        clock.reset()
        assert not clock.is_running
        assert clock.remaining(Color.WHITE) == 300.0


class TestClockHit:
    def test_hit_switches_sides(self) -> None:
        clock = Clock(TimeControl(300, 0))
        clock.start(Color.WHITE)
        time.sleep(0.02)
        clock.hit()
        assert clock.active_color == Color.BLACK
        white_left = clock.remaining(Color.WHITE)
        assert white_left < 300.0
        time.sleep(0.02)
        assert clock.remaining(Color.BLACK) < 300.0
        assert clock.remaining(Color.WHITE) == white_left

    def test_hit_adds_increment_to_mover(self) -> None:
        clock = Clock(TimeControl(10, 2))
        clock.start(Color.WHITE)
        clock.hit()
        assert clock.remaining(Color.WHITE) > 11.5
        assert clock.active_color == Color.BLACK

    def test_hit_before_start_is_ignored(self) -> None:
        clock = Clock(TimeControl(10, 2))
        clock.hit()
        assert clock.remaining(Color.WHITE) == 10.0
        assert clock.active_color is None


class TestClockFlagFall:
    def test_flag_not_fallen_initially(self) -> None:
        clock = Clock(TimeControl(300, 0))
        assert not clock.is_flag_fallen(Color.WHITE)

    def test_flag_falls_at_zero(self) -> None:
        clock = Clock(TimeControl(0.01, 0))
        clock.start(Color.WHITE)
        time.sleep(0.03)
        assert clock.is_flag_fallen(Color.WHITE)
        assert not clock.is_flag_fallen(Color.BLACK)

    def test_set_remaining(self) -> None:
        clock = Clock(TimeControl(300, 0))
        clock.start(Color.BLACK)
        clock.set_remaining(Color.BLACK, 0)
        assert clock.is_flag_fallen(Color.BLACK)


class TestTimeControl:
    def test_default_is_one_minute(self) -> None:
        assert TimeControl.default() == TimeControl(60, 0)

    def test_repr(self) -> None:
        assert repr(TimeControl.blitz_3m2s()) == "TimeControl(3m+2s)"
        assert repr(TimeControl.rapid_10m()) == "TimeControl(10m)"

    @pytest.mark.parametrize("args", [(0, 0), (-5, 0), (60, -1)])
    def test_rejects_bad_values(self, args: tuple[float, float]) -> None:
        with pytest.raises(ValueError):
            TimeControl(*args)

    def test_unlimited(self) -> None:
        clock = Clock(TimeControl.unlimited())
        clock.start(Color.WHITE)
        assert clock.is_unlimited
        assert not clock.is_flag_fallen(Color.WHITE)
        assert clock.format_remaining(Color.WHITE) == "∞"


class TestFormatting:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0:00.00"),
            (-3, "0:00.00"),
            (12.34, "0:12.3"),
            (20, "0:20.0"),
            (75, "1:15"),
            (600, "10:00"),
            (3600, "1:00"),
            (5430, "1:30"),
        ],
    )
    def test_format_seconds(self, seconds: float, expected: str) -> None:
        assert format_seconds(seconds) == expected

    def test_str_shows_both_sides(self) -> None:
        clock = Clock(TimeControl(75, 0))
        assert str(clock) == "1:15|1:15"
