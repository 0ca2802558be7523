"""Chess clock with Fischer increment support."""

from __future__ import annotations

import time

from simplechess.core.enums import Color
from simplechess.game.interfaces import IClock, TimeControl


def format_seconds(seconds: float) -> str:
    """Clock display: tenths under 20s, ``m:ss`` under an hour, else ``h:mm``."""
    if seconds <= 0:
        return "0:00.00"
    if seconds <= 20:
        return f"0:{seconds:.1f}"
    if seconds < 3600:
        return f"{int(seconds // 60)}:{int(seconds % 60):02d}"
    if seconds == float("inf"):
        return "∞"
    return f"{int(seconds // 3600)}:{int(seconds // 60 % 60):02d}"


class Clock(IClock):
    """Dual chess clock tracking remaining time for both players.

    Uses monotonic time for accuracy. Supports Fischer increment.
    """

    __slots__ = (
        "_time_control",
        "_remaining",
        "_active_color",
        "_last_tick",
        "_running",
    )

    def __init__(self, time_control: TimeControl) -> None:
        self._time_control = time_control
        self._remaining: dict[Color, float] = {}
        self._active_color: Color | None = None
        self._last_tick: float = 0.0
        self._running: bool = False
        self.reset()

    # ── IClock implementation ────────────────────────────────────────────

    def start(self, color: Color = Color.WHITE) -> None:
        self._active_color = color
        self._last_tick = time.monotonic()
        self._running = True

    def stop(self) -> None:
        if self._running:
            self._consume_elapsed()
            self._running = False

    def hit(self) -> None:
        """End the mover's turn: add its increment and switch sides."""
        if self._active_color is None:
            return
        if self._running:
            self._consume_elapsed()
        self._remaining[self._active_color] += self._time_control.increment_seconds
        self._active_color = self._active_color.opposite
        self._last_tick = time.monotonic()

    def reset(self) -> None:
        self._remaining = {
            Color.WHITE: self._time_control.initial_seconds,
            Color.BLACK: self._time_control.initial_seconds,
        }
        self._active_color = None
        self._running = False

    def remaining(self, color: Color) -> float:
        if self._running and self._active_color == color:
            elapsed = time.monotonic() - self._last_tick
            return max(0.0, self._remaining[color] - elapsed)
        return max(0.0, self._remaining[color])

    def is_flag_fallen(self, color: Color) -> bool:
        return self.remaining(color) <= 0.0

    @property
    def active_color(self) -> Color | None:
        return self._active_color

    @property
    def is_running(self) -> bool:
        return self._running

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def is_unlimited(self) -> bool:
        return self._time_control.initial_seconds == float("inf")

    def set_remaining(self, color: Color, seconds: float) -> None:
        """Manually override remaining time (for testing / peer sync)."""
        if self._running and self._active_color == color:
            self._last_tick = time.monotonic()
        self._remaining[color] = seconds

    def format_remaining(self, color: Color) -> str:
        return format_seconds(self.remaining(color))

    def __str__(self) -> str:
        return (
            f"{self.format_remaining(Color.WHITE)}|{self.format_remaining(Color.BLACK)}"
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _consume_elapsed(self) -> None:
        if self._active_color is None:
            return
        now = time.monotonic()
        elapsed = now - self._last_tick
        self._remaining[self._active_color] = max(
            0.0, self._remaining[self._active_color] - elapsed
        )
        self._last_tick = now
