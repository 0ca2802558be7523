"""Abstract interfaces and configuration for the game layer.

The session depends on :class:`IClock`, not on the concrete
:class:`~simplechess.game.clock.Clock`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum, auto

from simplechess.core.enums import Color

# ── Session phase ────────────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Lifecycle states of a game session."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Immutable time-control definition.

    Args:
        initial_seconds: Starting time per player.
        increment_seconds: Per-move increment (Fischer).
    """

    __slots__ = ("initial_seconds", "increment_seconds")

    def __init__(self, initial_seconds: float, increment_seconds: float = 0.0) -> None:
        if initial_seconds <= 0:
            raise ValueError(f"Initial time must be positive: {initial_seconds!r}")
        if increment_seconds < 0:
            raise ValueError(f"Increment must not be negative: {increment_seconds!r}")
        self.initial_seconds = initial_seconds
        self.increment_seconds = increment_seconds

    @classmethod
    def default(cls) -> TimeControl:
        """One minute, no increment."""
        return cls(60, 0)

    @classmethod
    def blitz_3m2s(cls) -> TimeControl:
        return cls(180, 2)

    @classmethod
    def blitz_5m(cls) -> TimeControl:
        return cls(300, 0)

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        return cls(600, 0)

    @classmethod
    def unlimited(cls) -> TimeControl:
        """No time limit."""
        return cls(float("inf"), 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (
            self.initial_seconds == other.initial_seconds
            and self.increment_seconds == other.increment_seconds
        )

    def __repr__(self) -> str:
        mins = self.initial_seconds / 60
        if self.increment_seconds:
            return f"TimeControl({mins:.0f}m+{self.increment_seconds:.0f}s)"
        return f"TimeControl({mins:.0f}m)"


# ── Settings ─────────────────────────────────────────────────────────────────


@dataclass
class SessionSettings:
    """Per-game configuration of a session."""

    time_control: TimeControl | None = field(default_factory=TimeControl.default)
    tick_interval_ms: int = 100  # clock polling cadence


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a chess clock."""

    @abstractmethod
    def start(self, color: Color = Color.WHITE) -> None:
        """Start the clock for *color*."""

    @abstractmethod
    def stop(self) -> None:
        """Pause the running clock."""

    @abstractmethod
    def hit(self) -> None:
        """Credit the mover's increment and start the other side's clock."""

    @abstractmethod
    def reset(self) -> None:
        """Stop and restore both sides to the initial time."""

    @abstractmethod
    def remaining(self, color: Color) -> float:
        """Seconds remaining for *color*."""

    @abstractmethod
    def is_flag_fallen(self, color: Color) -> bool:
        """Has *color* run out of time?"""

    @property
    @abstractmethod
    def active_color(self) -> Color | None:
        """Side whose time is running, if any."""

    @property
    @abstractmethod
    def is_running(self) -> bool: ...
