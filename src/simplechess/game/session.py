"""One player's view of a game, driven by protocol commands.

Translates ``MOVE`` / ``PROMOTE`` lines into engine calls, polls the rules
after every move and reports the end of the game. Emits events via simple
callbacks so the transport / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from simplechess.core.board import Board
from simplechess.core.enums import Color, EndReason, GameResult, PieceType
from simplechess.core.errors import IllegalArgumentError, IllegalMoveError
from simplechess.core.rules import Rules
from simplechess.core.types import Square
from simplechess.game.clock import Clock
from simplechess.game.interfaces import GamePhase, IClock, SessionSettings
from simplechess.game.protocol import (
    Command,
    EndGameCommand,
    MoveCommand,
    PingCommand,
    ProtocolError,
    StartGameCommand,
    parse_command,
)

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[str, "GameSession"], None]  # token, session
GameOverCallback = Callable[[GameResult, EndReason], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """Owns the board (and optional clock) of one game.

    Thread-safety: not thread-safe. Every call must come from the single
    thread that owns the session (see :class:`SessionWorker`).
    """

    __slots__ = (
        "_settings",
        "_board",
        "_clock",
        "_phase",
        "_result",
        "_end_reason",
        "events",
    )

    def __init__(
        self,
        settings: SessionSettings | None = None,
        clock: IClock | None = None,
    ) -> None:
        settings = settings if settings is not None else SessionSettings()
        if clock is None and settings.time_control is not None:
            clock = Clock(settings.time_control)
        self._settings = settings
        self._clock = clock
        self._board = Board.initial()
        self._phase = GamePhase.NOT_STARTED
        self._result = GameResult.UNDETERMINED
        self._end_reason: EndReason | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def board(self) -> Board:
        return self._board

    @property
    def clock(self) -> IClock | None:
        return self._clock

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def end_reason(self) -> EndReason | None:
        return self._end_reason

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    @property
    def side_to_move(self) -> Color:
        return self._board.side_to_move

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin a fresh game with White to move."""
        self.reset()
        self._phase = GamePhase.AWAITING_MOVE
        if self._clock is not None:
            self._clock.start(Color.WHITE)
        _LOGGER.info("Game started")

    def reset(self) -> None:
        """Discard the current game: fresh board, recorder and histogram."""
        self._board = Board.initial()
        self._phase = GamePhase.NOT_STARTED
        self._result = GameResult.UNDETERMINED
        self._end_reason = None
        if self._clock is not None:
            self._clock.reset()

    # ── Moves ────────────────────────────────────────────────────────────

    def submit_move(self, from_sq: Square, to_sq: Square) -> EndGameCommand | None:
        """Play a move; raises :class:`IllegalMoveError` without side effects."""
        self._require_in_progress()
        if self._flag_fell():
            return self._timeout_command()
        token = self._board.make_move(from_sq, to_sq)
        return self._after_move(token)

    def submit_promotion(
        self,
        from_sq: Square,
        to_sq: Square,
        piece_type: PieceType | int,
    ) -> EndGameCommand | None:
        """Play a promotion; raises on an illegal move or promotion choice."""
        self._require_in_progress()
        if self._flag_fell():
            return self._timeout_command()
        token = self._board.promote(from_sq, to_sq, piece_type)
        return self._after_move(token)

    def handle_command(self, command: Command) -> list[Command]:
        """Apply an inbound command; return the commands to broadcast.

        Rejected moves return an empty list and leave the board untouched.
        """
        if isinstance(command, PingCommand):
            return [command]
        if isinstance(command, StartGameCommand):
            self.start()
            return []
        if isinstance(command, EndGameCommand):
            if not self.is_game_over:
                self._finish(command.result, command.reason)
            return []

        try:
            if isinstance(command, MoveCommand):
                end = self.submit_move(command.from_sq, command.to_sq)
            else:
                end = self.submit_promotion(
                    command.from_sq, command.to_sq, command.piece_type
                )
        except (IllegalMoveError, IllegalArgumentError) as exc:
            _LOGGER.warning("Rejected %s: %s", command.to_line(), exc)
            return []

        if end is not None and self._end_reason == EndReason.TIME:
            return [end]
        out: list[Command] = [command]
        if end is not None:
            out.append(end)
        return out

    def handle_line(self, line: str) -> list[str]:
        """Parse and apply one protocol line; return the lines to broadcast."""
        _LOGGER.debug("<< %s", line)
        try:
            command = parse_command(line)
        except ProtocolError as exc:
            _LOGGER.warning("Ignoring malformed line: %s", exc)
            return []
        return [c.to_line() for c in self.handle_command(command)]

    # ── Game end ─────────────────────────────────────────────────────────

    def resign(self, color: Color) -> EndGameCommand:
        self._require_in_progress()
        return self._finish(GameResult.win_for(color.opposite), EndReason.RESIGNATION)

    def time_out(self, color: Color) -> EndGameCommand:
        """*color* ran out of time."""
        self._require_in_progress()
        return self._finish(GameResult.win_for(color.opposite), EndReason.TIME)

    def movetext(self) -> str:
        return self._board.recorder.movetext()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _require_in_progress(self) -> None:
        if self.is_game_over:
            raise IllegalMoveError("The game is over")
        if self._phase == GamePhase.NOT_STARTED:
            self._phase = GamePhase.AWAITING_MOVE

    def _flag_fell(self) -> bool:
        clock = self._clock
        return (
            clock is not None
            and clock.is_running
            and clock.is_flag_fallen(self._board.side_to_move)
        )

    def _timeout_command(self) -> EndGameCommand:
        return self.time_out(self._board.side_to_move)

    def _after_move(self, token: str) -> EndGameCommand | None:
        if self._clock is not None and self._clock.is_running:
            self._clock.hit()

        for cb in self.events.on_move:
            cb(token, self)

        result, reason = Rules.game_outcome(self._board)
        if reason is None:
            return None
        return self._finish(result, reason)

    def _finish(self, result: GameResult, reason: EndReason) -> EndGameCommand:
        if self._clock is not None:
            self._clock.stop()
        self._phase = GamePhase.GAME_OVER
        self._result = result
        self._end_reason = reason
        if self._board.recorder.outcome == GameResult.UNDETERMINED:
            self._board.recorder.set_outcome(result)
        _LOGGER.info("Game over: %s (%s)", result.token, reason)
        for cb in self.events.on_game_over:
            cb(result, reason)
        return EndGameCommand(result, reason)
