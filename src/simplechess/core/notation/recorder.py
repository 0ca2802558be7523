"""Append-only move list plus the game outcome."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simplechess.core.enums import GameResult, PieceType
from simplechess.core.errors import InvalidStateError
from simplechess.core.notation.san import is_capture, move_token
from simplechess.core.rules import Rules

if TYPE_CHECKING:
    from simplechess.core.board import Board
    from simplechess.core.types import Square

FIFTY_MOVE_PLIES = 100  # 100 half-moves = 50 full moves


class MoveRecorder:
    """Records the notation of every move made in a game.

    Also counts plies since the last pawn move or capture for the
    fifty-move rule.
    """

    __slots__ = ("_moves", "_outcome", "_quiet_plies")

    def __init__(self, halfmove_clock: int = 0) -> None:
        self._moves: list[str] = []
        self._outcome = GameResult.UNDETERMINED
        self._quiet_plies = halfmove_clock

    # ── Recording ────────────────────────────────────────────────────────

    def record(
        self,
        before: Board,
        after: Board,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> str:
        """Note a move that turned *before* into *after*; return its token."""
        piece = before[from_sq]
        if piece is None:
            raise InvalidStateError(f"No piece on {from_sq.name}")

        token = move_token(before, after, from_sq, to_sq, promotion)
        self._moves.append(token)

        if piece.piece_type == PieceType.PAWN or is_capture(before, from_sq, to_sq):
            self._quiet_plies = 0
        else:
            self._quiet_plies += 1

        if Rules.is_checkmated(after, piece.color.opposite):
            self.set_outcome(GameResult.win_for(piece.color))
        return token

    def set_outcome(self, outcome: GameResult) -> None:
        """Set the terminal outcome; it can only be set once."""
        if outcome == GameResult.UNDETERMINED:
            raise InvalidStateError("Cannot reset a game outcome")
        if self._outcome not in (GameResult.UNDETERMINED, outcome):
            raise InvalidStateError(
                f"Outcome already set to {self._outcome.name}, not {outcome.name}"
            )
        self._outcome = outcome

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def moves(self) -> tuple[str, ...]:
        return tuple(self._moves)

    @property
    def last_move(self) -> str | None:
        return self._moves[-1] if self._moves else None

    @property
    def outcome(self) -> GameResult:
        return self._outcome

    @property
    def halfmove_clock(self) -> int:
        """Plies since the last pawn move or capture."""
        return self._quiet_plies

    @property
    def full_moves(self) -> int:
        return len(self._moves) // 2

    def is_fifty_move_draw(self) -> bool:
        return self._quiet_plies >= FIFTY_MOVE_PLIES

    def movetext(self) -> str:
        """The game as ``1. e4 e5 2. Nf3 ... 1-0``."""
        parts: list[str] = []
        for i, token in enumerate(self._moves):
            if i % 2 == 0:
                parts.append(f"{i // 2 + 1}.")
            parts.append(token)
        if self._outcome != GameResult.UNDETERMINED:
            parts.append(self._outcome.token)
        return " ".join(parts)

    def copy(self) -> MoveRecorder:
        rec = MoveRecorder()
        rec._moves = self._moves.copy()
        rec._outcome = self._outcome
        rec._quiet_plies = self._quiet_plies
        return rec

    def __len__(self) -> int:
        return len(self._moves)

    def __str__(self) -> str:
        return self.movetext()
