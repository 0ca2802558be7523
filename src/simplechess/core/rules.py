"""High-level chess rules: check, checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simplechess.core.enums import Color, EndReason, GameResult, PieceType, SquareShade
from simplechess.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from simplechess.core.board import Board

_MAJOR_OR_PAWN = (PieceType.QUEEN, PieceType.ROOK, PieceType.PAWN)


class _MinorCount:
    """Knights and bishops (split by square shade) held by one side."""

    __slots__ = ("knights", "light_bishops", "dark_bishops")

    def __init__(self) -> None:
        self.knights = 0
        self.light_bishops = 0
        self.dark_bishops = 0

    @property
    def bare(self) -> bool:
        return not (self.knights or self.light_bishops or self.dark_bishops)

    @property
    def single_shade_bishops(self) -> bool:
        """No knights, and every bishop stands on one square shade."""
        return not self.knights and not (self.light_bishops and self.dark_bishops)

    @property
    def lone_knight(self) -> bool:
        return (
            self.knights == 1 and not self.light_bishops and not self.dark_bishops
        )


class Rules:
    """Static rule-checker that operates on a :class:`Board`.

    Checkmate and stalemate read the board's cached legal-move map, which
    belongs to the side to move; ask about that side.
    """

    @staticmethod
    def in_check(board: Board, color: Color) -> bool:
        return MoveGenerator(board).is_in_check(color)

    @staticmethod
    def _no_legal_moves(board: Board) -> bool:
        return not any(board.legal_moves.values())

    @staticmethod
    def is_checkmated(board: Board, color: Color) -> bool:
        return Rules.in_check(board, color) and Rules._no_legal_moves(board)

    @staticmethod
    def is_stalemated(board: Board, color: Color) -> bool:
        return Rules._no_legal_moves(board) and not Rules.in_check(board, color)

    @staticmethod
    def has_insufficient_material(board: Board) -> bool:
        """Neither side can force mate with what is left.

        Dead configurations: bare kings; bishops only, all on one shade;
        one side bare against a lone knight or same-shade bishops.
        """
        counts = {Color.WHITE: _MinorCount(), Color.BLACK: _MinorCount()}
        for color, count in counts.items():
            for sq in board.pieces(color):
                piece = board[sq]
                assert piece is not None
                if piece.piece_type in _MAJOR_OR_PAWN:
                    return False
                if piece.piece_type == PieceType.KNIGHT:
                    count.knights += 1
                elif piece.piece_type == PieceType.BISHOP:
                    if sq.shade == SquareShade.LIGHT:
                        count.light_bishops += 1
                    else:
                        count.dark_bishops += 1

        white, black = counts[Color.WHITE], counts[Color.BLACK]
        if white.bare and black.bare:
            return True
        if (
            not white.knights
            and not black.knights
            and (
                not (white.dark_bishops or black.dark_bishops)
                or not (white.light_bishops or black.light_bishops)
            )
        ):
            return True
        for lone, other in ((black, white), (white, black)):
            if lone.bare and (other.single_shade_bishops or other.lone_knight):
                return True
        return False

    @staticmethod
    def is_threefold_repetition(board: Board) -> bool:
        return any(count >= 3 for count in board.position_counts.values())

    @staticmethod
    def is_fifty_move_draw(board: Board) -> bool:
        return board.recorder.is_fifty_move_draw()

    @staticmethod
    def is_draw(board: Board, color: Color) -> bool:
        return Rules.draw_reason(board, color) is not None

    @staticmethod
    def draw_reason(board: Board, color: Color) -> EndReason | None:
        """First drawing condition that holds, in the order they are polled."""
        if Rules.has_insufficient_material(board):
            return EndReason.INSUFFICIENT_MATERIAL
        if Rules.is_fifty_move_draw(board):
            return EndReason.FIFTY_MOVE_DRAW
        if Rules.is_stalemated(board, color):
            return EndReason.STALEMATE
        if Rules.is_threefold_repetition(board):
            return EndReason.THREEFOLD_REPETITION
        return None

    @staticmethod
    def game_outcome(board: Board) -> tuple[GameResult, EndReason | None]:
        """Result of the game as it stands for the side to move."""
        color = board.side_to_move
        if Rules.is_checkmated(board, color):
            return GameResult.win_for(color.opposite), EndReason.CHECKMATE
        reason = Rules.draw_reason(board, color)
        if reason is not None:
            return GameResult.DRAW, reason
        return GameResult.UNDETERMINED, None
