"""Core rules engine: pure chess logic with zero external dependencies.

Quick start::

    from simplechess.core import Board, Rules, parse_square

    board = Board.initial()
    board.make_move(parse_square("e2"), parse_square("e4"))
    print(board.legal_moves[parse_square("e7")])
    print(Rules.game_outcome(board))
"""

from simplechess.core.board import Board, BoardSnapshot
from simplechess.core.enums import Color, EndReason, GameResult, PieceType, SquareShade
from simplechess.core.errors import (
    ChessError,
    IllegalArgumentError,
    IllegalMoveError,
    InvalidStateError,
    OutOfBoundsError,
)
from simplechess.core.move_generator import MoveGenerator, pseudo_legal_moves
from simplechess.core.notation import (
    STARTING_DIGEST,
    MoveRecorder,
    board_digest,
    move_token,
    parse_digest,
)
from simplechess.core.piece import Piece, promotion_piece_type
from simplechess.core.rules import Rules
from simplechess.core.types import (
    ALL_SQUARES,
    Square,
    is_valid_square,
    parse_square,
    rotate_square,
    square_color,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "EndReason",
    "GameResult",
    "PieceType",
    "SquareShade",
    # Errors
    "ChessError",
    "IllegalArgumentError",
    "IllegalMoveError",
    "InvalidStateError",
    "OutOfBoundsError",
    # Types / helpers
    "ALL_SQUARES",
    "Square",
    "is_valid_square",
    "parse_square",
    "rotate_square",
    "square_color",
    "square_name",
    # Domain objects
    "Board",
    "BoardSnapshot",
    "MoveGenerator",
    "Piece",
    "Rules",
    "promotion_piece_type",
    "pseudo_legal_moves",
    # Notation
    "STARTING_DIGEST",
    "MoveRecorder",
    "board_digest",
    "move_token",
    "parse_digest",
]
