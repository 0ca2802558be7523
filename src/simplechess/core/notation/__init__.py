"""Notation package: board digest, move tokens and the move recorder."""

from simplechess.core.notation.digest import STARTING_DIGEST, board_digest, parse_digest
from simplechess.core.notation.recorder import FIFTY_MOVE_PLIES, MoveRecorder
from simplechess.core.notation.san import is_capture, is_castling, move_token

__all__ = [
    "FIFTY_MOVE_PLIES",
    "STARTING_DIGEST",
    "MoveRecorder",
    "board_digest",
    "is_capture",
    "is_castling",
    "move_token",
    "parse_digest",
]
