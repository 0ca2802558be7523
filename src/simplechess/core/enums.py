"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import Enum, IntEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def is_white(self) -> bool:
        return self == Color.WHITE

    @classmethod
    def from_bool(cls, is_white: bool) -> Color:
        return cls.WHITE if is_white else cls.BLACK

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types; values double as the wire codes of ``PROMOTE``."""

    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5


class SquareShade(IntEnum):
    """Color of a board square (not of a piece)."""

    LIGHT = 0
    DARK = 1


_RESULT_TOKENS = {
    0: "",
    1: "1-0",
    2: "0-1",
    3: "1/2-1/2",
}
_RESULT_SCORES = {0: 0, 1: 1, 2: -1, 3: 0}


class GameResult(IntEnum):
    """Outcome of a game."""

    UNDETERMINED = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3

    @property
    def token(self) -> str:
        """Movetext terminator, e.g. ``1-0``; empty while undetermined."""
        return _RESULT_TOKENS[self.value]

    @property
    def score(self) -> int:
        """Protocol score: 1 white won, -1 black won, 0 otherwise."""
        return _RESULT_SCORES[self.value]

    @classmethod
    def from_score(cls, score: int) -> GameResult:
        if score == 1:
            return cls.WHITE_WINS
        if score == -1:
            return cls.BLACK_WINS
        if score == 0:
            return cls.DRAW
        raise ValueError(f"Unknown result score: {score!r}")

    @classmethod
    def win_for(cls, color: Color) -> GameResult:
        return cls.WHITE_WINS if color == Color.WHITE else cls.BLACK_WINS


class EndReason(str, Enum):
    """Why a game ended; values are the protocol spellings."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient_material"
    FIFTY_MOVE_DRAW = "50_move_draw"
    THREEFOLD_REPETITION = "3-fold_repetition"
    RESIGNATION = "resignation"
    TIMED_OUT = "timed_out"
    TIME = "time"

    def __str__(self) -> str:
        return self.value
