"""Board - piece placement, side to move and move application."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass

from simplechess.core.enums import Color, PieceType
from simplechess.core.errors import (
    IllegalArgumentError,
    IllegalMoveError,
    InvalidStateError,
)
from simplechess.core.move_generator import (
    MoveGenerator,
    back_row,
    promotion_row,
)
from simplechess.core.notation.digest import board_digest, parse_digest
from simplechess.core.notation.recorder import MoveRecorder
from simplechess.core.piece import Piece, promotion_piece_type
from simplechess.core.types import ALL_SQUARES, Square

_LOGGER = logging.getLogger(__name__)

_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)
_ROOK_CORNERS = frozenset(
    Square(col, row) for col in (0, 7) for row in (0, 7)
)


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Value copy of the state a simulated move can touch."""

    squares: tuple[Piece | None, ...]
    king_squares: tuple[Square | None, Square | None]
    en_passant: Square | None


class Board:
    """Mutable 8x8 board with the rules state of one game.

    ``legal_moves`` always belongs to ``side_to_move`` and is rebuilt after
    every applied move.
    """

    __slots__ = (
        "_squares",
        "_king_squares",
        "_kings_moved",
        "_kings_checked",
        "_unmoved_rooks",
        "side_to_move",
        "en_passant",
        "legal_moves",
        "position_counts",
        "recorder",
    )

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]
        self._kings_moved: list[bool] = [False, False]
        # Transient flag, set while a side is in check; gates castling only.
        self._kings_checked: list[bool] = [False, False]
        self._unmoved_rooks: set[Square] = set(_ROOK_CORNERS)
        self.side_to_move = Color.WHITE
        self.en_passant: Square | None = None
        self.legal_moves: dict[Square, list[Square]] = {}
        self.position_counts: Counter[str] = Counter()
        self.recorder = MoveRecorder()

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq.index]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq.index]
        if old_piece is not None and old_piece.piece_type == PieceType.KING:
            color_idx = int(old_piece.color)
            if self._king_squares[color_idx] == sq:
                self._king_squares[color_idx] = None

        self._squares[sq.index] = piece
        if piece is not None and piece.piece_type == PieceType.KING:
            self._king_squares[int(piece.color)] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq.index] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType | None = None) -> list[Square]:
        """Squares occupied by *color* (optionally only by *piece_type*)."""
        squares: list[Square] = []
        for sq in ALL_SQUARES:
            piece = self._squares[sq.index]
            if piece is None or piece.color != color:
                continue
            if piece_type is None or piece.piece_type == piece_type:
                squares.append(sq)
        return squares

    def find_all(self, piece_type: PieceType, color: Color) -> list[Square]:
        return self.pieces(color, piece_type)

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise InvalidStateError(f"No {color.name} king on board")
        return sq

    def king_has_moved(self, color: Color) -> bool:
        return self._kings_moved[int(color)]

    def king_flagged_in_check(self, color: Color) -> bool:
        return self._kings_checked[int(color)]

    def rook_is_unmoved(self, sq: Square) -> bool:
        return sq in self._unmoved_rooks

    def digest(self) -> str:
        """Placement-only repetition key."""
        return board_digest(self)

    @property
    def halfmove_clock(self) -> int:
        return self.recorder.halfmove_clock

    @property
    def history(self) -> tuple[str, ...]:
        return self.recorder.moves

    # -- Legal moves --------------------------------------------------------

    def recompute_legal_moves(self) -> None:
        """Rebuild the legal-move map for the side to move."""
        self.legal_moves = MoveGenerator(self).all_legal_moves()

    def is_legal(self, from_sq: Square, to_sq: Square) -> bool:
        return to_sq in self.legal_moves.get(from_sq, ())

    def needs_promotion(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether moving *from_sq* → *to_sq* is a pawn reaching its last rank."""
        piece = self[from_sq]
        return (
            piece is not None
            and piece.piece_type == PieceType.PAWN
            and to_sq.row == promotion_row(piece.color)
        )

    # -- Mutation -----------------------------------------------------------

    def apply_move(self, from_sq: Square, to_sq: Square) -> None:
        """Relocate a piece, resolving castling and en passant; no legality check."""
        piece = self[from_sq]
        if piece is None:
            raise InvalidStateError(f"No piece on {from_sq.name}")

        if (
            piece.piece_type == PieceType.KING
            and from_sq.row == to_sq.row
            and abs(to_sq.col - from_sq.col) == 2
        ):
            # Slide the rook for castling
            row = from_sq.row
            if to_sq.col > from_sq.col:
                rook_from, rook_to = Square(7, row), Square(to_sq.col - 1, row)
            else:
                rook_from, rook_to = Square(0, row), Square(to_sq.col + 1, row)
            self[rook_to] = self[rook_from]
            self[rook_from] = None
        elif piece.piece_type == PieceType.PAWN and to_sq == self.en_passant:
            # The captured pawn sits beside the mover, not on the target
            self[Square(to_sq.col, from_sq.row)] = None

        self[to_sq] = piece
        self[from_sq] = None

    def make_move(self, from_sq: Square, to_sq: Square) -> str:
        """Play a legal non-promoting move; return its notation."""
        self._require_legal(from_sq, to_sq)
        if self.needs_promotion(from_sq, to_sq):
            raise IllegalMoveError(
                f"{from_sq.name}-{to_sq.name} reaches the last rank; use promote()"
            )

        before = self.copy()
        piece = self[from_sq]
        assert piece is not None
        self.apply_move(from_sq, to_sq)
        return self._finish_move(before, piece, from_sq, to_sq, None)

    def promote(
        self,
        from_sq: Square,
        to_sq: Square,
        piece_kind: PieceType | int,
    ) -> str:
        """Play a pawn move to the last rank, placing *piece_kind*."""
        promoted = promotion_piece_type(piece_kind)
        if not self.needs_promotion(from_sq, to_sq):
            raise IllegalArgumentError(
                f"No pawn on {from_sq.name} promoting on {to_sq.name}"
            )
        self._require_legal(from_sq, to_sq)

        before = self.copy()
        piece = self[from_sq]
        assert piece is not None
        self.apply_move(from_sq, to_sq)
        self[to_sq] = Piece(piece.color, promoted)
        _LOGGER.debug("Promoted %s on %s to %s", piece.color, to_sq, promoted.name)
        return self._finish_move(before, piece, from_sq, to_sq, promoted)

    def _require_legal(self, from_sq: Square, to_sq: Square) -> None:
        if not self.is_legal(from_sq, to_sq):
            raise IllegalMoveError(
                f"Illegal move for {self.side_to_move}: {from_sq.name}-{to_sq.name}"
            )

    def _finish_move(
        self,
        before: Board,
        piece: Piece,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None,
    ) -> str:
        color = piece.color
        if piece.piece_type == PieceType.KING:
            self._kings_moved[int(color)] = True
        self._unmoved_rooks.discard(from_sq)
        self._unmoved_rooks.discard(to_sq)

        self.en_passant = None
        if piece.piece_type == PieceType.PAWN and abs(to_sq.row - from_sq.row) == 2:
            self.en_passant = Square(from_sq.col, (from_sq.row + to_sq.row) // 2)

        self._kings_checked[int(color)] = False
        self.side_to_move = color.opposite
        opponent_in_check = MoveGenerator(self).is_in_check(self.side_to_move)
        self._kings_checked[int(self.side_to_move)] = opponent_in_check

        self.recompute_legal_moves()
        self.position_counts[self.digest()] += 1
        token = self.recorder.record(before, self, from_sq, to_sq, promotion)

        _LOGGER.debug("%s played %s", color, token)
        if opponent_in_check:
            _LOGGER.debug("%s is in check", self.side_to_move)
        return token

    # -- Snapshots / copying ------------------------------------------------

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            squares=tuple(self._squares),
            king_squares=(self._king_squares[0], self._king_squares[1]),
            en_passant=self.en_passant,
        )

    def restore(self, snapshot: BoardSnapshot) -> None:
        self._squares = list(snapshot.squares)
        self._king_squares = list(snapshot.king_squares)
        self.en_passant = snapshot.en_passant

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._king_squares = self._king_squares.copy()
        b._kings_moved = self._kings_moved.copy()
        b._kings_checked = self._kings_checked.copy()
        b._unmoved_rooks = self._unmoved_rooks.copy()
        b.side_to_move = self.side_to_move
        b.en_passant = self.en_passant
        b.legal_moves = {sq: moves.copy() for sq, moves in self.legal_moves.items()}
        b.position_counts = self.position_counts.copy()
        b.recorder = self.recorder.copy()
        return b

    # -- Factory ------------------------------------------------------------

    @classmethod
    def empty(cls) -> Board:
        """A board with no pieces; callers place pieces and recompute."""
        return cls()

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position, White to move."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b[Square(col, 0)] = Piece(Color.BLACK, pt)
            b[Square(col, 1)] = Piece(Color.BLACK, PieceType.PAWN)
            b[Square(col, 6)] = Piece(Color.WHITE, PieceType.PAWN)
            b[Square(col, 7)] = Piece(Color.WHITE, pt)
        b._start()
        return b

    @classmethod
    def from_digest(
        cls,
        digest: str,
        side_to_move: Color = Color.WHITE,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
    ) -> Board:
        """Set up a position from a placement digest.

        Kings on e1/e8 and rooks on their corners count as never moved.
        """
        b = cls()
        for sq, piece in parse_digest(digest).items():
            b[sq] = piece

        for color in Color:
            kings = b.pieces(color, PieceType.KING)
            if len(kings) != 1:
                raise InvalidStateError(
                    f"Expected one {color.name} king, found {len(kings)}"
                )
            b._kings_moved[int(color)] = kings[0] != Square(4, back_row(color))

        b._unmoved_rooks = {
            sq
            for sq in _ROOK_CORNERS
            if b[sq] == Piece(_corner_owner(sq), PieceType.ROOK)
        }
        b.side_to_move = side_to_move
        b.en_passant = en_passant
        b.recorder = MoveRecorder(halfmove_clock)
        b._kings_checked[int(side_to_move)] = MoveGenerator(b).is_in_check(side_to_move)
        b._start()
        return b

    def _start(self) -> None:
        self.recompute_legal_moves()
        self.position_counts[self.digest()] += 1

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._squares == other._squares
            and self._king_squares == other._king_squares
            and self.en_passant == other.en_passant
            and self.side_to_move == other.side_to_move
        )

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(8):
            cells = []
            for col in range(8):
                p = self[Square(col, row)]
                cells.append(str(p) if p else ".")
            rows.append(f"{8 - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)


def _corner_owner(sq: Square) -> Color:
    return Color.WHITE if sq.row == back_row(Color.WHITE) else Color.BLACK
