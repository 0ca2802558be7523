"""Pseudo-legal move generation, attack detection and the legality filter."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from simplechess.core.enums import Color, PieceType
from simplechess.core.errors import InvalidStateError
from simplechess.core.piece import Piece
from simplechess.core.types import Square

if TYPE_CHECKING:
    from simplechess.core.board import Board


# (d_col, d_row) offsets; row grows toward white's side of the board.
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

# Castling geometry by king direction: (rook col, squares that must be
# empty, squares that must not be attacked).
_KINGSIDE = (7, (5, 6), (4, 5, 6))
_QUEENSIDE = (0, (1, 2, 3), (4, 3, 2, 1))


def forward(color: Color) -> int:
    """Row delta of a pawn step for *color*."""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def back_row(color: Color) -> int:
    """Row of *color*'s own back rank (where its king starts)."""
    return 7 if color == Color.WHITE else 0


def promotion_row(color: Color) -> int:
    return 0 if color == Color.WHITE else 7


# -- Per-kind generators ----------------------------------------------------


def _expect(board: Board, at: Square, piece_type: PieceType) -> Piece:
    piece = board[at]
    if piece is None:
        raise InvalidStateError(f"No piece on {at.name}")
    if piece.piece_type != piece_type:
        raise InvalidStateError(
            f"Expected a {piece_type.name.lower()} on {at.name}, found {piece}"
        )
    return piece


def _can_land(board: Board, sq: Square, color: Color) -> bool:
    target = board[sq]
    return target is None or target.color != color


def _step_moves(
    board: Board,
    at: Square,
    color: Color,
    offsets: tuple[tuple[int, int], ...],
) -> set[Square]:
    moves: set[Square] = set()
    for d_col, d_row in offsets:
        if not at.can_shift(d_col, d_row):
            continue
        to_sq = at.shift(d_col, d_row)
        if _can_land(board, to_sq, color):
            moves.add(to_sq)
    return moves


def _ray_moves(
    board: Board,
    at: Square,
    color: Color,
    directions: tuple[tuple[int, int], ...],
) -> set[Square]:
    moves: set[Square] = set()
    for d_col, d_row in directions:
        sq = at
        while sq.can_shift(d_col, d_row):
            sq = sq.shift(d_col, d_row)
            target = board[sq]
            if target is None:
                moves.add(sq)
                continue
            if target.color != color:
                moves.add(sq)
            break
    return moves


def pawn_moves(board: Board, at: Square) -> set[Square]:
    piece = _expect(board, at, PieceType.PAWN)
    color = piece.color
    step = forward(color)
    moves: set[Square] = set()

    if at.can_shift(0, step):
        one_step = at.shift(0, step)
        if board.is_empty(one_step):
            moves.add(one_step)
            if at.row == pawn_start_row(color):
                two_step = one_step.shift(0, step)
                if board.is_empty(two_step):
                    moves.add(two_step)

    for d_col in (-1, 1):
        if not at.can_shift(d_col, step):
            continue
        cap_sq = at.shift(d_col, step)
        target = board[cap_sq]
        if target is not None and target.color != color:
            moves.add(cap_sq)
        elif target is None and cap_sq == board.en_passant:
            passed = board[Square(cap_sq.col, at.row)]
            if passed == Piece(color.opposite, PieceType.PAWN):
                moves.add(cap_sq)
    return moves


def knight_moves(board: Board, at: Square) -> set[Square]:
    piece = _expect(board, at, PieceType.KNIGHT)
    return _step_moves(board, at, piece.color, KNIGHT_OFFSETS)


def bishop_moves(board: Board, at: Square) -> set[Square]:
    piece = _expect(board, at, PieceType.BISHOP)
    return _ray_moves(board, at, piece.color, BISHOP_DIRS)


def rook_moves(board: Board, at: Square) -> set[Square]:
    piece = _expect(board, at, PieceType.ROOK)
    return _ray_moves(board, at, piece.color, ROOK_DIRS)


def queen_moves(board: Board, at: Square) -> set[Square]:
    piece = _expect(board, at, PieceType.QUEEN)
    return _ray_moves(board, at, piece.color, QUEEN_DIRS)


def king_moves(board: Board, at: Square) -> set[Square]:
    piece = _expect(board, at, PieceType.KING)
    moves = _step_moves(board, at, piece.color, KING_OFFSETS)
    moves.update(_castling_moves(board, at, piece.color))
    return moves


def _castling_moves(board: Board, at: Square, color: Color) -> set[Square]:
    row = back_row(color)
    if board.king_has_moved(color) or board.king_flagged_in_check(color):
        return set()
    if at != Square(4, row):
        return set()

    opponent = color.opposite
    moves: set[Square] = set()
    for direction, (rook_col, between, guarded) in ((1, _KINGSIDE), (-1, _QUEENSIDE)):
        rook_sq = Square(rook_col, row)
        if not board.rook_is_unmoved(rook_sq):
            continue
        if board[rook_sq] != Piece(color, PieceType.ROOK):
            continue
        if any(not board.is_empty(Square(col, row)) for col in between):
            continue
        if any(
            attacks(board, Square(col, row), opponent, include_king=False)
            for col in guarded
        ):
            continue
        moves.add(at.shift(2 * direction, 0))
    return moves


_GENERATORS: dict[PieceType, Callable[[Board, Square], set[Square]]] = {
    PieceType.PAWN: pawn_moves,
    PieceType.KNIGHT: knight_moves,
    PieceType.BISHOP: bishop_moves,
    PieceType.ROOK: rook_moves,
    PieceType.QUEEN: queen_moves,
    PieceType.KING: king_moves,
}


def pseudo_legal_moves(board: Board, at: Square) -> set[Square]:
    """All destinations the piece on *at* can reach, ignoring own-king safety."""
    piece = board[at]
    if piece is None:
        raise InvalidStateError(f"No piece on {at.name}")
    return _GENERATORS[piece.piece_type](board, at)


# -- Attack detection -------------------------------------------------------


def attacked_squares(board: Board, at: Square) -> set[Square]:
    """Squares the piece on *at* attacks.

    Same as its pseudo-legal moves except that pawns attack both forward
    diagonals whether occupied or not, never their forward squares, and the
    king contributes its neighbours only (no castling).
    """
    piece = board[at]
    if piece is None:
        raise InvalidStateError(f"No piece on {at.name}")
    if piece.piece_type == PieceType.PAWN:
        step = forward(piece.color)
        return {
            at.shift(d_col, step) for d_col in (-1, 1) if at.can_shift(d_col, step)
        }
    if piece.piece_type == PieceType.KING:
        return _step_moves(board, at, piece.color, KING_OFFSETS)
    return _GENERATORS[piece.piece_type](board, at)


def attacks(
    board: Board,
    target: Square,
    by_color: Color,
    *,
    include_king: bool = True,
) -> bool:
    """Is *target* attacked by any piece of *by_color*?"""
    for sq in board.pieces(by_color):
        piece = board[sq]
        assert piece is not None
        if not include_king and piece.piece_type == PieceType.KING:
            continue
        if target in attacked_squares(board, sq):
            return True
    return False


class MoveGenerator:
    """Legal move generation for a :class:`Board`.

    The generator mutates the board via ``apply_move`` while probing a
    candidate but always restores the snapshot before returning.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    # -- Public API ---------------------------------------------------------

    def pseudo_legal_moves(self, at: Square) -> set[Square]:
        return pseudo_legal_moves(self._board, at)

    def legal_moves(self, at: Square) -> list[Square]:
        """Destinations from *at* that do not leave the mover's king attacked."""
        board = self._board
        piece = board[at]
        if piece is None:
            raise InvalidStateError(f"No piece on {at.name}")

        legal: list[Square] = []
        last_row = promotion_row(piece.color)
        for to_sq in sorted(self.pseudo_legal_moves(at), key=lambda sq: sq.index):
            snapshot = board.snapshot()
            board.apply_move(at, to_sq)
            if piece.piece_type == PieceType.PAWN and to_sq.row == last_row:
                # Placeholder promotion; the real choice comes from the caller.
                board[to_sq] = Piece(piece.color, PieceType.QUEEN)
            safe = not self.is_in_check(piece.color)
            board.restore(snapshot)
            if safe:
                legal.append(to_sq)
        return legal

    def all_legal_moves(self) -> dict[Square, list[Square]]:
        """Legal destinations for every piece of the side to move."""
        board = self._board
        return {sq: self.legal_moves(sq) for sq in board.pieces(board.side_to_move)}

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return attacks(self._board, king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return attacks(self._board, sq, by_color)
