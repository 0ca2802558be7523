"""Algebraic move tokens built from a before/after board pair."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simplechess.core.enums import PieceType
from simplechess.core.errors import InvalidStateError
from simplechess.core.move_generator import MoveGenerator
from simplechess.core.rules import Rules
from simplechess.core.types import Square

if TYPE_CHECKING:
    from simplechess.core.board import Board

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


def is_capture(before: Board, from_sq: Square, to_sq: Square) -> bool:
    """Whether moving *from_sq* → *to_sq* on *before* takes a piece."""
    if before[to_sq] is not None:
        return True
    piece = before[from_sq]
    return (
        piece is not None
        and piece.piece_type == PieceType.PAWN
        and to_sq == before.en_passant
    )


def is_castling(before: Board, from_sq: Square, to_sq: Square) -> bool:
    piece = before[from_sq]
    return (
        piece is not None
        and piece.piece_type == PieceType.KING
        and from_sq.row == to_sq.row
        and abs(to_sq.col - from_sq.col) == 2
    )


def _disambiguation(before: Board, from_sq: Square, to_sq: Square) -> str:
    """Origin file, rank, or both, as needed to single out the mover."""
    piece = before[from_sq]
    assert piece is not None
    gen = MoveGenerator(before)
    need_file = need_rank = False
    for sq in before.find_all(piece.piece_type, piece.color):
        if sq == from_sq or to_sq not in gen.legal_moves(sq):
            continue
        if sq.col == from_sq.col:
            need_rank = True
        else:
            need_file = True
    if need_file and need_rank:
        return from_sq.name
    if need_rank:
        return str(from_sq.rank)
    if need_file:
        return from_sq.file
    return ""


def move_token(
    before: Board,
    after: Board,
    from_sq: Square,
    to_sq: Square,
    promotion: PieceType | None = None,
) -> str:
    """Notation for a move, given the boards before and after it."""
    piece = before[from_sq]
    if piece is None:
        raise InvalidStateError(f"No piece on {from_sq.name}")

    capture = is_capture(before, from_sq, to_sq)
    if is_castling(before, from_sq, to_sq):
        token = "O-O" if to_sq.col > from_sq.col else "O-O-O"
    elif piece.piece_type == PieceType.PAWN:
        token = f"{from_sq.file}x{to_sq.name}" if capture else to_sq.name
        if promotion is not None:
            token += "=" + _SAN_PIECE[promotion]
    else:
        token = _SAN_PIECE[piece.piece_type]
        token += _disambiguation(before, from_sq, to_sq)
        if capture:
            token += "x"
        token += to_sq.name

    # Check / checkmate suffix against the post-move board
    opponent = piece.color.opposite
    if Rules.is_checkmated(after, opponent):
        token += "#"
    elif Rules.in_check(after, opponent):
        token += "+"
    return token
