"""Board digest ("miniFEN"): piece placement only, used as a repetition key."""

from __future__ import annotations

from typing import TYPE_CHECKING

from simplechess.core.piece import Piece
from simplechess.core.types import BOARD_SIZE, Square

if TYPE_CHECKING:
    from simplechess.core.board import Board

STARTING_DIGEST = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def board_digest(board: Board) -> str:
    """Serialise the placement of *board*, rank 8 first."""
    rows: list[str] = []
    for row in range(BOARD_SIZE):
        empty = 0
        text = ""
        for col in range(BOARD_SIZE):
            piece = board[Square(col, row)]
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += str(piece)
        if empty:
            text += str(empty)
        rows.append(text)
    return "/".join(rows)


def parse_digest(digest: str) -> dict[Square, Piece]:
    """Parse a digest into a ``{square: piece}`` placement map."""
    ranks = digest.split("/")
    if len(ranks) != BOARD_SIZE:
        raise ValueError(f"Invalid digest (must contain 8 ranks): {digest!r}")

    placement: dict[Square, Piece] = {}
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= BOARD_SIZE):
                    raise ValueError(f"Invalid digest digit {ch!r}: {digest!r}")
                col += step
            else:
                if col >= BOARD_SIZE:
                    raise ValueError(f"Invalid digest rank width: {digest!r}")
                placement[Square(col, row)] = Piece.from_char(ch)
                col += 1
            if col > BOARD_SIZE:
                raise ValueError(f"Invalid digest rank width: {digest!r}")
        if col != BOARD_SIZE:
            raise ValueError(f"Invalid digest rank width: {digest!r}")
    return placement
