"""Square value type and coordinate helpers.

Board layout (screen order, white at the bottom):
    row 0 = rank 8 (black's back rank), row 7 = rank 1 (white's back rank)
    col 0 = file a, col 7 = file h

So ``Square(0, 0)`` is a8 and ``Square(7, 7)`` is h1.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from simplechess.core.enums import SquareShade
from simplechess.core.errors import OutOfBoundsError

BOARD_SIZE = 8
FILES = "abcdefgh"


def is_valid_square(col: int, row: int) -> bool:
    """Whether ``(col, row)`` lies on the 8x8 grid."""
    return 0 <= col < BOARD_SIZE and 0 <= row < BOARD_SIZE


@dataclass(frozen=True, slots=True)
class Square:
    """Immutable board coordinate."""

    col: int
    row: int

    def __post_init__(self) -> None:
        if not is_valid_square(self.col, self.row):
            raise OutOfBoundsError(f"Square off the board: ({self.col}, {self.row})")

    # ── Arithmetic ───────────────────────────────────────────────────────

    def can_shift(self, d_col: int, d_row: int) -> bool:
        """Whether shifting by ``(d_col, d_row)`` stays on the board."""
        return is_valid_square(self.col + d_col, self.row + d_row)

    def shift(self, d_col: int, d_row: int) -> Square:
        """Square offset by ``(d_col, d_row)``; raises :class:`OutOfBoundsError`."""
        if not self.can_shift(d_col, d_row):
            raise OutOfBoundsError(
                f"Cannot shift {self.name} by ({d_col}, {d_row})"
            )
        return Square(self.col + d_col, self.row + d_row)

    def rotated(self) -> Square:
        """The square seen from the other side of the board."""
        return Square(7 - self.col, 7 - self.row)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def shade(self) -> SquareShade:
        return SquareShade.LIGHT if (self.col + self.row) % 2 == 0 else SquareShade.DARK

    @property
    def rank(self) -> int:
        """Chess rank 1–8."""
        return BOARD_SIZE - self.row

    @property
    def file(self) -> str:
        return FILES[self.col]

    @property
    def index(self) -> int:
        """Row-major index 0–63 (a8=0, h1=63)."""
        return self.row * BOARD_SIZE + self.col

    @property
    def name(self) -> str:
        return f"{self.file}{self.rank}"

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Square({self.name})"


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. ``Square(4, 4)`` → ``'e4'``."""
    return sq.name


def parse_square(name: str) -> Square:
    """Parse a square name, e.g. ``'e4'`` → ``Square(4, 4)``."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in "12345678":
        raise OutOfBoundsError(f"Invalid square name: {name!r}")
    return Square(FILES.index(name[0]), BOARD_SIZE - int(name[1]))


def square_color(sq: Square) -> SquareShade:
    return sq.shade


def rotate_square(sq: Square) -> Square:
    return sq.rotated()


def iter_squares() -> Iterator[Square]:
    """All 64 squares, row 0 first, left to right."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            yield Square(col, row)


ALL_SQUARES: tuple[Square, ...] = tuple(iter_squares())
