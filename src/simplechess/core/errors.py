"""Exception hierarchy for the rules engine."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by :mod:`simplechess`."""


class OutOfBoundsError(ChessError, IndexError):
    """A coordinate or shift falls outside the 8x8 grid."""


class InvalidStateError(ChessError, RuntimeError):
    """An operation was invoked against a square holding the wrong piece."""


class IllegalMoveError(ChessError, ValueError):
    """The requested move is not legal for the side to move."""


class IllegalArgumentError(ChessError, ValueError):
    """A promotion was requested with the wrong piece kind or origin."""
