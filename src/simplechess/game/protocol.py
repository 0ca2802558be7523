"""Line protocol exchanged between the two sessions of a game.

Each command is one text line::

    MOVE e2 e4
    PROMOTE e7 e8 4
    STARTGAME true Alice
    ENDGAME -1 checkmate
    PING

The keyword may also be glued to its first argument (``MOVEe2 e4``,
``ENDGAME-1 checkmate``), which is how older peers send it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from simplechess.core.enums import EndReason, GameResult, PieceType
from simplechess.core.errors import ChessError, IllegalArgumentError
from simplechess.core.piece import promotion_piece_type
from simplechess.core.types import Square, parse_square


class ProtocolError(ChessError, ValueError):
    """A line could not be parsed as a protocol command."""


@dataclass(frozen=True, slots=True)
class MoveCommand:
    from_sq: Square
    to_sq: Square

    def to_line(self) -> str:
        return f"MOVE {self.from_sq} {self.to_sq}"


@dataclass(frozen=True, slots=True)
class PromoteCommand:
    from_sq: Square
    to_sq: Square
    piece_type: PieceType

    def to_line(self) -> str:
        return f"PROMOTE {self.from_sq} {self.to_sq} {int(self.piece_type)}"


@dataclass(frozen=True, slots=True)
class StartGameCommand:
    is_white: bool
    opponent: str = ""

    def to_line(self) -> str:
        side = "true" if self.is_white else "false"
        return f"STARTGAME {side} {self.opponent}".rstrip()


@dataclass(frozen=True, slots=True)
class EndGameCommand:
    result: GameResult
    reason: EndReason

    def to_line(self) -> str:
        return f"ENDGAME {self.result.score} {self.reason}"


@dataclass(frozen=True, slots=True)
class PingCommand:
    def to_line(self) -> str:
        return "PING"


Command = Union[MoveCommand, PromoteCommand, StartGameCommand, EndGameCommand, PingCommand]

_KEYWORDS = ("PROMOTE", "STARTGAME", "ENDGAME", "MOVE", "PING")
_SCORE_RE = re.compile(r"^-?\d+$")


def _split(line: str) -> tuple[str, list[str]]:
    text = line.strip()
    for keyword in _KEYWORDS:
        if text.startswith(keyword):
            return keyword, text[len(keyword) :].split()
    raise ProtocolError(f"Unknown command: {line!r}")


def _square(token: str, line: str) -> Square:
    try:
        return parse_square(token)
    except ChessError:
        raise ProtocolError(f"Invalid square {token!r} in {line!r}") from None


def _expect_args(args: list[str], count: int, line: str) -> None:
    if len(args) != count:
        raise ProtocolError(f"Expected {count} arguments in {line!r}")


def parse_command(line: str) -> Command:
    """Parse one protocol line."""
    keyword, args = _split(line)

    if keyword == "MOVE":
        _expect_args(args, 2, line)
        return MoveCommand(_square(args[0], line), _square(args[1], line))

    if keyword == "PROMOTE":
        _expect_args(args, 3, line)
        if not _SCORE_RE.match(args[2]):
            raise ProtocolError(f"Invalid piece code {args[2]!r} in {line!r}")
        try:
            piece_type = promotion_piece_type(int(args[2]))
        except IllegalArgumentError as exc:
            raise ProtocolError(f"{exc} in {line!r}") from None
        return PromoteCommand(_square(args[0], line), _square(args[1], line), piece_type)

    if keyword == "STARTGAME":
        if not args or args[0] not in ("true", "false"):
            raise ProtocolError(f"Invalid side in {line!r}")
        return StartGameCommand(args[0] == "true", " ".join(args[1:]))

    if keyword == "ENDGAME":
        _expect_args(args, 2, line)
        if not _SCORE_RE.match(args[0]):
            raise ProtocolError(f"Invalid result {args[0]!r} in {line!r}")
        try:
            result = GameResult.from_score(int(args[0]))
            reason = EndReason(args[1])
        except ValueError:
            raise ProtocolError(f"Invalid end of game in {line!r}") from None
        return EndGameCommand(result, reason)

    if args:
        raise ProtocolError(f"PING takes no arguments: {line!r}")
    return PingCommand()


def format_command(command: Command) -> str:
    """Render *command* as a protocol line."""
    return command.to_line()
