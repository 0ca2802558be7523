"""Tests for the line protocol."""

import pytest

from simplechess.core.enums import EndReason, GameResult, PieceType
from simplechess.core.types import parse_square
from simplechess.game.protocol import (
    EndGameCommand,
    MoveCommand,
    PingCommand,
    PromoteCommand,
    ProtocolError,
    StartGameCommand,
    format_command,
    parse_command,
)

sq = parse_square


class TestParse:
    def test_move(self) -> None:
        assert parse_command("MOVE e2 e4") == MoveCommand(sq("e2"), sq("e4"))

    def test_glued_move(self) -> None:
        assert parse_command("MOVEe2 e4\n") == MoveCommand(sq("e2"), sq("e4"))

    def test_promote(self) -> None:
        cmd = parse_command("PROMOTE e7 e8 4")
        assert cmd == PromoteCommand(sq("e7"), sq("e8"), PieceType.QUEEN)

    def test_startgame(self) -> None:
        assert parse_command("STARTGAME true Alice") == StartGameCommand(True, "Alice")
        assert parse_command("STARTGAME false") == StartGameCommand(False)

    def test_endgame(self) -> None:
        cmd = parse_command("ENDGAME -1 checkmate")
        assert cmd == EndGameCommand(GameResult.BLACK_WINS, EndReason.CHECKMATE)

    def test_glued_endgame(self) -> None:
        cmd = parse_command("ENDGAME0 3-fold_repetition")
        assert cmd == EndGameCommand(GameResult.DRAW, EndReason.THREEFOLD_REPETITION)

    def test_ping(self) -> None:
        assert parse_command("PING") == PingCommand()

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "HELLO",
            "MOVE e2",
            "MOVE e2 e9",
            "MOVE e2 e4 e5",
            "PROMOTE e7 e8 5",
            "PROMOTE e7 e8 Q",
            "STARTGAME maybe",
            "ENDGAME 2 checkmate",
            "ENDGAME 1 boredom",
            "PING now",
        ],
    )
    def test_malformed(self, line: str) -> None:
        with pytest.raises(ProtocolError):
            parse_command(line)

    def test_protocol_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_command("NOPE")


class TestFormat:
    def test_lines(self) -> None:
        assert format_command(MoveCommand(sq("g1"), sq("f3"))) == "MOVE g1 f3"
        assert (
            format_command(PromoteCommand(sq("b2"), sq("b1"), PieceType.KNIGHT))
            == "PROMOTE b2 b1 1"
        )
        assert format_command(StartGameCommand(True, "Bob")) == "STARTGAME true Bob"
        assert format_command(PingCommand()) == "PING"

    def test_endgame_line(self) -> None:
        cmd = EndGameCommand(GameResult.DRAW, EndReason.FIFTY_MOVE_DRAW)
        assert cmd.to_line() == "ENDGAME 0 50_move_draw"

    def test_parse_back(self) -> None:
        cmd = EndGameCommand(GameResult.WHITE_WINS, EndReason.RESIGNATION)
        assert parse_command(cmd.to_line()) == cmd
