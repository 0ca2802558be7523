"""Tests for GameSession: protocol handling, end of game, events."""

from __future__ import annotations

import logging

import pytest

from simplechess.core.enums import Color, EndReason, GameResult, PieceType
from simplechess.core.errors import IllegalArgumentError, IllegalMoveError
from simplechess.core.types import parse_square
from simplechess.game.clock import Clock
from simplechess.game.interfaces import GamePhase, SessionSettings, TimeControl
from simplechess.game.session import GameSession

sq = parse_square

SCHOLARS_MATE = [
    "MOVE e2 e4",
    "MOVE e7 e5",
    "MOVE f1 c4",
    "MOVE b8 c6",
    "MOVE d1 h5",
    "MOVE g8 f6",
]


def _untimed() -> GameSession:
    return GameSession(SessionSettings(time_control=None))


class TestSessionSetup:
    def test_defaults(self) -> None:
        session = GameSession()
        assert session.phase == GamePhase.NOT_STARTED
        assert session.result == GameResult.UNDETERMINED
        assert isinstance(session.clock, Clock)
        assert session.clock.remaining(Color.WHITE) == 60.0

    def test_untimed(self) -> None:
        assert _untimed().clock is None

    def test_startgame_starts_clock(self) -> None:
        session = GameSession()
        assert session.handle_line("STARTGAME true Alice") == []
        assert session.phase == GamePhase.AWAITING_MOVE
        assert session.clock is not None
        assert session.clock.is_running
        assert session.clock.active_color == Color.WHITE


class TestHandleLine:
    def test_accepted_move_is_echoed(self) -> None:
        session = _untimed()
        assert session.handle_line("MOVEe2 e4") == ["MOVE e2 e4"]
        assert session.side_to_move == Color.BLACK

    def test_rejected_move(self, caplog: pytest.LogCaptureFixture) -> None:
        session = _untimed()
        with caplog.at_level(logging.WARNING, logger="simplechess.game.session"):
            assert session.handle_line("MOVE e2 e5") == []
        assert "Rejected" in caplog.text
        assert session.board.history == ()

    def test_malformed_line_is_ignored(self) -> None:
        session = _untimed()
        assert session.handle_line("MOVE z9 e4") == []
        assert session.handle_line("FOO") == []

    def test_ping(self) -> None:
        assert _untimed().handle_line("PING") == ["PING"]

    def test_checkmate_ends_game(self) -> None:
        session = _untimed()
        for line in SCHOLARS_MATE:
            assert session.handle_line(line) == [line]
        assert session.handle_line("MOVE h5 f7") == [
            "MOVE h5 f7",
            "ENDGAME 1 checkmate",
        ]
        assert session.is_game_over
        assert session.result == GameResult.WHITE_WINS
        assert session.end_reason == EndReason.CHECKMATE
        assert session.movetext().endswith("4. Qxf7# 1-0")

    def test_moves_rejected_after_game_over(self) -> None:
        session = _untimed()
        for line in SCHOLARS_MATE + ["MOVE h5 f7"]:
            session.handle_line(line)
        assert session.handle_line("MOVE a7 a6") == []
        with pytest.raises(IllegalMoveError):
            session.submit_move(sq("a7"), sq("a6"))

    def test_threefold_repetition(self) -> None:
        session = _untimed()
        shuffle = ["MOVE g1 f3", "MOVE g8 f6", "MOVE f3 g1", "MOVE f6 g8"]
        for line in shuffle + shuffle[:3]:
            assert session.handle_line(line) == [line]
        assert session.handle_line("MOVE f6 g8") == [
            "MOVE f6 g8",
            "ENDGAME 0 3-fold_repetition",
        ]
        assert session.result == GameResult.DRAW

    def test_promotion_line(self) -> None:
        session = _untimed()
        for line in (
            "MOVE b2 b4",
            "MOVE a7 a5",
            "MOVE b4 a5",
            "MOVE b7 b6",
            "MOVE a5 b6",
            "MOVE c8 a6",
            "MOVE b6 b7",
            "MOVE b8 c6",
        ):
            assert session.handle_line(line) == [line]
        assert session.handle_line("MOVE b7 a8") == []
        assert session.handle_line("PROMOTE b7 a8 4") == ["PROMOTE b7 a8 4"]
        assert session.board.history[-1] == "bxa8=Q"

    def test_inbound_endgame(self) -> None:
        session = _untimed()
        session.handle_line("MOVE e2 e4")
        assert session.handle_line("ENDGAME-1 resignation") == []
        assert session.result == GameResult.BLACK_WINS
        assert session.end_reason == EndReason.RESIGNATION
        assert session.board.recorder.outcome == GameResult.BLACK_WINS


class TestSubmit:
    def test_submit_move_returns_none_while_running(self) -> None:
        session = _untimed()
        assert session.submit_move(sq("e2"), sq("e4")) is None

    def test_illegal_move_raises_without_mutation(self) -> None:
        session = _untimed()
        with pytest.raises(IllegalMoveError):
            session.submit_move(sq("e2"), sq("d3"))
        assert session.side_to_move == Color.WHITE

    def test_invalid_promotion_piece(self) -> None:
        session = _untimed()
        with pytest.raises(IllegalArgumentError):
            session.submit_promotion(sq("e2"), sq("e4"), PieceType.KING)


class TestGameEnd:
    def test_resign(self) -> None:
        session = _untimed()
        end = session.resign(Color.WHITE)
        assert end.to_line() == "ENDGAME -1 resignation"
        assert session.is_game_over
        assert session.board.recorder.movetext() == "0-1"

    def test_flag_fall_on_move(self) -> None:
        session = GameSession(SessionSettings(time_control=TimeControl(60, 0)))
        session.start()
        assert session.clock is not None
        session.clock.set_remaining(Color.WHITE, 0)
        assert session.handle_line("MOVE e2 e4") == ["ENDGAME -1 time"]
        assert session.end_reason == EndReason.TIME
        assert session.board.history == ()
        assert not session.clock.is_running

    def test_clock_hit_after_move(self) -> None:
        session = GameSession(SessionSettings(time_control=TimeControl(60, 5)))
        session.start()
        session.handle_line("MOVE e2 e4")
        assert session.clock is not None
        assert session.clock.active_color == Color.BLACK
        assert session.clock.remaining(Color.WHITE) > 64.0

    def test_reset(self) -> None:
        session = _untimed()
        session.handle_line("MOVE e2 e4")
        session.resign(Color.BLACK)
        session.reset()
        assert session.phase == GamePhase.NOT_STARTED
        assert session.result == GameResult.UNDETERMINED
        assert session.board.history == ()
        assert session.handle_line("MOVE e2 e4") == ["MOVE e2 e4"]


class TestEvents:
    def test_callbacks(self) -> None:
        session = _untimed()
        moves: list[str] = []
        endings: list[tuple[GameResult, EndReason]] = []
        session.events.on_move.append(lambda token, _s: moves.append(token))
        session.events.on_game_over.append(lambda r, why: endings.append((r, why)))

        for line in SCHOLARS_MATE + ["MOVE h5 f7"]:
            session.handle_line(line)

        assert moves == ["e4", "e5", "Bc4", "Nc6", "Qh5", "Nf6", "Qxf7#"]
        assert endings == [(GameResult.WHITE_WINS, EndReason.CHECKMATE)]
