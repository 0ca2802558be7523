"""Game layer: sessions, clock, line protocol and the Qt bridge.

Quick start::

    from simplechess.game import GameSession, SessionSettings, TimeControl

    session = GameSession(SessionSettings(time_control=TimeControl.blitz_5m()))
    session.handle_line("STARTGAME true Alice")
    session.handle_line("MOVE e2 e4")  # -> ["MOVE e2 e4"]
"""

from simplechess.game.clock import Clock, format_seconds
from simplechess.game.interfaces import GamePhase, IClock, SessionSettings, TimeControl
from simplechess.game.protocol import (
    Command,
    EndGameCommand,
    MoveCommand,
    PingCommand,
    PromoteCommand,
    ProtocolError,
    StartGameCommand,
    format_command,
    parse_command,
)
from simplechess.game.session import GameEvents, GameSession

__all__ = [
    # Interfaces / config
    "GamePhase",
    "IClock",
    "SessionSettings",
    "TimeControl",
    # Concrete
    "Clock",
    "GameEvents",
    "GameSession",
    "format_seconds",
    # Protocol
    "Command",
    "EndGameCommand",
    "MoveCommand",
    "PingCommand",
    "PromoteCommand",
    "ProtocolError",
    "StartGameCommand",
    "format_command",
    "parse_command",
]
