"""Qt bridge: drive a :class:`GameSession` and its clock from the event loop."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from simplechess.core.enums import Color
from simplechess.core.errors import ChessError
from simplechess.game.interfaces import IClock
from simplechess.game.session import GameSession

_LOGGER = logging.getLogger(__name__)


class ClockTimer(QObject):
    """Polls an :class:`IClock` and reports flag falls.

    ``tick`` carries the remaining seconds of White and Black.
    ``timed_out`` carries the :class:`Color` whose flag fell, once per fall.
    """

    tick = pyqtSignal(float, float)
    timed_out = pyqtSignal(object)

    def __init__(
        self,
        clock: IClock,
        interval_ms: int = 100,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self._reported = False
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.poll)

    @property
    def clock(self) -> IClock:
        return self._clock

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    @pyqtSlot()
    def start(self) -> None:
        self._reported = False
        self._timer.start()

    @pyqtSlot()
    def stop(self) -> None:
        self._timer.stop()

    @pyqtSlot()
    def poll(self) -> None:
        """Emit the current readings; report a flag fall once."""
        self.tick.emit(
            self._clock.remaining(Color.WHITE),
            self._clock.remaining(Color.BLACK),
        )
        color = self._clock.active_color
        if color is None or self._reported or not self._clock.is_running:
            return
        if self._clock.is_flag_fallen(color):
            self._reported = True
            self._timer.stop()
            _LOGGER.info("Flag fell for %s", color)
            self.timed_out.emit(color)


class SessionWorker(QObject):
    """Thread-affine owner of one :class:`GameSession`.

    Inbound protocol lines arrive on :meth:`handle_line`; every line to send
    back to the peers is emitted on ``outbound``.
    """

    outbound = pyqtSignal(str)
    rejected = pyqtSignal(str)
    error = pyqtSignal(str)

    def __init__(
        self,
        session: GameSession | None = None,
        *,
        with_timer: bool = True,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._session = session if session is not None else GameSession()
        self._timer: ClockTimer | None = None
        clock = self._session.clock
        if with_timer and clock is not None:
            self._timer = ClockTimer(
                clock, self._session.settings.tick_interval_ms, parent=self
            )
            self._timer.timed_out.connect(self._on_timed_out)

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def clock_timer(self) -> ClockTimer | None:
        return self._timer

    @pyqtSlot(str)
    def handle_line(self, line: str) -> None:
        was_running = self._session.clock is not None and self._session.clock.is_running
        try:
            replies = self._session.handle_line(line)
        except ChessError as exc:
            _LOGGER.warning("Session error on %r: %s", line, exc)
            self.error.emit(str(exc))
            return

        if not replies and not line.strip().startswith(("STARTGAME", "ENDGAME")):
            self.rejected.emit(line)
        for reply in replies:
            self.outbound.emit(reply)
        self._sync_timer(was_running)

    @pyqtSlot()
    def reset(self) -> None:
        self._session.reset()
        if self._timer is not None:
            self._timer.stop()

    def _sync_timer(self, was_running: bool) -> None:
        if self._timer is None:
            return
        clock = self._session.clock
        running = clock is not None and clock.is_running
        if running and not (was_running and self._timer.is_active):
            self._timer.start()
        elif not running:
            self._timer.stop()

    def _on_timed_out(self, color: Color) -> None:
        if self._session.is_game_over:
            return
        end = self._session.time_out(color)
        self.outbound.emit(end.to_line())
