"""Countdown clock driven by the Qt event loop."""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer

from quizgen_app.constants.quiz_constants import TICK_INTERVAL_SECONDS
from quizgen_app.core.services.tick_scheduler import TickCallback


class QtTickScheduler:
    """Fires the callback on the GUI thread once per interval via ``QTimer``.

    Must be created on the thread that runs the Qt event loop.
    """

    def __init__(
        self,
        interval_ms: int = int(TICK_INTERVAL_SECONDS * 1000),
        parent: QObject | None = None,
    ) -> None:
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._started = False
        self._cancelled = False

    def start(self, callback: TickCallback) -> None:
        if self._started:
            raise RuntimeError("Scheduler has already been started.")
        self._started = True
        self._timer.timeout.connect(callback)
        self._timer.start()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._timer.stop()
        # A cancelled timer no longer belongs to its parent widget.
        self._timer.setParent(None)
        self._timer.deleteLater()

    @property
    def is_running(self) -> bool:
        return not self._cancelled and self._timer.isActive()
