"""Periodic one-second clock sources for quiz sessions."""

from __future__ import annotations

from threading import Event, Thread
from typing import Callable, ContextManager, Protocol

from quizgen_app.constants.quiz_constants import TICK_INTERVAL_SECONDS

TickCallback = Callable[[], None]


class TickScheduler(Protocol):
    """Clock source owned by a session controller."""

    def start(self, callback: TickCallback) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_running(self) -> bool: ...


class ThreadingTickScheduler:
    """Fires the callback from a daemon thread once per interval."""

    def __init__(self, interval_seconds: float = TICK_INTERVAL_SECONDS) -> None:
        self._interval = interval_seconds
        self._stop_event = Event()
        self._thread: Thread | None = None

    def start(self, callback: TickCallback) -> None:
        if self._thread is not None:
            raise RuntimeError("Scheduler has already been started.")
        self._thread = Thread(
            target=self._run,
            args=(callback,),
            name="QuizTickScheduler",
            daemon=True,
        )
        self._thread.start()

    def cancel(self) -> None:
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def _run(self, callback: TickCallback) -> None:
        while not self._stop_event.wait(self._interval):
            callback()


class LockedTickScheduler:
    """Wraps another scheduler so every tick runs while holding ``lock``.

    A tick that was already waiting for the lock when the scheduler got
    cancelled is dropped.
    """

    def __init__(self, inner: TickScheduler, lock: ContextManager) -> None:
        self._inner = inner
        self._lock = lock
        self._cancelled = False

    def start(self, callback: TickCallback) -> None:
        def locked_tick() -> None:
            with self._lock:
                if not self._cancelled:
                    callback()

        self._inner.start(locked_tick)

    def cancel(self) -> None:
        self._cancelled = True
        self._inner.cancel()

    @property
    def is_running(self) -> bool:
        return not self._cancelled and self._inner.is_running
