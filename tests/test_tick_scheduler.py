from __future__ import annotations

from threading import Event, RLock

import pytest
from PySide6.QtCore import QCoreApplication, QObject, QTimer

from conftest import ManualTickScheduler
from quizgen_app.core.services.tick_scheduler import LockedTickScheduler, ThreadingTickScheduler
from quizgen_app.ui.qt_tick_scheduler import QtTickScheduler


@pytest.fixture(scope="module")
def qt_app() -> QCoreApplication:
    return QCoreApplication.instance() or QCoreApplication([])


def test_threading_scheduler_ticks_until_cancelled():
    ticks: list[int] = []
    reached_three = Event()

    def on_tick() -> None:
        ticks.append(1)
        if len(ticks) >= 3:
            reached_three.set()

    scheduler = ThreadingTickScheduler(interval_seconds=0.01)
    scheduler.start(on_tick)
    assert scheduler.is_running
    assert reached_three.wait(timeout=2.0)

    scheduler.cancel()
    scheduler._thread.join(timeout=2.0)

    assert not scheduler.is_running
    assert not scheduler._thread.is_alive()


def test_threading_scheduler_starts_once():
    scheduler = ThreadingTickScheduler(interval_seconds=0.01)
    scheduler.start(lambda: None)
    with pytest.raises(RuntimeError):
        scheduler.start(lambda: None)
    scheduler.cancel()


def test_locked_scheduler_drops_ticks_after_cancel():
    inner = ManualTickScheduler()
    ticks: list[int] = []
    scheduler = LockedTickScheduler(inner, RLock())
    scheduler.start(lambda: ticks.append(1))

    inner.fire()
    scheduler.cancel()
    inner.fire(2)

    assert ticks == [1]
    assert inner.cancelled
    assert not scheduler.is_running


def test_qt_scheduler_releases_its_timer_on_cancel(qt_app):
    window = QObject()
    scheduler = QtTickScheduler(parent=window)
    scheduler.start(lambda: None)
    assert scheduler.is_running
    assert len(window.findChildren(QTimer)) == 1

    scheduler.cancel()
    scheduler.cancel()

    assert not scheduler.is_running
    assert window.findChildren(QTimer) == []
