from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop, QObject, QTimer

from modtime.infra.timers import MAX_INTERVAL_MS, QtTimerScheduler


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def _spin(ms: int) -> None:
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


def _timers(parent: QObject) -> list[QTimer]:
    return parent.findChildren(QTimer)


def test_zero_delay_fires_on_next_loop_turn(qt_app) -> None:
    fired: list[str] = []
    scheduler = QtTimerScheduler()

    scheduler.schedule(0, lambda: fired.append("now"))
    assert fired == []

    _spin(20)
    assert fired == ["now"]


def test_negative_delay_is_treated_as_zero(qt_app) -> None:
    fired: list[str] = []
    parent = QObject()
    scheduler = QtTimerScheduler(parent)

    scheduler.schedule(-30, lambda: fired.append("late"))
    (timer,) = _timers(parent)
    assert timer.interval() == 0

    _spin(20)
    assert fired == ["late"]


def test_cancel_prevents_fire(qt_app) -> None:
    fired: list[str] = []
    scheduler = QtTimerScheduler()

    handle = scheduler.schedule(0.01, lambda: fired.append("x"))
    handle.cancel()

    _spin(50)
    assert fired == []


def test_cancel_after_fire_is_noop(qt_app) -> None:
    fired: list[str] = []
    scheduler = QtTimerScheduler()

    handle = scheduler.schedule(0, lambda: fired.append("x"))
    _spin(20)

    handle.cancel()
    handle.cancel()
    assert fired == ["x"]


def test_long_delays_are_clamped(qt_app) -> None:
    parent = QObject()
    scheduler = QtTimerScheduler(parent)

    handle = scheduler.schedule(60 * 60 * 24 * 365, lambda: None)
    try:
        (timer,) = _timers(parent)
        assert timer.interval() == MAX_INTERVAL_MS
        assert timer.isSingleShot()
        assert timer.isActive()
    finally:
        handle.cancel()
