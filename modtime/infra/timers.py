from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Qt, QTimer

# QTimer intervals are signed 32-bit milliseconds.
MAX_INTERVAL_MS = 2**31 - 1


class QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer
        self._done = False
        timer.timeout.connect(self._release)

    def cancel(self) -> None:
        if self._done:
            return
        self._timer.stop()
        self._release()

    def _release(self) -> None:
        self._done = True
        self._timer.deleteLater()


class QtTimerScheduler:
    """Arms single-shot timers on the Qt event loop.

    Delays longer than ``MAX_INTERVAL_MS`` are clamped; the caller is expected
    to check its deadline when the timer fires and re-arm if needed.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setTimerType(Qt.PreciseTimer)
        timer.setInterval(min(MAX_INTERVAL_MS, max(0, int(delay_seconds * 1000))))
        timer.timeout.connect(callback)
        handle = QtTimerHandle(timer)
        timer.start()
        return handle
