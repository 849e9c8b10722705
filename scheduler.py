"""One-shot cancellable timers for the decoder and the sessions."""

from __future__ import annotations

import threading
from typing import Callable, Optional

try:
    from PySide6.QtCore import QTimer
except Exception:  # pragma: no cover
    QTimer = None  # type: ignore


class ThreadingTimerHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler:
    """Runs callbacks on short-lived daemon timer threads."""

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> ThreadingTimerHandle:
        timer = threading.Timer(max(0.0, delay_s), callback)
        timer.daemon = True
        timer.start()
        return ThreadingTimerHandle(timer)


class QtTimerHandle:
    def __init__(self, timer: object, on_cancel: Callable[[object], None]) -> None:
        self._timer: Optional[object] = timer
        self._on_cancel = on_cancel

    def cancel(self) -> None:
        timer = self._timer
        if timer is not None:
            timer.stop()
            self._on_cancel(timer)
            self._timer = None


class QtScheduler:
    """Runs callbacks on the Qt event loop. Must be used from the UI thread."""

    def __init__(self) -> None:
        if QTimer is None:
            raise RuntimeError("PySide6 is not installed")
        self._live: set[object] = set()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer()
        timer.setSingleShot(True)

        def _fire() -> None:
            self._live.discard(timer)
            callback()

        timer.timeout.connect(_fire)
        # Qt would garbage-collect an unreferenced timer before it fires.
        self._live.add(timer)
        timer.start(max(0, int(delay_s * 1000)))
        return QtTimerHandle(timer, self._live.discard)
