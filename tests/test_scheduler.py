from __future__ import annotations

import threading

from scheduler import ThreadingScheduler


def test_threading_scheduler_runs_callback() -> None:
    fired = threading.Event()

    ThreadingScheduler().call_later(0.01, fired.set)

    assert fired.wait(timeout=2.0)


def test_threading_scheduler_cancel_prevents_callback() -> None:
    fired = threading.Event()

    handle = ThreadingScheduler().call_later(0.2, fired.set)
    handle.cancel()

    assert not fired.wait(timeout=0.4)
