"""Protocol interfaces used by the decoder and the practice sessions."""

from __future__ import annotations

from typing import Callable, Protocol

from models import TargetResult


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle: ...


class TargetSource(Protocol):
    def fetch_target(self) -> TargetResult: ...

