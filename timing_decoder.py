"""Timing-based keyer decoder.

Turns press/release events into dits and dahs and reports the finished
character once the key has been quiet for one inter-symbol gap. The
decoder never clears its own buffer after a completion: the owner shows
the finished attempt, then calls ``reset()``.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from interfaces import Scheduler, TimerHandle
from models import DecoderState, SymbolEvent, TimingConfig
from scheduler import ThreadingScheduler

logger = logging.getLogger(__name__)

DIT = "."
DAH = "-"

SymbolCallback = Callable[[str], None]
CompleteCallback = Callable[[str], None]


def classify(duration_ms: float, threshold_ms: float) -> str:
    return DIT if duration_ms < threshold_ms else DAH


class TimingDecoder:
    def __init__(
        self,
        timing: TimingConfig | None = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        on_symbol: Optional[SymbolCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> None:
        self._timing = timing or TimingConfig()
        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock
        self._on_symbol = on_symbol
        self._on_complete = on_complete

        self._lock = threading.RLock()
        self._state = DecoderState.IDLE
        self._buffer = ""
        self._press_start: Optional[float] = None
        self._completion_timer: Optional[TimerHandle] = None
        # Bumped on every arm/cancel so a timer that already fired cannot emit.
        self._generation = 0

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def timing(self) -> TimingConfig:
        return self._timing

    def set_timing(self, timing: TimingConfig) -> None:
        with self._lock:
            self._timing = timing

    def set_completion_handler(self, callback: Optional[CompleteCallback]) -> None:
        with self._lock:
            self._on_complete = callback

    def press_start(self) -> None:
        with self._lock:
            if self._state == DecoderState.PRESSING:
                return
            self._cancel_completion()
            self._press_start = self._clock()
            self._state = DecoderState.PRESSING

    def press_end(self) -> None:
        with self._lock:
            if self._press_start is None:
                return
            duration_ms = (self._clock() - self._press_start) * 1000.0
            self._press_start = None
            self.feed(SymbolEvent(duration_ms=duration_ms))

    def feed(self, event: SymbolEvent) -> str:
        """Classify one completed press and wait for the next one."""
        with self._lock:
            symbol = classify(event.duration_ms, self._timing.symbol_threshold_ms)
            self._buffer += symbol
            self._press_start = None
            self._state = DecoderState.AWAITING_COMPLETION
            if self._on_symbol:
                self._on_symbol(symbol)
            self._arm_completion()
            return symbol

    def reset(self) -> None:
        with self._lock:
            self._cancel_completion()
            self._buffer = ""
            self._press_start = None
            self._state = DecoderState.IDLE

    def _arm_completion(self) -> None:
        self._cancel_completion()
        generation = self._generation
        self._completion_timer = self._scheduler.call_later(
            self._timing.inter_symbol_gap_ms / 1000.0,
            lambda: self._complete(generation),
        )

    def _cancel_completion(self) -> None:
        self._generation += 1
        timer = self._completion_timer
        self._completion_timer = None
        if timer is not None:
            timer.cancel()

    def _complete(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            if self._state != DecoderState.AWAITING_COMPLETION:
                return
            self._completion_timer = None
            self._state = DecoderState.IDLE
            code = self._buffer
            callback = self._on_complete
        if not code:
            return
        logger.debug("character complete: %s", code)
        if callback:
            callback(code)
