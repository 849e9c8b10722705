"""Global keyboard keyer based on pynput.

Any single key can act as the straight key. pynput stringifies
character keys as ``'k'`` and special keys as ``Key.space``, so both the
configured name and incoming keys are reduced to the same lower-case
form before comparing. Holding a key makes the OS send repeated press
events; only the first press and the matching release are reported.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "Key.ctrl_r"


def normalize_key_name(name: object) -> str:
    return str(name).strip().strip("'").lower()


class GlobalKeyerAdapter:
    def __init__(self, key_name: str = DEFAULT_KEY) -> None:
        self._target = normalize_key_name(key_name)
        if not self._target:
            raise ValueError("keyer key name is empty")
        self._listener: Optional[object] = None
        self._key_down = False
        self._lock = threading.Lock()
        self._on_press: Callable[[], None] = lambda: None
        self._on_release: Callable[[], None] = lambda: None

    @property
    def is_down(self) -> bool:
        return self._key_down

    def start(self, on_press: Callable[[], None], on_release: Callable[[], None]) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")
        self._on_press = on_press
        self._on_release = on_release
        self._listener = keyboard.Listener(
            on_press=self._handle_press,
            on_release=self._handle_release,
        )
        self._listener.start()
        logger.info("keyer listening on %s", self._target)

    def stop(self) -> None:
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.stop()
        with self._lock:
            self._key_down = False

    def _handle_press(self, key: object) -> None:
        if normalize_key_name(key) != self._target:
            return
        with self._lock:
            if self._key_down:
                return
            self._key_down = True
        self._on_press()

    def _handle_release(self, key: object) -> None:
        if normalize_key_name(key) != self._target:
            return
        with self._lock:
            if not self._key_down:
                return
            self._key_down = False
        self._on_release()
