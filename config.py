"""Simple JSON-based config store."""

from __future__ import annotations

import json
from pathlib import Path

DEFAULT_HOTKEY = "Key.ctrl_r"
DEFAULT_DIT_UNIT_MS = 150.0
DEFAULT_MODEL = "qwen-turbo"
SEQUENCES = ("letters", "digits")


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "morse_trainer" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self) -> str:
        data = self._read_all()
        return str(data.get("api_key", ""))

    def set_api_key(self, key: str) -> None:
        self._update("api_key", key)

    def get_hotkey(self) -> str:
        data = self._read_all()
        return str(data.get("hotkey", DEFAULT_HOTKEY)).strip() or DEFAULT_HOTKEY

    def set_hotkey(self, hotkey: str) -> None:
        self._update("hotkey", hotkey)

    def get_dit_unit_ms(self) -> float:
        data = self._read_all()
        try:
            value = float(data.get("dit_unit_ms", DEFAULT_DIT_UNIT_MS))
        except (TypeError, ValueError):
            return DEFAULT_DIT_UNIT_MS
        return value if value > 0 else DEFAULT_DIT_UNIT_MS

    def set_dit_unit_ms(self, value: float) -> None:
        if value <= 0:
            raise ValueError("dit unit must be positive")
        self._update("dit_unit_ms", float(value))

    def get_model(self) -> str:
        data = self._read_all()
        return str(data.get("model", DEFAULT_MODEL)) or DEFAULT_MODEL

    def get_sequence(self) -> str:
        data = self._read_all()
        value = str(data.get("sequence", SEQUENCES[0]))
        return value if value in SEQUENCES else SEQUENCES[0]

    def set_sequence(self, name: str) -> None:
        if name not in SEQUENCES:
            raise ValueError(f"unknown sequence: {name}")
        self._update("sequence", name)

    def _update(self, key: str, value: object) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
