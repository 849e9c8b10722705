from __future__ import annotations

from pathlib import Path

import pytest

from config import JsonConfigStore


def test_config_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    assert store.get_api_key() == ""
    assert store.get_hotkey() == "Key.ctrl_r"
    assert store.get_dit_unit_ms() == 150.0
    assert store.get_model() == "qwen-turbo"
    assert store.get_sequence() == "letters"

    store.set_api_key("abc")
    store.set_hotkey("Key.space")
    store.set_dit_unit_ms(80)
    store.set_sequence("digits")

    reloaded = JsonConfigStore(path=path)
    assert reloaded.get_api_key() == "abc"
    assert reloaded.get_hotkey() == "Key.space"
    assert reloaded.get_dit_unit_ms() == 80.0
    assert reloaded.get_sequence() == "digits"


def test_config_invalid_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_api_key() == ""
    assert store.get_hotkey() == "Key.ctrl_r"


def test_config_bad_values_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"dit_unit_ms": "fast", "sequence": "runes", "hotkey": " "}', encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_dit_unit_ms() == 150.0
    assert store.get_sequence() == "letters"
    assert store.get_hotkey() == "Key.ctrl_r"


def test_config_rejects_invalid_settings(tmp_path: Path) -> None:
    store = JsonConfigStore(path=tmp_path / "config.json")

    with pytest.raises(ValueError):
        store.set_dit_unit_ms(0)
    with pytest.raises(ValueError):
        store.set_sequence("runes")
