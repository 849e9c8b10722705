from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import hotkey
from hotkey import GlobalKeyerAdapter, normalize_key_name


def _start(adapter: GlobalKeyerAdapter, mock_keyboard: MagicMock):
    events: list[str] = []
    adapter.start(on_press=lambda: events.append("down"), on_release=lambda: events.append("up"))
    kwargs = mock_keyboard.Listener.call_args.kwargs
    return events, kwargs["on_press"], kwargs["on_release"]


@patch("hotkey.keyboard")
def test_auto_repeat_is_collapsed(mock_keyboard: MagicMock) -> None:
    adapter = GlobalKeyerAdapter(key_name="Key.space")
    events, press, release = _start(adapter, mock_keyboard)

    press("Key.space")
    press("Key.space")
    press("Key.space")
    release("Key.space")
    release("Key.space")

    assert events == ["down", "up"]
    mock_keyboard.Listener.return_value.start.assert_called_once()


@patch("hotkey.keyboard")
def test_other_keys_are_ignored(mock_keyboard: MagicMock) -> None:
    adapter = GlobalKeyerAdapter(key_name="k")
    events, press, release = _start(adapter, mock_keyboard)

    press("Key.space")
    press("'k'")
    release("'k'")

    assert events == ["down", "up"]


@patch("hotkey.keyboard")
def test_stop_stops_listener(mock_keyboard: MagicMock) -> None:
    adapter = GlobalKeyerAdapter()
    _start(adapter, mock_keyboard)

    adapter.stop()
    adapter.stop()

    mock_keyboard.Listener.return_value.stop.assert_called_once()


def test_missing_pynput_raises(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(hotkey, "keyboard", None)

    with pytest.raises(RuntimeError):
        GlobalKeyerAdapter().start(on_press=lambda: None, on_release=lambda: None)


@patch("hotkey.keyboard")
def test_key_names_match_case_insensitively(mock_keyboard: MagicMock) -> None:
    adapter = GlobalKeyerAdapter(key_name="K")
    events, press, release = _start(adapter, mock_keyboard)

    press("'k'")
    assert adapter.is_down
    release("'K'")

    assert events == ["down", "up"]
    assert not adapter.is_down


def test_normalize_key_name() -> None:
    assert normalize_key_name("'k'") == "k"
    assert normalize_key_name("Key.ctrl_r") == "key.ctrl_r"
    assert normalize_key_name(" Key.Space ") == "key.space"


def test_empty_key_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        GlobalKeyerAdapter(key_name="  ")
