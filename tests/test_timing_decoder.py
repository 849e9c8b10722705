from __future__ import annotations

import time

import pytest

from fakes import FakeScheduler
from models import DecoderState, SymbolEvent, TimingConfig
from scheduler import ThreadingScheduler
from timing_decoder import DAH, DIT, TimingDecoder, classify


def _make_decoder(dit_unit_ms: float = 150.0):
    scheduler = FakeScheduler()
    completions: list[str] = []
    symbols: list[str] = []
    decoder = TimingDecoder(
        timing=TimingConfig(dit_unit_ms=dit_unit_ms),
        scheduler=scheduler,
        clock=scheduler.clock,
        on_symbol=symbols.append,
        on_complete=completions.append,
    )
    return decoder, scheduler, completions, symbols


def _key(decoder: TimingDecoder, scheduler: FakeScheduler, duration_ms: float) -> None:
    decoder.press_start()
    scheduler.advance(duration_ms / 1000.0)
    decoder.press_end()


def test_timing_defaults_derive_from_dit_unit() -> None:
    timing = TimingConfig()
    assert timing.dit_unit_ms == 150
    assert timing.symbol_threshold_ms == 225
    assert timing.inter_symbol_gap_ms == 450


@pytest.mark.parametrize(
    "duration_ms, expected",
    [(0, DIT), (100, DIT), (224.9, DIT), (225, DAH), (300, DAH), (2000, DAH)],
)
def test_classify_threshold_boundary(duration_ms: float, expected: str) -> None:
    assert classify(duration_ms, TimingConfig().symbol_threshold_ms) == expected


def test_dit_dah_sequence_completes_as_letter_a() -> None:
    decoder, scheduler, completions, symbols = _make_decoder()

    _key(decoder, scheduler, 100)
    scheduler.advance(0.1)
    _key(decoder, scheduler, 400)
    assert decoder.state == DecoderState.AWAITING_COMPLETION
    assert completions == []

    scheduler.advance(0.45)

    assert symbols == [".", "-"]
    assert decoder.buffer == ".-"
    assert completions == [".-"]
    assert decoder.state == DecoderState.IDLE


def test_press_before_gap_does_not_complete_early() -> None:
    decoder, scheduler, completions, _ = _make_decoder()

    _key(decoder, scheduler, 100)
    scheduler.advance(0.3)  # under the 450ms gap
    decoder.press_start()
    scheduler.advance(0.3)  # quiet timer would have fired here if not cancelled
    assert completions == []
    decoder.press_end()
    assert decoder.buffer == ".-"

    scheduler.advance(0.45)
    assert completions == [".-"]


def test_buffer_is_kept_after_completion_until_reset() -> None:
    decoder, scheduler, completions, _ = _make_decoder()

    _key(decoder, scheduler, 50)
    scheduler.advance(1.0)

    assert completions == ["."]
    assert decoder.buffer == "."

    decoder.reset()
    assert decoder.buffer == ""
    assert decoder.state == DecoderState.IDLE


def test_stray_release_is_ignored() -> None:
    decoder, scheduler, completions, symbols = _make_decoder()

    decoder.press_end()
    scheduler.advance(1.0)

    assert decoder.buffer == ""
    assert symbols == []
    assert completions == []
    assert scheduler.handles == []


def test_repeated_press_start_keeps_original_start_time() -> None:
    decoder, scheduler, _, symbols = _make_decoder()

    decoder.press_start()
    scheduler.advance(0.2)
    decoder.press_start()  # auto-repeat
    scheduler.advance(0.2)
    decoder.press_end()

    assert symbols == ["-"]


def test_reset_mid_press_cancels_everything() -> None:
    decoder, scheduler, completions, _ = _make_decoder()

    _key(decoder, scheduler, 100)
    decoder.press_start()
    decoder.reset()
    decoder.press_end()  # release of the press that was reset
    scheduler.advance(2.0)

    assert decoder.buffer == ""
    assert completions == []
    assert scheduler.pending() == []


def test_reset_while_awaiting_completion_cancels_timer() -> None:
    decoder, scheduler, completions, _ = _make_decoder()

    _key(decoder, scheduler, 100)
    assert len(scheduler.pending()) == 1
    decoder.reset()

    assert scheduler.pending() == []
    scheduler.advance(1.0)
    assert completions == []


def test_stale_timer_callback_does_not_emit() -> None:
    decoder, scheduler, completions, _ = _make_decoder()

    _key(decoder, scheduler, 100)
    stale = scheduler.pending()[0]
    decoder.reset()
    stale.callback()  # a timer thread that was already running

    assert completions == []


def test_only_one_completion_timer_is_alive() -> None:
    decoder, scheduler, _, _ = _make_decoder()

    for _ in range(4):
        _key(decoder, scheduler, 50)
        scheduler.advance(0.05)

    assert len(scheduler.pending()) == 1
    assert decoder.buffer == "...."


def test_feed_classifies_symbol_events() -> None:
    decoder, scheduler, completions, _ = _make_decoder()

    assert decoder.feed(SymbolEvent(duration_ms=100)) == "."
    assert decoder.feed(SymbolEvent(duration_ms=300)) == "-"
    scheduler.advance(0.45)

    assert completions == [".-"]


def test_set_timing_changes_threshold() -> None:
    decoder, scheduler, _, symbols = _make_decoder()

    decoder.set_timing(TimingConfig(dit_unit_ms=60))
    _key(decoder, scheduler, 100)

    assert symbols == ["-"]


def test_completion_handler_can_be_replaced() -> None:
    decoder, scheduler, completions, _ = _make_decoder()
    replaced: list[str] = []
    decoder.set_completion_handler(replaced.append)

    _key(decoder, scheduler, 300)
    scheduler.advance(0.45)

    assert completions == []
    assert replaced == ["-"]


def test_threading_scheduler_fires_completion() -> None:
    completions: list[str] = []
    decoder = TimingDecoder(
        timing=TimingConfig(dit_unit_ms=10),
        scheduler=ThreadingScheduler(),
        on_complete=completions.append,
    )

    decoder.feed(SymbolEvent(duration_ms=1))
    deadline = time.time() + 2.0
    while not completions and time.time() < deadline:
        time.sleep(0.01)

    assert completions == ["."]
