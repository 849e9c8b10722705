"""Application entrypoint."""

from __future__ import annotations

import logging
import sys

from config import JsonConfigStore
from errors import ERROR_MESSAGES, HOTKEY_DISABLED
from hotkey import GlobalKeyerAdapter
from models import SessionState, TimingConfig, ValidationState
from morse_table import SEQUENCES
from practice_session import LetterPracticeSession, WordPracticeSession
from scheduler import QtScheduler
from target_source import DashscopeTargetSource
from timing_decoder import TimingDecoder
from trainer_window import TrainerWindow

try:
    from PySide6.QtCore import QObject, Signal
    from PySide6.QtWidgets import QApplication, QInputDialog, QMessageBox
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)


class UIBridge(QObject):
    key_down_signal = Signal()
    key_up_signal = Signal()
    call_signal = Signal(object)  # zero-arg callable to run on the UI thread


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.config_store = JsonConfigStore()
        self.scheduler = QtScheduler()
        self.window = TrainerWindow()
        self.ui = UIBridge()
        self.ui.key_down_signal.connect(self._on_keyer_down)
        self.ui.key_up_signal.connect(self._on_keyer_up)
        self.ui.call_signal.connect(lambda fn: fn())

        timing = TimingConfig(dit_unit_ms=self.config_store.get_dit_unit_ms())
        self.letter_decoder = TimingDecoder(
            timing=timing,
            scheduler=self.scheduler,
            on_symbol=lambda _: self.window.letters.set_buffer(self.letter_decoder.buffer),
        )
        self.word_decoder = TimingDecoder(
            timing=timing,
            scheduler=self.scheduler,
            on_symbol=self._on_word_symbol,
        )

        letters = self.window.letters
        self.letter_session = LetterPracticeSession(
            decoder=self.letter_decoder,
            targets=SEQUENCES[self.config_store.get_sequence()],
            scheduler=self.scheduler,
            on_state_change=self._on_letter_state,
            on_target_change=lambda t: letters.set_target(t, self.letter_session.progress),
            on_feedback=self._on_letter_feedback,
        )
        letters.set_target(self.letter_session.target or "", self.letter_session.progress)
        letters.set_stats(self.letter_session.stats.summary())

        words = self.window.words
        self.word_session = WordPracticeSession(
            decoder=self.word_decoder,
            target_source=self._make_target_source(),
            scheduler=self.scheduler,
            dispatch=self.ui.call_signal.emit,
            on_state_change=self._on_word_state,
            on_target_change=lambda t: words.set_word(t, self.word_session.warning),
            on_feedback=self._on_word_feedback,
            on_attempt=words.set_attempt,
        )
        words.set_loading()
        words.set_stats(self.word_session.stats.summary())

        self._bind_widgets()
        self.keyer = GlobalKeyerAdapter(key_name=self.config_store.get_hotkey())

    def _bind_widgets(self) -> None:
        letters = self.window.letters
        letters.key_button.pressed.connect(self.letter_decoder.press_start)
        letters.key_button.released.connect(self.letter_decoder.press_end)
        letters.hint_button.clicked.connect(self._on_letter_hint)

        words = self.window.words
        words.key_button.pressed.connect(self.word_decoder.press_start)
        words.key_button.released.connect(self.word_decoder.press_end)
        words.check_button.clicked.connect(lambda: self.word_session.submit(words.morse_input.text()))
        words.morse_input.returnPressed.connect(lambda: self.word_session.submit(words.morse_input.text()))
        words.hint_button.clicked.connect(self._on_word_hint)
        words.next_button.clicked.connect(self.word_session.load_next)

        self.window.api_key_button.clicked.connect(self._set_api_key)
        self.window.keyer_button.clicked.connect(self._set_keyer_key)
        self.window.speed_button.clicked.connect(self._set_dit_unit)
        self.window.sequence_button.clicked.connect(self._set_sequence)

    def _make_target_source(self) -> DashscopeTargetSource:
        return DashscopeTargetSource(
            api_key=self.config_store.get_api_key(),
            model=self.config_store.get_model(),
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _set_api_key(self) -> None:
        value, ok = QInputDialog.getText(self.window, "API Key", "DashScope API Key")
        if not ok:
            return
        self.config_store.set_api_key(value)
        self.word_session.set_target_source(self._make_target_source())
        QMessageBox.information(self.window, "Saved", "API Key saved and applied.")

    def _set_keyer_key(self) -> None:
        value, ok = QInputDialog.getText(
            self.window, "Keyer Key", "Use pynput key format, e.g. Key.ctrl_r"
        )
        if not ok or not value.strip():
            return
        self.config_store.set_hotkey(value)
        self.keyer.stop()
        self.keyer = GlobalKeyerAdapter(key_name=value)
        self._start_keyer()

    def _set_dit_unit(self) -> None:
        current = self.config_store.get_dit_unit_ms()
        value, ok = QInputDialog.getInt(
            self.window, "Dit Length", "Dit unit in milliseconds", int(current), 40, 1000
        )
        if not ok:
            return
        self.config_store.set_dit_unit_ms(value)
        timing = TimingConfig(dit_unit_ms=float(value))
        self.letter_decoder.set_timing(timing)
        self.word_decoder.set_timing(timing)

    def _set_sequence(self) -> None:
        names = list(SEQUENCES)
        current = names.index(self.config_store.get_sequence())
        name, ok = QInputDialog.getItem(
            self.window, "Sequence", "Practice sequence", names, current, False
        )
        if not ok or not name:
            return
        self.config_store.set_sequence(name)
        self.letter_session.replace_targets(SEQUENCES[name])

    # ------------------------------------------------------------------
    # Session callbacks (UI thread)
    # ------------------------------------------------------------------

    def _on_letter_state(self, from_state: SessionState, to_state: SessionState) -> None:
        if to_state == SessionState.COMPLETE:
            self.window.letters.show_complete(self.letter_session.progress)

    def _on_letter_feedback(self, message: str, validation: ValidationState) -> None:
        letters = self.window.letters
        letters.set_feedback(message, validation)
        letters.set_stats(self.letter_session.stats.summary())
        if validation == ValidationState.IDLE:
            letters.set_buffer(self.letter_decoder.buffer)

    def _on_letter_hint(self) -> None:
        code = self.letter_session.request_hint()
        if code:
            self.window.letters.show_hint(code)

    def _on_word_state(self, from_state: SessionState, to_state: SessionState) -> None:
        if to_state == SessionState.LOADING:
            self.window.words.set_loading()

    def _on_word_feedback(self, message: str, validation: ValidationState) -> None:
        words = self.window.words
        words.set_feedback(message, validation)
        words.set_stats(self.word_session.stats.summary())

    def _on_word_symbol(self, _symbol: str) -> None:
        words = self.window.words
        words.set_attempt(" ".join(filter(None, [self.word_session.attempt, self.word_decoder.buffer])))

    def _on_word_hint(self) -> None:
        code = self.word_session.request_hint()
        if code:
            self.window.words.show_hint(code)

    # ------------------------------------------------------------------
    # Keyer (pynput thread -> signals -> UI thread)
    # ------------------------------------------------------------------

    def _active_decoder(self) -> TimingDecoder:
        if self.window.words_tab_active():
            return self.word_decoder
        return self.letter_decoder

    def _on_keyer_down(self) -> None:
        self._active_decoder().press_start()

    def _on_keyer_up(self) -> None:
        # Release both so switching tabs mid-press cannot strand a press.
        self.letter_decoder.press_end()
        self.word_decoder.press_end()

    def _start_keyer(self) -> None:
        try:
            self.keyer.start(
                on_press=self.ui.key_down_signal.emit,
                on_release=self.ui.key_up_signal.emit,
            )
            self.window.show_status("")
        except Exception as exc:
            logger.warning("keyer disabled: %s", exc)
            self.window.show_status(f"{ERROR_MESSAGES[HOTKEY_DISABLED]} ({exc})")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self._start_keyer()
        self.window.show()
        self.word_session.load_next()
        self.app.aboutToQuit.connect(self.shutdown)
        return self.app.exec()

    def shutdown(self) -> None:
        self.keyer.stop()
        self.letter_session.close()
        self.word_session.close()


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
