"""Practice window: key button, target display, feedback and hint."""

from __future__ import annotations

from typing import Optional

from models import ValidationState

try:
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import (
        QHBoxLayout,
        QLabel,
        QLineEdit,
        QProgressBar,
        QPushButton,
        QTabWidget,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QHBoxLayout = object  # type: ignore
    QLabel = object  # type: ignore
    QLineEdit = object  # type: ignore
    QProgressBar = object  # type: ignore
    QPushButton = object  # type: ignore
    QTabWidget = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

BORDER_COLORS = {
    ValidationState.IDLE: "#9ca3af",
    ValidationState.CORRECT: "#22c55e",
    ValidationState.INCORRECT: "#ef4444",
    ValidationState.HINTED: "#eab308",
}

INPUT_PLACEHOLDER = "Tap or hold the key..."


def _input_style(validation: ValidationState) -> str:
    return (
        f"border: 2px solid {BORDER_COLORS[validation]}; border-radius: 6px;"
        "padding: 8px; font-family: monospace; font-size: 24px;"
    )


def _feedback_style(validation: ValidationState) -> str:
    color = BORDER_COLORS[validation] if validation != ValidationState.IDLE else "#374151"
    return f"color: {color}; font-size: 16px; font-weight: bold;"


class KeyButton(QPushButton):
    def __init__(self) -> None:
        super().__init__("Tap / Hold")
        self.setMinimumHeight(64)
        self.setAutoRepeat(False)
        self.setStyleSheet(
            "QPushButton { background: #2563eb; color: white; font-size: 20px;"
            "border-radius: 32px; padding: 0 40px; }"
            "QPushButton:pressed { background: #dc2626; }"
        )


class LetterPanel(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.progress_label = QLabel("")
        self.progress_bar = QProgressBar()
        self.progress_bar.setTextVisible(False)
        self.stats_label = QLabel("")
        self.stats_label.setStyleSheet("color: #6b7280;")

        self.target_label = QLabel("")
        self.target_label.setAlignment(Qt.AlignCenter)
        self.target_label.setStyleSheet("font-size: 72px; font-weight: bold;")
        self.code_label = QLabel("")
        self.code_label.setAlignment(Qt.AlignCenter)
        self.code_label.setStyleSheet("font-family: monospace; color: #6b7280;")

        self.input_label = QLabel(INPUT_PLACEHOLDER)
        self.input_label.setStyleSheet(_input_style(ValidationState.IDLE))
        self.feedback_label = QLabel("")
        self.feedback_label.setAlignment(Qt.AlignCenter)

        self.key_button = KeyButton()
        self.hint_button = QPushButton("Hint")

        buttons = QHBoxLayout()
        buttons.addWidget(self.key_button, 1)
        buttons.addWidget(self.hint_button)

        layout = QVBoxLayout()
        layout.addWidget(self.progress_label)
        layout.addWidget(self.progress_bar)
        layout.addWidget(self.stats_label)
        layout.addWidget(self.target_label)
        layout.addWidget(self.code_label)
        layout.addWidget(self.input_label)
        layout.addLayout(buttons)
        layout.addWidget(self.feedback_label)
        self.setLayout(layout)

    def set_target(self, target: str, progress: tuple[int, int]) -> None:
        current, total = progress
        self.progress_label.setText(f"Learning ({current} / {total})")
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(current)
        self.target_label.setText(target)
        self.code_label.setText("")
        self.hint_button.setEnabled(True)
        self.key_button.setEnabled(True)
        self.set_buffer("")

    def set_buffer(self, buffer: str) -> None:
        self.input_label.setText(buffer or INPUT_PLACEHOLDER)

    def set_feedback(self, message: str, validation: ValidationState) -> None:
        self.feedback_label.setText(message)
        self.feedback_label.setStyleSheet(_feedback_style(validation))
        self.input_label.setStyleSheet(_input_style(validation))
        self.hint_button.setEnabled(validation != ValidationState.CORRECT)

    def show_hint(self, code: str) -> None:
        self.code_label.setText(f"({code})")

    def set_stats(self, text: str) -> None:
        self.stats_label.setText(text)

    def show_complete(self, progress: tuple[int, int]) -> None:
        current, total = progress
        self.progress_label.setText(f"Sequence Complete! ({current} / {total})")
        self.progress_bar.setValue(current)
        self.target_label.setText("")
        self.key_button.setEnabled(False)
        self.hint_button.setEnabled(False)


class WordPanel(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.warning_label = QLabel("")
        self.warning_label.setWordWrap(True)
        self.warning_label.setStyleSheet(
            "color: #b91c1c; background: #fee2e2; border: 1px solid #fca5a5; padding: 6px;"
        )
        self.warning_label.hide()
        self.stats_label = QLabel("")
        self.stats_label.setStyleSheet("color: #6b7280;")

        self.word_label = QLabel("")
        self.word_label.setAlignment(Qt.AlignCenter)
        self.word_label.setStyleSheet("font-size: 56px; font-weight: bold; letter-spacing: 6px;")

        self.morse_input = QLineEdit()
        self.morse_input.setPlaceholderText("Type . - and spaces here...")
        self.morse_input.setStyleSheet(_input_style(ValidationState.IDLE))
        self.attempt_label = QLabel("")
        self.attempt_label.setStyleSheet("font-family: monospace; color: #2563eb;")

        self.hint_label = QLabel("")
        self.hint_label.setStyleSheet(
            "font-family: monospace; font-size: 18px; background: #fef9c3; padding: 6px;"
        )
        self.hint_label.hide()
        self.feedback_label = QLabel("")
        self.feedback_label.setAlignment(Qt.AlignCenter)

        self.key_button = KeyButton()
        self.check_button = QPushButton("Check")
        self.hint_button = QPushButton("Hint")
        self.next_button = QPushButton("Next Word")

        buttons = QHBoxLayout()
        buttons.addWidget(self.check_button)
        buttons.addWidget(self.hint_button)
        buttons.addWidget(self.next_button)

        layout = QVBoxLayout()
        layout.addWidget(self.warning_label)
        layout.addWidget(self.stats_label)
        layout.addWidget(self.word_label)
        layout.addWidget(self.morse_input)
        layout.addWidget(self.attempt_label)
        layout.addWidget(self.key_button)
        layout.addLayout(buttons)
        layout.addWidget(self.hint_label)
        layout.addWidget(self.feedback_label)
        self.setLayout(layout)

    def set_loading(self) -> None:
        self.word_label.setText("LOADING...")
        for widget in (self.morse_input, self.check_button, self.hint_button, self.next_button):
            widget.setEnabled(False)

    def set_word(self, word: str, warning: Optional[str]) -> None:
        self.word_label.setText(word)
        if warning:
            self.warning_label.setText(f"Warning: {warning} Using default word.")
            self.warning_label.show()
        else:
            self.warning_label.hide()
        self.morse_input.clear()
        self.hint_label.hide()
        self.set_attempt("")
        for widget in (self.morse_input, self.check_button, self.hint_button, self.next_button):
            widget.setEnabled(True)

    def set_attempt(self, attempt: str) -> None:
        self.attempt_label.setText(attempt)

    def set_feedback(self, message: str, validation: ValidationState) -> None:
        self.feedback_label.setText(message)
        self.feedback_label.setStyleSheet(_feedback_style(validation))
        self.morse_input.setStyleSheet(_input_style(validation))
        solved = validation == ValidationState.CORRECT
        self.morse_input.setEnabled(not solved)
        self.check_button.setEnabled(not solved)
        self.hint_button.setEnabled(not solved and self.hint_label.isHidden())

    def show_hint(self, code: str) -> None:
        self.hint_label.setText(f"Hint (Correct Morse): {code}")
        self.hint_label.show()
        self.hint_button.setEnabled(False)

    def set_stats(self, text: str) -> None:
        self.stats_label.setText(text)


class TrainerWindow(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("Morse Trainer")
        self.setMinimumWidth(560)

        self.letters = LetterPanel()
        self.words = WordPanel()
        self.tabs = QTabWidget()
        self.tabs.addTab(self.letters, "Learn Letters")
        self.tabs.addTab(self.words, "Learn Words")

        self.api_key_button = QPushButton("Set API Key")
        self.keyer_button = QPushButton("Set Keyer Key")
        self.speed_button = QPushButton("Set Dit Length")
        self.sequence_button = QPushButton("Set Sequence")
        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #b45309;")

        settings = QHBoxLayout()
        settings.addWidget(self.api_key_button)
        settings.addWidget(self.keyer_button)
        settings.addWidget(self.speed_button)
        settings.addWidget(self.sequence_button)

        layout = QVBoxLayout()
        layout.addWidget(self.tabs)
        layout.addLayout(settings)
        layout.addWidget(self.status_label)
        self.setLayout(layout)

    def words_tab_active(self) -> bool:
        return self.tabs.currentWidget() is self.words

    def show_status(self, text: str) -> None:
        self.status_label.setText(text)
