"""Core data models for the trainer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DecoderState(str, Enum):
    IDLE = "IDLE"
    PRESSING = "PRESSING"
    AWAITING_COMPLETION = "AWAITING_COMPLETION"


class SessionState(str, Enum):
    LOADING = "LOADING"
    PRESENTING = "PRESENTING"
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"
    COMPLETE = "COMPLETE"


class ValidationState(str, Enum):
    IDLE = "idle"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    HINTED = "hinted"


@dataclass(frozen=True)
class TimingConfig:
    """Keyer timing derived from a single dit unit."""

    dit_unit_ms: float = 150.0

    @property
    def symbol_threshold_ms(self) -> float:
        # Presses shorter than this are dits, the rest dahs.
        return self.dit_unit_ms * 1.5

    @property
    def inter_symbol_gap_ms(self) -> float:
        return self.dit_unit_ms * 3


@dataclass(frozen=True)
class SymbolEvent:
    duration_ms: float


@dataclass
class TargetResult:
    value: str
    error: Optional[str] = None
    code: str = ""


@dataclass
class SessionStats:
    correct: int = 0
    incorrect: int = 0
    hints: int = 0

    def summary(self) -> str:
        return f"Correct {self.correct} | Incorrect {self.incorrect} | Hints {self.hints}"
