"""State-machine based practice sessions.

``LetterPracticeSession`` walks a fixed sequence of characters keyed one
at a time. ``WordPracticeSession`` practises words supplied by a target
source, typed as dots and dashes or keyed letter by letter.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

from errors import ERROR_MESSAGES, NETWORK_ERROR
from interfaces import Scheduler, TargetSource, TimerHandle
from models import SessionState, SessionStats, TargetResult, ValidationState
from morse_table import LETTERS, encode, word_to_morse
from scheduler import ThreadingScheduler
from target_source import FALLBACK_TARGET
from timing_decoder import TimingDecoder

logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionState, SessionState], None]
TargetCallback = Callable[[str], None]
FeedbackCallback = Callable[[str, ValidationState], None]
AttemptCallback = Callable[[str], None]

CORRECT_MESSAGE = "Correct!"
SEQUENCE_DONE_MESSAGE = "Congratulations! You completed the sequence."
WORD_INCORRECT_MESSAGE = "Incorrect. Try again or use the hint."


def _spawn_daemon(fn: Callable[[], None]) -> None:
    threading.Thread(target=fn, daemon=True).start()


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class _SessionBase:
    def __init__(
        self,
        decoder: TimingDecoder,
        scheduler: Optional[Scheduler],
        on_state_change: Optional[StateCallback],
        on_target_change: Optional[TargetCallback],
        on_feedback: Optional[FeedbackCallback],
    ) -> None:
        self._decoder = decoder
        self._scheduler = scheduler or ThreadingScheduler()
        self._on_state_change = on_state_change
        self._on_target_change = on_target_change
        self._on_feedback = on_feedback

        self._lock = threading.RLock()
        self._state = SessionState.PRESENTING
        self._validation = ValidationState.IDLE
        self._feedback = ""
        self._hint: Optional[str] = None
        self._stats = SessionStats()
        self._delay_timer: Optional[TimerHandle] = None
        self._delay_generation = 0

        decoder.set_completion_handler(self.handle_code)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def validation(self) -> ValidationState:
        return self._validation

    @property
    def feedback(self) -> str:
        return self._feedback

    @property
    def hint(self) -> Optional[str]:
        return self._hint

    @property
    def stats(self) -> SessionStats:
        return self._stats

    def handle_code(self, code: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        with self._lock:
            self._cancel_delay()
            self._decoder.reset()

    def _arm_delay(self, delay_s: float, action: Callable[[], None]) -> None:
        self._cancel_delay()
        generation = self._delay_generation

        def _fire() -> None:
            with self._lock:
                if generation != self._delay_generation:
                    return
                self._delay_timer = None
                action()

        self._delay_timer = self._scheduler.call_later(delay_s, _fire)

    def _cancel_delay(self) -> None:
        self._delay_generation += 1
        timer = self._delay_timer
        self._delay_timer = None
        if timer is not None:
            timer.cancel()

    def _set_feedback(self, message: str, validation: ValidationState) -> None:
        self._feedback = message
        self._validation = validation
        if self._on_feedback:
            self._on_feedback(message, validation)

    def _transition(self, to_state: SessionState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        if self._on_state_change:
            self._on_state_change(from_state, to_state)

    def _announce_target(self, target: str) -> None:
        if self._on_target_change:
            self._on_target_change(target)


class LetterPracticeSession(_SessionBase):
    def __init__(
        self,
        decoder: TimingDecoder,
        targets: Sequence[str] = LETTERS,
        scheduler: Optional[Scheduler] = None,
        advance_delay_s: float = 0.8,
        retry_delay_s: float = 1.5,
        on_state_change: Optional[StateCallback] = None,
        on_target_change: Optional[TargetCallback] = None,
        on_feedback: Optional[FeedbackCallback] = None,
    ) -> None:
        super().__init__(decoder, scheduler, on_state_change, on_target_change, on_feedback)
        self._advance_delay_s = advance_delay_s
        self._retry_delay_s = retry_delay_s
        self._targets: tuple[str, ...] = ()
        self._index = 0
        self._install(targets, notify=False)

    @property
    def target(self) -> Optional[str]:
        if self._state == SessionState.COMPLETE:
            return None
        return self._targets[self._index]

    @property
    def expected(self) -> Optional[str]:
        target = self.target
        return encode(target) if target else None

    @property
    def progress(self) -> tuple[int, int]:
        total = len(self._targets)
        if self._state == SessionState.COMPLETE:
            return total, total
        return self._index + 1, total

    def replace_targets(self, targets: Sequence[str]) -> None:
        with self._lock:
            self._install(targets)

    def handle_code(self, code: str) -> None:
        with self._lock:
            if self._state != SessionState.PRESENTING:
                return
            expected = self.expected
            logger.debug("letter attempt %s, expected %s", code, expected)
            if code == expected:
                self._stats.correct += 1
                self._transition(SessionState.CORRECT)
                self._set_feedback(CORRECT_MESSAGE, ValidationState.CORRECT)
                self._arm_delay(self._advance_delay_s, self._advance)
            else:
                self._stats.incorrect += 1
                self._transition(SessionState.INCORRECT)
                self._set_feedback(f"Incorrect. Expected: {expected}", ValidationState.INCORRECT)
                self._arm_delay(self._retry_delay_s, self._retry)

    def request_hint(self) -> Optional[str]:
        with self._lock:
            if self._state in (SessionState.CORRECT, SessionState.COMPLETE):
                return None
            self._stats.hints += 1
            self._hint = self.expected
            self._set_feedback("", ValidationState.HINTED)
            return self._hint

    def _install(self, targets: Sequence[str], notify: bool = True) -> None:
        items = tuple(t.upper() for t in targets if encode(t))
        if not items:
            raise ValueError("target sequence has no encodable characters")
        self._cancel_delay()
        self._targets = items
        self._index = 0
        self._stats = SessionStats()
        self._present_current(notify)

    def _advance(self) -> None:
        if self._index < len(self._targets) - 1:
            self._index += 1
            self._present_current()
            return
        self._decoder.reset()
        self._hint = None
        self._transition(SessionState.COMPLETE)
        self._set_feedback(SEQUENCE_DONE_MESSAGE, ValidationState.CORRECT)

    def _retry(self) -> None:
        self._decoder.reset()
        self._set_feedback("", ValidationState.IDLE)
        self._transition(SessionState.PRESENTING)

    def _present_current(self, notify: bool = True) -> None:
        self._decoder.reset()
        self._hint = None
        if not notify:
            # Constructor path: the owner reads the first target itself.
            self._state = SessionState.PRESENTING
            self._feedback = ""
            self._validation = ValidationState.IDLE
            return
        self._set_feedback("", ValidationState.IDLE)
        self._transition(SessionState.PRESENTING)
        self._announce_target(self._targets[self._index])


class WordPracticeSession(_SessionBase):
    def __init__(
        self,
        decoder: TimingDecoder,
        target_source: TargetSource,
        scheduler: Optional[Scheduler] = None,
        retry_delay_s: float = 1.5,
        auto_advance_s: Optional[float] = None,
        spawn: Callable[[Callable[[], None]], None] = _spawn_daemon,
        dispatch: Callable[[Callable[[], None]], None] = _call_now,
        on_state_change: Optional[StateCallback] = None,
        on_target_change: Optional[TargetCallback] = None,
        on_feedback: Optional[FeedbackCallback] = None,
        on_attempt: Optional[AttemptCallback] = None,
        on_warning: Optional[Callable[[Optional[str]], None]] = None,
    ) -> None:
        super().__init__(decoder, scheduler, on_state_change, on_target_change, on_feedback)
        self._target_source = target_source
        self._retry_delay_s = retry_delay_s
        self._auto_advance_s = auto_advance_s
        self._spawn = spawn
        self._dispatch = dispatch
        self._on_attempt = on_attempt
        self._on_warning = on_warning

        self._request_id = 0
        self._target = ""
        self._expected = ""
        self._warning: Optional[str] = None
        self._letters: list[str] = []
        self._state = SessionState.LOADING

    @property
    def target(self) -> str:
        return self._target

    @property
    def expected(self) -> str:
        return self._expected

    @property
    def warning(self) -> Optional[str]:
        return self._warning

    @property
    def attempt(self) -> str:
        return " ".join(self._letters)

    def set_target_source(self, target_source: TargetSource) -> None:
        with self._lock:
            self._target_source = target_source

    @property
    def is_loading(self) -> bool:
        return self._state == SessionState.LOADING

    def load_next(self) -> int:
        with self._lock:
            self._cancel_delay()
            self._request_id += 1
            request_id = self._request_id
            self._transition(SessionState.LOADING)

        def _work() -> None:
            try:
                result = self._target_source.fetch_target()
            except Exception:
                logger.exception("target source failed")
                result = TargetResult(
                    value=FALLBACK_TARGET,
                    error=ERROR_MESSAGES[NETWORK_ERROR],
                    code=NETWORK_ERROR,
                )
            self._dispatch(lambda: self._deliver(request_id, result))

        self._spawn(_work)
        return request_id

    def submit(self, text: str) -> Optional[bool]:
        with self._lock:
            if self._state in (SessionState.LOADING, SessionState.CORRECT):
                return None
            cleaned = " ".join(text.split())
            if not cleaned:
                return None
            self._cancel_delay()
            logger.debug("word attempt %r, expected %r", cleaned, self._expected)
            if cleaned == self._expected:
                self._stats.correct += 1
                self._transition(SessionState.CORRECT)
                self._set_feedback(CORRECT_MESSAGE, ValidationState.CORRECT)
                if self._auto_advance_s is not None:
                    self._arm_delay(self._auto_advance_s, self.load_next)
                return True
            self._stats.incorrect += 1
            self._transition(SessionState.INCORRECT)
            self._set_feedback(WORD_INCORRECT_MESSAGE, ValidationState.INCORRECT)
            return False

    def handle_code(self, code: str) -> None:
        with self._lock:
            if self._state not in (SessionState.PRESENTING, SessionState.INCORRECT):
                return
            if self._state == SessionState.INCORRECT:
                self._cancel_delay()
                self._clear_attempt()
                self._transition(SessionState.PRESENTING)
            self._letters.append(code)
            self._decoder.reset()
            if self._on_attempt:
                self._on_attempt(self.attempt)
            if len(self._letters) < len(self._expected.split()):
                return
            if self.submit(self.attempt) is False:
                self._arm_delay(self._retry_delay_s, self._retry)

    def request_hint(self) -> Optional[str]:
        with self._lock:
            if self._state in (SessionState.LOADING, SessionState.CORRECT):
                return None
            self._stats.hints += 1
            self._hint = self._expected
            self._set_feedback("", ValidationState.HINTED)
            return self._hint

    def close(self) -> None:
        with self._lock:
            # Any response still in flight is now stale.
            self._request_id += 1
            super().close()

    def _deliver(self, request_id: int, result: TargetResult) -> None:
        with self._lock:
            if request_id != self._request_id:
                logger.debug("dropping stale target response %d", request_id)
                return
            self._target = result.value
            self._expected = word_to_morse(result.value)
            self._warning = result.error
            self._hint = None
            self._clear_attempt()
            self._set_feedback("", ValidationState.IDLE)
            self._transition(SessionState.PRESENTING)
            if self._on_warning:
                self._on_warning(result.error)
            self._announce_target(self._target)

    def _retry(self) -> None:
        self._clear_attempt()
        self._set_feedback("", ValidationState.IDLE)
        self._transition(SessionState.PRESENTING)

    def _clear_attempt(self) -> None:
        self._letters = []
        self._decoder.reset()
        if self._on_attempt:
            self._on_attempt("")
