"""Practice word source backed by the DashScope text-generation API.

Every request resolves to a ``TargetResult``: a validated word on
success, or the fixed fallback word plus a user-facing warning when the
service is unreachable, rejects the key, or answers with something that
is not a single plain word.
"""

from __future__ import annotations

import logging
import os
import re
from http import HTTPStatus
from typing import Optional

from errors import (
    AUTH_FAILED,
    ERROR_MESSAGES,
    GENERATOR_UNAVAILABLE,
    INVALID_PAYLOAD,
    NETWORK_ERROR,
    NO_API_KEY,
)
from models import TargetResult

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

logger = logging.getLogger(__name__)

FALLBACK_TARGET = "HELLO"
PROMPT = (
    "Generate a single, common, simple English word between 4 and 8 letters long, "
    "suitable for Morse code practice. Only return the word itself, nothing else. "
    "Ensure it contains only standard English letters."
)

_WORD_RE = re.compile(r"[A-Z]+")


def validate_target(text: object) -> Optional[str]:
    """Return the upper-cased word, or None if the payload is not one plain word."""
    if not isinstance(text, str):
        return None
    word = text.strip().upper()
    if not _WORD_RE.fullmatch(word):
        return None
    return word


class DashscopeTargetSource:
    def __init__(
        self,
        api_key: str,
        model: str = "qwen-turbo",
        request_timeout_s: float = 10.0,
        fallback: str = FALLBACK_TARGET,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._request_timeout_s = request_timeout_s
        self._fallback = fallback

    def fetch_target(self) -> TargetResult:
        if dashscope is None:
            return self._fail(GENERATOR_UNAVAILABLE, "dashscope is not installed")

        api_key = self._api_key or os.getenv("DASHSCOPE_API_KEY", "")
        if not api_key:
            return self._fail(NO_API_KEY, "no API key configured")

        try:
            response = dashscope.Generation.call(
                api_key=api_key,
                model=self._model,
                messages=[{"role": "user", "content": PROMPT}],
                result_format="message",
                timeout=self._request_timeout_s,
            )
        except Exception as exc:
            return self._fail(self._classify_failure(str(exc)), str(exc))

        status = self._field(response, "status_code")
        if status is not None and status != HTTPStatus.OK:
            detail = f"{status} {self._field(response, 'code') or ''} {self._field(response, 'message') or ''}"
            return self._fail(self._classify_failure(detail), detail.strip())

        text = self._extract_text(response)
        word = validate_target(text)
        if word is None:
            return self._fail(INVALID_PAYLOAD, f"invalid word payload: {text!r}")

        logger.info("generated practice word: %s", word)
        return TargetResult(value=word)

    def _fail(self, code: str, detail: str) -> TargetResult:
        logger.warning("word generator failed (%s): %s", code, detail)
        return TargetResult(value=self._fallback, error=ERROR_MESSAGES[code], code=code)

    def _classify_failure(self, message: str) -> str:
        """Map an SDK/network failure message to an error code."""
        low = message.lower()
        if "401" in low or "auth" in low or "api key" in low or "api-key" in low:
            return AUTH_FAILED
        return NETWORK_ERROR

    def _extract_text(self, response: object) -> object:
        """Pull the message text out of a generation response."""
        output = self._field(response, "output")
        if not output:
            return None
        try:
            choices = self._field(output, "choices")
            if choices:
                message = self._field(choices[0], "message") or {}
                return self._field(message, "content")
            return self._field(output, "text")
        except (KeyError, IndexError, TypeError, AttributeError):
            return None

    @staticmethod
    def _field(obj: object, name: str) -> object:
        if isinstance(obj, dict):
            return obj.get(name)
        return getattr(obj, name, None)
