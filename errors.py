"""Shared error codes and user-facing messages."""

from __future__ import annotations

NETWORK_ERROR = "NETWORK_ERROR"
AUTH_FAILED = "AUTH_FAILED"
NO_API_KEY = "NO_API_KEY"
INVALID_PAYLOAD = "INVALID_PAYLOAD"
GENERATOR_UNAVAILABLE = "GENERATOR_UNAVAILABLE"
HOTKEY_DISABLED = "HOTKEY_DISABLED"

ERROR_MESSAGES = {
    NETWORK_ERROR: "Failed to fetch word from API.",
    AUTH_FAILED: "Invalid API Key.",
    NO_API_KEY: "API key not configured.",
    INVALID_PAYLOAD: "Received invalid word format, using default.",
    GENERATOR_UNAVAILABLE: "Word generator is not installed.",
    HOTKEY_DISABLED: "Keyboard keyer is unavailable, use the on-screen key.",
}
