"""International Morse code lookup.

The table is built once at import and exposed read-only. Encoding a word
drops characters that have no code (accented letters, emoji, spaces);
this is a known limitation kept as-is for now.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN = "?"
WORD_SEPARATOR = "/"

MORSE_CODE: Mapping[str, str] = MappingProxyType({
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..",
    "1": ".----", "2": "..---", "3": "...--", "4": "....-", "5": ".....",
    "6": "-....", "7": "--...", "8": "---..", "9": "----.", "0": "-----",
    ".": ".-.-.-", ",": "--..--", "?": "..--..", "'": ".----.", "!": "-.-.--",
    "/": "-..-.", "(": "-.--.", ")": "-.--.-", "&": ".-...", ":": "---...",
    ";": "-.-.-.", "=": "-...-", "+": ".-.-.", "-": "-....-", "_": "..--.-",
    '"': ".-..-.", "$": "...-..-", "@": ".--.-.",
})

MORSE_DECODE: Mapping[str, str] = MappingProxyType({v: k for k, v in MORSE_CODE.items()})

LETTERS = tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
DIGITS = tuple("0123456789")
SEQUENCES: Mapping[str, tuple] = MappingProxyType({"letters": LETTERS, "digits": DIGITS})


def encode(char: str) -> Optional[str]:
    """Return the code for a single character, or None if it has none."""
    return MORSE_CODE.get(char.upper())


def decode(code: str) -> str:
    return MORSE_DECODE.get(code, UNKNOWN)


def word_to_morse(word: str) -> str:
    """Encode a word with one space between character codes."""
    if not word:
        return ""
    codes = (encode(char) for char in word)
    return " ".join(code for code in codes if code)


def morse_to_word(morse: str) -> str:
    chars = []
    for token in morse.split():
        chars.append(" " if token == WORD_SEPARATOR else decode(token))
    return "".join(chars)
