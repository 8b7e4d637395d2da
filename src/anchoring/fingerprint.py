"""Message fingerprints.

A fingerprint answers "is this the same message instance" cheaply. It hashes
the head, the tail and the length of the whitespace-normalized text, so edits
in the middle of a long message can go unnoticed. It is not a locator and not
collision resistant.
"""

from __future__ import annotations

import re

_SAMPLE_CHARS = 100
# ECMAScript whitespace and line terminators. Python's str.isspace() differs
# (it skips U+FEFF and includes U+001C..U+001F), which would change stored
# fingerprints.
_WHITESPACE = "\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
_WHITESPACE_RUN_RE = re.compile(f"[{_WHITESPACE}]+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def fingerprint(text: str) -> str:
    """Return a short base-36 identity string for *text*.

    Args:
        text: Raw message text. Empty input yields an empty fingerprint.

    Returns:
        ``abs(h)`` in base 36, where ``h`` is a signed 32-bit polynomial
        rolling hash (``h = h*31 + ord(ch)``) over
        ``head|tail|length`` of the normalized text.
    """
    if not text:
        return ""
    normalized = _WHITESPACE_RUN_RE.sub(" ", text).strip(" ")
    sample = (
        f"{normalized[:_SAMPLE_CHARS]}|{normalized[-_SAMPLE_CHARS:]}|{len(normalized)}"
    )
    h = 0
    for ch in sample:
        h = _to_signed32(h * 31 + ord(ch))
    return _to_base36(abs(h))
