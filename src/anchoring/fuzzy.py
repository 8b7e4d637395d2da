"""Bounded approximate search primitives.

``fuzzy_find`` trusts long, stable leading substrings of a quote: trailing
edits to a message still resolve, and the search cost is bounded by the
window around the hint rather than by the document size.

``find_normalized`` is the last text-based rung of the resolution ladder. It
compares word characters only (case-folded, punctuation dropped, whitespace
collapsed) and maps the hit back to an original offset through the offset map
built during normalization.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from anchoring.config import DEFAULT_CONFIG

_WORD_CHAR_RE = re.compile(r"\w")
_MIN_NORMALIZED_QUOTE = 5


def find_all_matches(text: str, sub: str) -> list[int]:
    """Return every start offset of *sub* in *text*, overlaps included."""
    if not sub:
        return []
    positions: list[int] = []
    pos = text.find(sub)
    while pos != -1:
        positions.append(pos)
        pos = text.find(sub, pos + 1)
    return positions


def fuzzy_find(
    text: str,
    query: str,
    hint: int,
    window: int = DEFAULT_CONFIG.fuzzy_window,
    min_prefix: int = DEFAULT_CONFIG.fuzzy_min_prefix,
) -> int:
    """Find the longest leading part of *query* near *hint*.

    The search area is ``[hint - window, hint + len(query) + window]`` clipped
    to the text. Prefixes of *query* are tried from full length down to
    ``min(min_prefix, len(query))``.

    Returns:
        Absolute offset of the first prefix hit, or -1.
    """
    if not query or not text:
        return -1
    start = max(0, hint - window)
    end = min(len(text), hint + len(query) + window)
    if start >= end:
        return -1
    area = text[start:end]
    for length in range(len(query), min(min_prefix, len(query)) - 1, -1):
        idx = area.find(query[:length])
        if idx != -1:
            return start + idx
    return -1


def find_by_context(text: str, prefix: str, suffix: str) -> int:
    """Locate a span from legacy context alone.

    Returns the offset right after the first *prefix* occurrence, else the
    first *suffix* occurrence, else -1.
    """
    if prefix:
        pos = text.find(prefix)
        if pos != -1:
            return pos + len(prefix)
    if suffix:
        pos = text.find(suffix)
        if pos != -1:
            return pos
    return -1


@dataclass(frozen=True, slots=True)
class NormalizedSearchText:
    """Search-normalized text plus the original offset of every character."""

    text: str
    to_original: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.to_original) != len(self.text):
            raise ValueError("to_original length must equal len(text)")


def normalize_for_search(text: str) -> NormalizedSearchText:
    """Drop non-word characters, case-fold, collapse and trim whitespace."""
    chars: list[str] = []
    offsets: list[int] = []
    pending_space = -1
    for i, ch in enumerate(text or ""):
        if ch.isspace():
            if pending_space == -1:
                pending_space = i
            continue
        if not _WORD_CHAR_RE.match(ch):
            continue
        if pending_space != -1 and chars:
            chars.append(" ")
            offsets.append(pending_space)
        pending_space = -1
        for folded in ch.lower():
            chars.append(folded)
            offsets.append(i)
    return NormalizedSearchText(text="".join(chars), to_original=tuple(offsets))


def find_normalized(text: str, quote: str) -> int:
    """Locate *quote* in *text* ignoring case, punctuation and spacing.

    Returns:
        Original-text offset of the match, or -1 when there is no match or
        the normalized quote is too short to be trusted.
    """
    norm_quote = normalize_for_search(quote).text
    if len(norm_quote) < _MIN_NORMALIZED_QUOTE:
        return -1
    norm_text = normalize_for_search(text)
    pos = norm_text.text.find(norm_quote)
    if pos == -1:
        return -1
    return norm_text.to_original[pos]
