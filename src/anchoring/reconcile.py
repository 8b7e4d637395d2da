"""Map a raw selected string onto canonical text.

The host reports selected text exactly as rendered, which can include
duplicates (an equation's MathML copy next to its visible HTML) that canonical
text leaves out. Reconciliation keeps the longest leading part of the raw
string that canonical text contains verbatim, then tries to recover how far
the selection really reached by locating fragments of the unmatched tail in a
short window after that prefix.
"""

from __future__ import annotations

import re
import unicodedata

from anchoring.config import DEFAULT_CONFIG
from anchoring.expansion import char_class
from anchoring.fuzzy import find_all_matches

_WORD_RE = re.compile(r"\w{3,}")
_MIN_SUFFIX = 3
_SYMBOLIC_RATIO = 0.25


def _is_meaningful(ch: str) -> bool:
    return char_class(ch) in ("word", "ideographic") or unicodedata.category(ch).startswith("S")


def meaningful_count(text: str) -> int:
    """Number of word or symbol characters in *text*."""
    return sum(1 for ch in text if _is_meaningful(ch))


def longest_canonical_prefix(raw: str, canonical: str) -> int:
    """Length of the longest prefix of *raw* occurring in *canonical*."""
    # Occurrence is monotone in prefix length, so bisect on it.
    lo, hi = 0, len(raw)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if raw[:mid] in canonical:
            lo = mid
        else:
            hi = mid - 1
    return lo


def _suffix_extension(trailing: str, window_text: str) -> int | None:
    tail = trailing.strip()
    for length in range(len(tail), _MIN_SUFFIX - 1, -1):
        suffix = tail[-length:]
        if meaningful_count(suffix) < 2:
            continue
        idx = window_text.find(suffix)
        if idx != -1:
            return idx + length
    return None


def _word_anchor_extension(trailing: str, window_text: str) -> int | None:
    for word in reversed(_WORD_RE.findall(trailing)):
        if window_text.count(word) != 1:
            continue
        return window_text.find(word) + len(word)
    return None


def _is_symbolic(trailing: str) -> bool:
    compact = "".join(trailing.split())
    if not compact:
        return False
    if any(unicodedata.category(ch) == "Sm" for ch in compact):
        return True
    symbols = sum(1 for ch in compact if not ch.isalnum())
    return symbols / len(compact) >= _SYMBOLIC_RATIO


def _symbolic_extension(trailing: str, window_text: str) -> int | None:
    if not window_text or not _is_symbolic(trailing):
        return None
    # Duplicated renderings report each symbol about twice.
    compact = "".join(trailing.split())
    estimate = min(len(window_text), max(1, len(compact) // 2))
    for distance in range(len(window_text) + 1):
        for candidate in (estimate + distance, estimate - distance):
            if candidate <= 0 or candidate > len(window_text):
                continue
            if candidate == len(window_text) or char_class(window_text[candidate]) in ("space", "boundary"):
                return candidate
    return None


def reconcile_selection(
    raw: str,
    canonical: str,
    hint: int,
    window: int = DEFAULT_CONFIG.reconcile_window,
) -> tuple[int, int] | None:
    """Locate a raw selected string in canonical text.

    Args:
        raw: Trimmed selected text as rendered.
        canonical: Canonical message text.
        hint: Canonical offset of the selection start; picks among repeated
            prefix occurrences.
        window: How far past the matched prefix the tail may reach.

    Returns:
        ``(start, end)`` in canonical text, or ``None`` when not even the
        first character of *raw* occurs in it.
    """
    matched = longest_canonical_prefix(raw, canonical)
    if matched == 0:
        return None

    occurrences = find_all_matches(canonical, raw[:matched])
    start = min(occurrences, key=lambda pos: (abs(pos - hint), pos))
    match_end = start + matched
    trailing = raw[matched:]
    if meaningful_count(trailing) < 2:
        return start, match_end

    window_text = canonical[match_end:match_end + window]
    for extend in (_suffix_extension, _word_anchor_extension, _symbolic_extension):
        extra = extend(trailing, window_text)
        if extra is not None:
            return start, match_end + extra
    return start, match_end
