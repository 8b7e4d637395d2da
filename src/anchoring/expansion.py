"""Selection edge expansion: embedded units and word boundaries."""

from __future__ import annotations

import unicodedata
from dataclasses import replace
from typing import Literal, TypeAlias

from anchoring.types import SelectionDescriptor


CharClass: TypeAlias = Literal["space", "ideographic", "word", "boundary"]

# Han, kana and CJK punctuation/fullwidth blocks. Hangul is left out: Korean
# separates words with spaces.
_IDEOGRAPHIC_RANGES: tuple[tuple[int, int], ...] = (
    (0x2E80, 0x2FDF),    # CJK radicals, Kangxi radicals
    (0x3000, 0x303F),    # CJK symbols and punctuation
    (0x3040, 0x309F),    # Hiragana
    (0x30A0, 0x30FF),    # Katakana
    (0x3100, 0x312F),    # Bopomofo
    (0x31F0, 0x31FF),    # Katakana phonetic extensions
    (0x3400, 0x4DBF),    # CJK extension A
    (0x4E00, 0x9FFF),    # CJK unified ideographs
    (0xF900, 0xFAFF),    # CJK compatibility ideographs
    (0xFF00, 0xFFEF),    # Halfwidth and fullwidth forms
    (0x20000, 0x2FA1F),  # CJK extensions B-F, compatibility supplement
    (0x30000, 0x323AF),  # CJK extensions G-H
)


def is_ideographic(ch: str) -> bool:
    """True for characters of scripts written without inter-word spacing."""
    cp = ord(ch)
    return any(lo <= cp <= hi for lo, hi in _IDEOGRAPHIC_RANGES)


def char_class(ch: str) -> CharClass:
    if ch.isspace():
        return "space"
    if is_ideographic(ch):
        return "ideographic"
    if ch.isalnum() or ch == "_" or unicodedata.category(ch).startswith("M"):
        return "word"
    return "boundary"


def _splits_word(text: str, left: int, right: int) -> bool:
    return (
        0 <= left < len(text)
        and 0 <= right < len(text)
        and char_class(text[left]) == "word"
        and char_class(text[right]) == "word"
    )


def expand_to_word_boundaries(text: str, start: int, end: int) -> tuple[int, int]:
    """Grow ``text[start:end]`` so neither edge cuts through a word.

    An edge moves outward while the neighboring character belongs to the same
    word; whitespace, punctuation and a switch to ideographic script stop it.
    Ideographic characters never trigger expansion, and a span made only of
    ideographs and punctuation is returned unchanged.

    Returns:
        ``(start, end)`` with ``new_start <= start`` and ``new_end >= end``.
    """
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    if start == end:
        return start, end
    if all(char_class(ch) != "word" for ch in text[start:end]):
        return start, end

    if _splits_word(text, start - 1, start):
        while start > 0 and char_class(text[start - 1]) == "word":
            start -= 1
    if _splits_word(text, end - 1, end):
        while end < len(text) and char_class(text[end]) == "word":
            end += 1
    return start, end


def snap_selection_to_units(selection: SelectionDescriptor) -> SelectionDescriptor:
    """Extend selection edges that fall inside an embedded unit to cover it.

    A unit is a contiguous run of leaves sharing a ``unit_id``; partial
    selections of such units are unreliable because they are often rendered
    twice (visible and accessibility copies).
    """
    leaves = selection.leaves
    start_leaf, start_offset = selection.start_leaf, selection.start_offset
    end_leaf, end_offset = selection.end_leaf, selection.end_offset

    start_unit = leaves[start_leaf].unit_id
    if start_unit is not None and start_offset < len(leaves[start_leaf].text):
        while start_leaf > 0 and leaves[start_leaf - 1].unit_id == start_unit:
            start_leaf -= 1
        start_offset = 0

    end_unit = leaves[end_leaf].unit_id
    if end_unit is not None and end_offset > 0:
        while end_leaf + 1 < len(leaves) and leaves[end_leaf + 1].unit_id == end_unit:
            end_leaf += 1
        end_offset = len(leaves[end_leaf].text)

    return replace(
        selection,
        start_leaf=start_leaf,
        start_offset=start_offset,
        end_leaf=end_leaf,
        end_offset=end_offset,
    )
