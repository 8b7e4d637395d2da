"""Minimal enclosing-sentence extraction.

Terminators are ``. ! ?`` (Latin), ``。 ！ ？ ；`` (CJK) and newline. A Latin
terminator only ends a sentence when whitespace follows it, so decimals and
abbreviations glued to the next token do not split. CJK terminators and
newlines always split.
"""

from __future__ import annotations

_LATIN_TERMINATORS = frozenset(".!?")
_CJK_TERMINATORS = frozenset("。！？；")
_TERMINATORS = _LATIN_TERMINATORS | _CJK_TERMINATORS | {"\n"}


def _sentence_start(text: str, pos: int) -> int:
    for i in range(pos - 1, -1, -1):
        ch = text[i]
        if ch not in _TERMINATORS:
            continue
        if ch == "\n" or ch in _CJK_TERMINATORS:
            return i + 1
        if i + 1 < len(text) and text[i + 1].isspace():
            return i + 1
    return 0


def _sentence_end(text: str, pos: int) -> int:
    for i in range(pos, len(text)):
        ch = text[i]
        if ch == "\n":
            return i
        if ch in _TERMINATORS:
            return i + 1
    return len(text)


def extract_sentence_context(text: str, quote: str, start_hint: int) -> str:
    """Return the sentence(s) enclosing ``text[start_hint:start_hint+len(quote)]``.

    Args:
        text: Canonical message text.
        quote: The anchored quote; only its length is used.
        start_hint: Offset of the quote in *text*.

    Returns:
        The trimmed sentence span, or ``""`` when *start_hint* falls outside
        ``[0, len(text))``.
    """
    if not text or not 0 <= start_hint < len(text):
        return ""
    start = _sentence_start(text, start_hint)
    end = _sentence_end(text, min(start_hint + len(quote), len(text)))
    return text[start:end].strip()
