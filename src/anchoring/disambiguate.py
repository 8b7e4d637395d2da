"""Pick one of several exact quote matches by comparing surrounding context."""

from __future__ import annotations

from dataclasses import dataclass

from anchoring.fuzzy import find_all_matches
from anchoring.similarity import similarity


@dataclass(frozen=True, slots=True)
class Disambiguation:
    """Winning candidate.

    ``score`` is the summed similarity, ``confidence`` that sum divided by the
    number of comparisons made (0.0 when there was nothing to compare).
    """

    position: int
    score: float
    confidence: float


def context_from_sentences(context_sentences: str, quote: str) -> tuple[str, str]:
    """Split stored sentences into the expected text before and after *quote*.

    Returns ``("", "")`` when the quote does not occur in the sentences.
    """
    if not context_sentences or not quote:
        return "", ""
    idx = context_sentences.find(quote)
    if idx == -1:
        return "", ""
    return context_sentences[:idx], context_sentences[idx + len(quote):]


def context_at_hint(
    text: str,
    context_sentences: str,
    quote: str,
    start_hint: int,
) -> tuple[str, str] | None:
    """Split stored sentences around the quote occurrence at *start_hint*.

    The sentences are located in *text* (the occurrence containing
    *start_hint*, else the nearest one) and cut at ``start_hint -
    sentence_start``, so a quote repeated inside its own sentence keeps the
    occurrence that was selected.

    Returns:
        ``(prefix, suffix)``, or ``None`` when the sentences no longer occur
        in *text* or the quote does not sit at the recorded offset.
    """
    if not context_sentences or not quote:
        return None
    starts = find_all_matches(text, context_sentences)
    if not starts:
        return None
    sentence_start = min(
        starts,
        key=lambda pos: (
            not pos <= start_hint < pos + len(context_sentences),
            abs(pos - start_hint),
            pos,
        ),
    )
    offset = start_hint - sentence_start
    if offset < 0 or context_sentences[offset:offset + len(quote)] != quote:
        return None
    return context_sentences[:offset], context_sentences[offset + len(quote):]


def disambiguate_by_context(
    text: str,
    positions: list[int],
    prefix: str,
    suffix: str,
    quote_length: int,
) -> Disambiguation:
    """Score each candidate's neighborhood against *prefix*/*suffix*.

    The window compared on each side is as long as the stored value. The
    highest score wins; ties keep the candidate listed first.

    Args:
        text: Canonical text.
        positions: Candidate start offsets in preference order (usually
            document order). Must be non-empty.
        prefix: Expected text immediately before the quote ("" to skip).
        suffix: Expected text immediately after the quote ("" to skip).
        quote_length: Length of the quote at each candidate.

    Raises:
        ValueError: If *positions* is empty.
    """
    if not positions:
        raise ValueError("positions cannot be empty")

    comparisons = int(bool(prefix)) + int(bool(suffix))
    best_position = positions[0]
    best_score = 0.0
    for pos in positions:
        score = 0.0
        if prefix:
            actual = text[max(0, pos - len(prefix)):pos]
            score += similarity(actual, prefix)
        if suffix:
            after = pos + quote_length
            score += similarity(text[after:after + len(suffix)], suffix)
        if score > best_score:
            best_position, best_score = pos, score

    confidence = best_score / comparisons if comparisons else 0.0
    return Disambiguation(
        position=best_position,
        score=best_score,
        confidence=max(0.0, min(1.0, confidence)),
    )
