"""Anchor + current text -> position + confidence.

Resolution never fails outright. Strategies are tried in order and the first
hit wins; confidence reports how much the hit should be trusted:

======================  ==========
exact, unique           1.0
exact, ambiguous        context score
fuzzy near start_hint   0.7
legacy prefix/suffix    0.5
normalized match        0.4
start_hint              0.2
======================  ==========
"""

from __future__ import annotations

import logging

from anchoring.config import AnchoringConfig, DEFAULT_CONFIG
from anchoring.disambiguate import context_at_hint, context_from_sentences, disambiguate_by_context
from anchoring.fuzzy import find_all_matches, find_by_context, find_normalized, fuzzy_find
from anchoring.types import Anchor, ResolutionResult

logger = logging.getLogger(__name__)

CONFIDENCE_EXACT = 1.0
CONFIDENCE_FUZZY = 0.7
CONFIDENCE_LEGACY_CONTEXT = 0.5
CONFIDENCE_NORMALIZED = 0.4
CONFIDENCE_START_HINT = 0.2


def _disambiguate(anchor: Anchor, text: str, matches: list[int]) -> ResolutionResult:
    quote = anchor.quote_exact
    if anchor.prefix or anchor.suffix:
        prefix, suffix = anchor.prefix, anchor.suffix
    else:
        cut = context_at_hint(text, anchor.context_sentences, quote, anchor.start_hint)
        if cut is not None:
            prefix, suffix = cut
        else:
            # Sentences moved or changed: approximate the context and let
            # the occurrence nearest start_hint win ties.
            prefix, suffix = context_from_sentences(anchor.context_sentences, quote)
            matches = sorted(matches, key=lambda pos: (abs(pos - anchor.start_hint), pos))
    best = disambiguate_by_context(text, matches, prefix, suffix, len(quote))
    return ResolutionResult(best.position, best.confidence, "disambiguated")


def _resolve(anchor: Anchor, text: str, config: AnchoringConfig) -> ResolutionResult:
    quote = anchor.quote_exact
    matches = find_all_matches(text, quote)
    if len(matches) == 1:
        return ResolutionResult(matches[0], CONFIDENCE_EXACT, "exact")
    if matches:
        return _disambiguate(anchor, text, matches)

    pos = fuzzy_find(
        text,
        quote,
        anchor.start_hint,
        window=config.fuzzy_window,
        min_prefix=config.fuzzy_min_prefix,
    )
    if pos != -1:
        return ResolutionResult(pos, CONFIDENCE_FUZZY, "fuzzy")

    pos = find_by_context(text, anchor.prefix, anchor.suffix)
    if pos != -1:
        return ResolutionResult(pos, CONFIDENCE_LEGACY_CONTEXT, "legacy_context")

    # A normalized hit right at start_hint adds nothing over the last tier.
    pos = find_normalized(text, quote)
    if pos != -1 and pos != anchor.start_hint:
        return ResolutionResult(pos, CONFIDENCE_NORMALIZED, "normalized")

    return ResolutionResult(anchor.start_hint, CONFIDENCE_START_HINT, "start_hint")


def resolve(
    anchor: Anchor,
    canonical_text: str,
    *,
    config: AnchoringConfig = DEFAULT_CONFIG,
) -> ResolutionResult:
    """Locate *anchor* in freshly computed canonical text.

    Args:
        anchor: Stored anchor.
        canonical_text: Current canonical text of the message; may differ
            from the text the anchor was created against.
        config: Tunables (fuzzy window and minimum prefix).

    Returns:
        A ResolutionResult; ``success`` is always True.
    """
    result = _resolve(anchor, canonical_text, config)
    logger.debug(
        "resolved quote=%r pos=%d confidence=%.2f strategy=%s",
        anchor.quote_exact[:25],
        result.position,
        result.confidence,
        result.strategy,
    )
    return result


def highlight_length(
    result: ResolutionResult,
    anchor: Anchor,
    *,
    config: AnchoringConfig = DEFAULT_CONFIG,
) -> int:
    """Number of characters to highlight at ``result.position``.

    Low-confidence positions say little about span extent, so the stored
    quote length is clamped to ``[min_highlight_length,
    max_highlight_length]`` below ``config.low_confidence``.
    """
    length = len(anchor.quote_exact)
    if result.confidence < config.low_confidence:
        length = min(max(length, config.min_highlight_length), config.max_highlight_length)
    return length
