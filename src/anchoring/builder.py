"""Selection -> Anchor.

Steps, in order:
1. Reject blank selections.
2. Snap edges that cut into an embedded unit (equation) to the whole unit.
3. Reconcile the raw selected string with canonical text (drops rendering
   duplicates the raw string may carry).
4. Expand edges that split a word.
5. Record where the quote sits (``start_hint``) and the sentences around it.
"""

from __future__ import annotations

import logging

from anchoring.config import AnchoringConfig, DEFAULT_CONFIG
from anchoring.expansion import expand_to_word_boundaries, snap_selection_to_units
from anchoring.fingerprint import fingerprint
from anchoring.leaves import canonical_offset_before, selection_text
from anchoring.reconcile import reconcile_selection
from anchoring.sentences import extract_sentence_context
from anchoring.types import Anchor, SelectionDescriptor

logger = logging.getLogger(__name__)


def _trim_span(text: str, start: int, end: int) -> tuple[int, int]:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def _nearest_occurrence(text: str, quote: str, hint: int) -> int:
    best = -1
    pos = text.find(quote)
    while pos != -1:
        if best == -1 or abs(pos - hint) < abs(best - hint):
            best = pos
        pos = text.find(quote, pos + 1)
    return best


def create_anchor(
    selection: SelectionDescriptor,
    canonical_text: str,
    *,
    config: AnchoringConfig = DEFAULT_CONFIG,
) -> Anchor | None:
    """Build a portable Anchor from a host selection.

    Args:
        selection: Selection over the rendered leaf sequence.
        canonical_text: Deduplicated plain text of the containing message.
        config: Tunables (reconciliation window).

    Returns:
        The Anchor, or ``None`` when the selection holds no visible text.
    """
    if not selection_text(selection).strip():
        return None

    snapped = snap_selection_to_units(selection)
    raw = selection_text(snapped).strip()
    dom_hint = canonical_offset_before(snapped)

    quote = raw
    start_hint = -1
    span = reconcile_selection(raw, canonical_text, dom_hint, window=config.reconcile_window)
    if span is not None:
        start, end = _trim_span(canonical_text, *span)
        if start < end:
            start, end = expand_to_word_boundaries(canonical_text, start, end)
            quote = canonical_text[start:end]
            start_hint = start
    else:
        logger.debug("selection not found in canonical text; keeping raw quote")

    if start_hint == -1:
        start_hint = _nearest_occurrence(canonical_text, quote, dom_hint)
    if start_hint == -1:
        start_hint = max(0, dom_hint)

    return Anchor(
        document_fingerprint=fingerprint(canonical_text),
        quote_exact=quote,
        context_sentences=extract_sentence_context(canonical_text, quote, start_hint),
        start_hint=start_hint,
    )
