"""Resolved offset -> leaf/offset span over the canonical leaf sequence."""

from __future__ import annotations

from collections.abc import Sequence

from anchoring.config import AnchoringConfig, DEFAULT_CONFIG
from anchoring.resolver import highlight_length
from anchoring.types import Anchor, Leaf, MaterializedSpan, ResolutionResult


class MalformedLeafSequenceError(ValueError):
    """A leaf in the sequence does not report its text."""


def _leaf_text(leaf: Leaf, idx: int) -> str:
    text = getattr(leaf, "text", None)
    if not isinstance(text, str):
        raise MalformedLeafSequenceError(
            f"leaf {idx} has no string text (got {type(text).__name__})",
        )
    return text


def span_text(span: MaterializedSpan, leaves: Sequence[Leaf]) -> str:
    """Text covered by *span*."""
    if span.start_leaf == span.end_leaf:
        return leaves[span.start_leaf].text[span.start_offset:span.end_offset]
    parts = [leaves[span.start_leaf].text[span.start_offset:]]
    parts.extend(leaf.text for leaf in leaves[span.start_leaf + 1:span.end_leaf])
    parts.append(leaves[span.end_leaf].text[:span.end_offset])
    return "".join(parts)


def materialize(
    result: ResolutionResult,
    anchor: Anchor,
    leaves: Sequence[Leaf],
    *,
    length: int | None = None,
    config: AnchoringConfig = DEFAULT_CONFIG,
) -> MaterializedSpan | None:
    """Map a resolved position onto the live leaf sequence.

    Args:
        result: Resolver output.
        anchor: The anchor that was resolved; its quote length bounds the span.
        leaves: Canonical leaf sequence in document order.
        length: Characters to cover. Defaults to ``highlight_length`` (the
            quote length, clamped for low-confidence results).
        config: Tunables (low-confidence clamp, collapsed-span floor).

    Returns:
        The span, or ``None`` when no leaf covers ``result.position``.

    Raises:
        MalformedLeafSequenceError: If a leaf does not expose string text.
    """
    if length is None:
        length = highlight_length(result, anchor, config=config)
    position = result.position
    target_end = position + length

    start: tuple[int, int] | None = None
    end: tuple[int, int] | None = None
    last_idx = -1
    cumulative = 0
    for idx, leaf in enumerate(leaves):
        leaf_len = len(_leaf_text(leaf, idx))
        last_idx = idx
        if start is None and cumulative + leaf_len > position:
            start = (idx, position - cumulative)
        if start is not None and cumulative + leaf_len >= target_end:
            end = (idx, target_end - cumulative)
            break
        cumulative += leaf_len

    if start is None:
        return None
    if end is None:
        end = (last_idx, len(leaves[last_idx].text))

    start_leaf, start_offset = start
    end_leaf, end_offset = end
    if start_leaf == end_leaf and start_offset >= end_offset:
        end_offset = min(start_offset + config.collapsed_span_floor, len(leaves[start_leaf].text))

    span = MaterializedSpan(start_leaf, start_offset, end_leaf, end_offset)
    excess = len(span_text(span, leaves)) - length
    if length > 0 and excess > 0:
        floor = start_offset + 1 if start_leaf == end_leaf else 0
        span = MaterializedSpan(start_leaf, start_offset, end_leaf, max(floor, end_offset - excess))
    return span
