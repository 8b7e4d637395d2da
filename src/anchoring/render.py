"""One render pass: stored anchors + current messages -> drawable spans.

Nothing here outlives a call. The returned side table maps comment ids to
their located highlight for this pass only; callers rebuild it on the next
pass instead of diffing against the previous one. A comment whose message is
missing or whose span cannot be materialized is simply absent from the table
and is retried on the next pass.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import TypeAlias

from anchoring.config import AnchoringConfig, DEFAULT_CONFIG
from anchoring.fingerprint import fingerprint
from anchoring.geometry import merge_rectangles
from anchoring.leaves import canonical_leaves, canonical_text, leaves_from_html
from anchoring.materialize import materialize, span_text
from anchoring.resolver import highlight_length, resolve
from anchoring.types import Anchor, Leaf, MaterializedSpan, Rect, ResolutionResult

logger = logging.getLogger(__name__)

RectProvider: TypeAlias = Callable[[str, MaterializedSpan], Iterable[Rect]]


@dataclass(frozen=True, slots=True)
class RenderedMessage:
    """A message as currently rendered: id plus canonical leaf sequence.

    ``stamped_fingerprint`` is the fingerprint the host recorded the first
    time it saw the message and keeps with the container. Streaming appends
    and small edits change the computed fingerprint, so a stamp, when
    present, is what anchors are matched against.
    """

    container_id: str
    leaves: tuple[Leaf, ...]
    stamped_fingerprint: str = ""

    @classmethod
    def from_html(cls, container_id: str, html: str, *, stamped_fingerprint: str = "") -> RenderedMessage:
        return cls(
            container_id,
            tuple(canonical_leaves(leaves_from_html(html))),
            stamped_fingerprint=stamped_fingerprint,
        )

    @property
    def text(self) -> str:
        return canonical_text(self.leaves)

    @property
    def fingerprint(self) -> str:
        return self.stamped_fingerprint or fingerprint(self.text)

    def stamp(self) -> RenderedMessage:
        """Return a copy whose fingerprint stays fixed from now on."""
        if self.stamped_fingerprint:
            return self
        return replace(self, stamped_fingerprint=fingerprint(self.text))


@dataclass(frozen=True, slots=True)
class LocatedHighlight:
    container_id: str
    resolution: ResolutionResult
    span: MaterializedSpan
    text: str
    rects: tuple[Rect, ...] = ()


def find_message(anchor: Anchor, messages: Sequence[RenderedMessage]) -> RenderedMessage | None:
    """First message whose (stamped, else computed) fingerprint matches the anchor's."""
    for message in messages:
        if message.fingerprint == anchor.document_fingerprint:
            return message
    return None


def locate(
    anchor: Anchor,
    message: RenderedMessage,
    *,
    config: AnchoringConfig = DEFAULT_CONFIG,
) -> LocatedHighlight | None:
    """Resolve and materialize *anchor* inside *message*."""
    text = message.text
    result = resolve(anchor, text, config=config)
    length = min(
        highlight_length(result, anchor, config=config),
        max(0, len(text) - result.position),
    )
    span = materialize(result, anchor, message.leaves, length=length, config=config)
    if span is None:
        return None
    return LocatedHighlight(
        container_id=message.container_id,
        resolution=result,
        span=span,
        text=span_text(span, message.leaves),
    )


def render_pass(
    anchors: Mapping[str, Anchor],
    messages: Sequence[RenderedMessage],
    *,
    rect_provider: RectProvider | None = None,
    config: AnchoringConfig = DEFAULT_CONFIG,
) -> dict[str, LocatedHighlight]:
    """Locate every anchor against the current messages.

    Args:
        anchors: Comment id -> stored anchor.
        messages: Messages currently rendered.
        rect_provider: Optional host callback returning per-character
            rectangles for a span of a container; when given, highlights carry
            per-line rectangles.
        config: Tunables.

    Returns:
        Comment id -> located highlight, for this pass only.
    """
    table: dict[str, LocatedHighlight] = {}
    for comment_id, anchor in anchors.items():
        message = find_message(anchor, messages)
        if message is None:
            logger.debug("no message for comment %s", comment_id)
            continue
        located = locate(anchor, message, config=config)
        if located is None:
            logger.debug("could not materialize comment %s", comment_id)
            continue
        if rect_provider is not None:
            rects = merge_rectangles(rect_provider(message.container_id, located.span))
            located = replace(located, rects=tuple(rects))
        table[comment_id] = located
    return table
