"""Follow-up prompt text for a batch of anchored comments."""

from __future__ import annotations

from collections.abc import Sequence

from anchoring.types import Anchor

MISSING_CONTEXT = "(context not captured)"


def _collapse(text: str) -> str:
    return " ".join((text or "").split())


def compose_followup_prompt(items: Sequence[tuple[Anchor, str]]) -> str:
    """Render ``(anchor, comment body)`` pairs as one numbered prompt.

    Each block quotes the sentences around the anchor, the anchored quote and
    the comment body. Whitespace inside quotes is collapsed so multi-line
    selections read as one line.
    """
    blocks: list[str] = []
    for idx, (anchor, body) in enumerate(items, start=1):
        context = _collapse(anchor.context_sentences) or MISSING_CONTEXT
        blocks.append(
            f"#{idx}\n"
            "Context:\n"
            "In your previous response, you were discussing:\n"
            f'"{context}"\n\n'
            "Focus:\n"
            "I am referring specifically to:\n"
            f'"{_collapse(anchor.quote_exact)}"\n\n'
            "Follow-up:\n"
            "Respond to my comment below:\n"
            f"{body}"
        )
    return "\n\n".join(blocks).strip()
