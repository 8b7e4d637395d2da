"""Leaf sequences and canonical text for rendered messages.

A rendered message is modelled as its text nodes in document order. Some of
those nodes are rendering duplicates: KaTeX emits a MathML copy of every
equation next to the visible HTML, MathJax adds an assistive MathML copy, and
sites hide screen-reader mirrors behind ``aria-hidden``. Canonical text is the
concatenation of the non-duplicate leaves, and the canonical leaf sequence is
filtered the same way so offsets in one are offsets in the other.

``leaves_from_html`` is the generic HTML collaborator; site adapters that
scrape a live DOM can build ``TextLeaf`` sequences directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from anchoring.types import Leaf, SelectionDescriptor, TextLeaf

_SKIPPED_TAGS = frozenset({"script", "style", "template"})
_DUPLICATE_TAGS = frozenset({"mjx-assistive-mml"})
_DUPLICATE_CLASSES = frozenset({"katex-mathml"})
_UNIT_TAGS = frozenset({"mjx-container"})
_UNIT_CLASSES = frozenset({"katex", "MathJax", "MathJax_Display"})


def _classes(tag: Tag) -> set[str]:
    raw = tag.get("class") or []
    if isinstance(raw, str):
        raw = raw.split()
    return set(raw)


def _is_duplicate_container(tag: Tag) -> bool:
    classes = _classes(tag)
    if tag.name in _DUPLICATE_TAGS or classes & _DUPLICATE_CLASSES:
        return True
    # katex-html is the visible equation even though it is aria-hidden.
    return str(tag.get("aria-hidden") or "").lower() == "true" and "katex-html" not in classes


def _is_unit_container(tag: Tag) -> bool:
    return tag.name in _UNIT_TAGS or bool(_classes(tag) & _UNIT_CLASSES)


def leaves_from_html(html: str) -> list[TextLeaf]:
    """Extract the rendered leaf sequence of an HTML message fragment.

    Args:
        html: Rendered message markup.

    Returns:
        Text leaves in document order, duplicates included and flagged.
        Text inside ``script``/``style``/``template`` is not rendered and is
        dropped. Leaves inside an equation share the ``unit_id`` of the
        outermost equation element.
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    unit_ids: dict[int, int] = {}
    leaves: list[TextLeaf] = []
    for node in soup.descendants:
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        text = str(node)
        if not text:
            continue

        skipped = False
        duplicate = False
        unit_tag: Tag | None = None
        for parent in node.parents:
            if not isinstance(parent, Tag) or isinstance(parent, BeautifulSoup):
                continue
            if parent.name in _SKIPPED_TAGS:
                skipped = True
                break
            if _is_duplicate_container(parent):
                duplicate = True
            if _is_unit_container(parent):
                unit_tag = parent
        if skipped:
            continue

        unit_id = None
        if unit_tag is not None:
            unit_id = unit_ids.setdefault(id(unit_tag), len(unit_ids))
        leaves.append(TextLeaf(text=text, unit_id=unit_id, duplicate=duplicate))
    return leaves


def leaves_from_text(text: str) -> list[TextLeaf]:
    """Split plain text into one leaf per line (newline kept on its line)."""
    return [TextLeaf(text=line) for line in (text or "").splitlines(keepends=True)]


def read_message_leaves(path: Path) -> list[TextLeaf]:
    """Read a saved message: ``.html``/``.htm`` as markup, anything else as text."""
    raw = path.read_text(encoding="utf-8", errors="replace")
    if path.suffix.lower() in (".html", ".htm"):
        return leaves_from_html(raw)
    return leaves_from_text(raw)


def canonical_leaves(leaves: Iterable[TextLeaf]) -> list[TextLeaf]:
    return [leaf for leaf in leaves if not leaf.duplicate]


def canonical_text(leaves: Iterable[Leaf]) -> str:
    """Concatenate leaf texts, skipping rendering duplicates."""
    return "".join(
        leaf.text for leaf in leaves if not getattr(leaf, "duplicate", False)
    )


def rendered_text(leaves: Iterable[Leaf]) -> str:
    return "".join(leaf.text for leaf in leaves)


def selection_text(selection: SelectionDescriptor) -> str:
    """Raw selected string as the host would report it (duplicates included)."""
    leaves = selection.leaves
    if selection.start_leaf == selection.end_leaf:
        return leaves[selection.start_leaf].text[selection.start_offset:selection.end_offset]
    parts = [leaves[selection.start_leaf].text[selection.start_offset:]]
    parts.extend(leaf.text for leaf in leaves[selection.start_leaf + 1:selection.end_leaf])
    parts.append(leaves[selection.end_leaf].text[:selection.end_offset])
    return "".join(parts)


def canonical_offset_before(selection: SelectionDescriptor) -> int:
    """Canonical-text length preceding the selection start."""
    leaves = selection.leaves
    offset = len(canonical_text(leaves[:selection.start_leaf]))
    if not leaves[selection.start_leaf].duplicate:
        offset += selection.start_offset
    return offset


def selection_from_range(
    leaves: Sequence[TextLeaf],
    start: int,
    end: int,
) -> SelectionDescriptor:
    """Build a selection from ``[start, end)`` offsets in the rendered text.

    Raises:
        ValueError: If the range is empty, reversed or outside the leaves.
    """
    total = sum(len(leaf.text) for leaf in leaves)
    if not 0 <= start < end <= total:
        raise ValueError(f"Invalid selection range {start}..{end} for {total} chars")

    start_leaf = start_offset = end_leaf = end_offset = -1
    cumulative = 0
    for idx, leaf in enumerate(leaves):
        leaf_end = cumulative + len(leaf.text)
        if start_leaf == -1 and start < leaf_end:
            start_leaf, start_offset = idx, start - cumulative
        if start_leaf != -1 and end <= leaf_end:
            end_leaf, end_offset = idx, end - cumulative
            break
        cumulative = leaf_end

    return SelectionDescriptor(
        leaves=tuple(leaves),
        start_leaf=start_leaf,
        start_offset=start_offset,
        end_leaf=end_leaf,
        end_offset=end_offset,
    )
