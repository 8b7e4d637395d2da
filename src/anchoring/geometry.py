"""Per-character rectangles -> one rectangle per rendered line.

A logical span reflows across lines. One bounding box over the whole span
would also cover the unrelated text between its first and last line, while
per-character boxes are illegible, so boxes on the same visual line are
merged and lines are kept apart.
"""

from __future__ import annotations

from collections.abc import Iterable

from anchoring.types import Rect


def same_line(a: Rect, b: Rect) -> bool:
    """Centers closer vertically than half the smaller height."""
    return abs(a.center_y - b.center_y) < min(a.height, b.height) / 2.0


def merge_rectangles(rects: Iterable[Rect]) -> list[Rect]:
    """Union same-line rectangles until no pair merges any more.

    Output order follows the input, not the page; use ``reading_order``
    when order matters. Empty input returns an empty list.
    """
    merged = list(rects)
    changed = True
    while changed:
        changed = False
        for i in range(len(merged)):
            for j in range(i + 1, len(merged)):
                if same_line(merged[i], merged[j]):
                    merged[i] = merged[i].union(merged[j])
                    del merged[j]
                    changed = True
                    break
            if changed:
                break
    return merged


def reading_order(rects: Iterable[Rect]) -> list[Rect]:
    """Sort top-to-bottom, then left-to-right."""
    return sorted(rects, key=lambda r: (r.top, r.left))
