"""Edit-distance primitives used for context disambiguation."""

from __future__ import annotations


def levenshtein(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute distance between *a* and *b*."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity ``(maxLen - levenshtein) / maxLen`` in [0, 1].

    Identical strings score 1.0 (including two empty strings); a single
    empty side scores 0.0.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    longest = max(len(a), len(b))
    return (longest - levenshtein(a, b)) / longest
