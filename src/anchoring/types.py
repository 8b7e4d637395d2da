"""Core types for anchoring, resolution and highlight geometry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, TypeAlias


ResolutionStrategy: TypeAlias = Literal[
    "exact",
    "disambiguated",
    "fuzzy",
    "legacy_context",
    "normalized",
    "start_hint",
]


class Leaf(Protocol):
    """Order-stable, text-bearing node of a rendered message."""

    @property
    def text(self) -> str: ...


@dataclass(frozen=True, slots=True)
class TextLeaf:
    """Concrete leaf produced by the leaf extractors.

    ``unit_id`` groups leaves rendered by one embedded non-text unit (an
    equation). ``duplicate`` marks rendering mirrors that canonical text
    leaves out.
    """

    text: str
    unit_id: int | None = None
    duplicate: bool = False


@dataclass(frozen=True, slots=True)
class Anchor:
    """Portable descriptor of a commented text span.

    ``prefix``/``suffix`` are only populated for records written by the
    legacy quote+context scheme.
    """

    document_fingerprint: str
    quote_exact: str
    context_sentences: str
    start_hint: int
    prefix: str = ""
    suffix: str = ""

    def __post_init__(self) -> None:
        if not self.quote_exact:
            raise ValueError("quote_exact cannot be empty")
        if self.start_hint < 0:
            raise ValueError(f"start_hint must be >= 0, got {self.start_hint}")


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    position: int
    confidence: float
    strategy: ResolutionStrategy
    success: bool = True

    def __post_init__(self) -> None:
        if self.position < 0:
            raise ValueError(f"position must be >= 0, got {self.position}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {self.confidence}")


@dataclass(frozen=True, slots=True)
class SelectionDescriptor:
    """Host selection over the rendered leaf sequence (duplicates included)."""

    leaves: tuple[TextLeaf, ...]
    start_leaf: int
    start_offset: int
    end_leaf: int
    end_offset: int

    def __post_init__(self) -> None:
        n = len(self.leaves)
        if not (0 <= self.start_leaf < n and 0 <= self.end_leaf < n):
            raise ValueError(
                f"selection leaves out of range: {self.start_leaf}..{self.end_leaf} of {n}",
            )
        if (self.end_leaf, self.end_offset) < (self.start_leaf, self.start_offset):
            raise ValueError("selection end precedes selection start")
        if not 0 <= self.start_offset <= len(self.leaves[self.start_leaf].text):
            raise ValueError(f"start_offset out of range: {self.start_offset}")
        if not 0 <= self.end_offset <= len(self.leaves[self.end_leaf].text):
            raise ValueError(f"end_offset out of range: {self.end_offset}")


@dataclass(frozen=True, slots=True)
class MaterializedSpan:
    """Leaf/offset span in the canonical leaf sequence."""

    start_leaf: int
    start_offset: int
    end_leaf: int
    end_offset: int


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle; y grows downward."""

    left: float
    right: float
    top: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2.0

    def union(self, other: Rect) -> Rect:
        return Rect(
            left=min(self.left, other.left),
            right=max(self.right, other.right),
            top=min(self.top, other.top),
            bottom=max(self.bottom, other.bottom),
        )
