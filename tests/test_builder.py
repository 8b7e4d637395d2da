"""Tests for anchoring.builder module."""
import pytest

from anchoring.builder import create_anchor
from anchoring.fingerprint import fingerprint
from anchoring.leaves import (
    canonical_leaves,
    canonical_text,
    leaves_from_html,
    leaves_from_text,
    selection_from_range,
)
from anchoring.materialize import materialize, span_text
from anchoring.resolver import resolve

KATEX_HTML = (
    '<p>Area is <span class="katex">'
    '<span class="katex-mathml">x^2</span>'
    '<span class="katex-html" aria-hidden="true">x2</span>'
    "</span> units.</p>"
)


class TestCreateAnchor:
    def test_partial_words_expand(self) -> None:
        text = "The leverage ratio covenant applies."
        leaves = leaves_from_text(text)
        anchor = create_anchor(selection_from_range(leaves, 6, 16), text)
        assert anchor is not None
        assert anchor.quote_exact == "leverage ratio"
        assert anchor.start_hint == 4
        assert anchor.context_sentences == text
        assert anchor.document_fingerprint == fingerprint(text)

    def test_repeated_quote_records_selected_occurrence(self) -> None:
        text = "The cat sat. The cat ran."
        leaves = leaves_from_text(text)
        second = text.index("cat", 5)
        anchor = create_anchor(selection_from_range(leaves, second, second + 3), text)
        assert anchor is not None
        assert anchor.quote_exact == "cat"
        assert anchor.start_hint == second
        assert anchor.context_sentences == "The cat ran."

    def test_whitespace_selection_returns_none(self) -> None:
        text = "Hello   world"
        leaves = leaves_from_text(text)
        assert create_anchor(selection_from_range(leaves, 5, 8), text) is None

    def test_surrounding_whitespace_trimmed(self) -> None:
        text = "Hello   world"
        leaves = leaves_from_text(text)
        anchor = create_anchor(selection_from_range(leaves, 5, 13), text)
        assert anchor is not None
        assert anchor.quote_exact == "world"
        assert anchor.start_hint == 8

    def test_equation_mirror_dropped_from_quote(self) -> None:
        leaves = leaves_from_html(KATEX_HTML)
        canonical = canonical_text(leaves)
        assert canonical == "Area is x2 units."
        # Rendered text is "Area is x^2x2 units."; select "is x^2x2 un".
        anchor = create_anchor(selection_from_range(leaves, 5, 16), canonical)
        assert anchor is not None
        assert anchor.quote_exact == "is x2 units"
        assert anchor.start_hint == 5

    def test_start_inside_equation_snaps_to_whole_equation(self) -> None:
        leaves = leaves_from_html(KATEX_HTML)
        canonical = canonical_text(leaves)
        # Starts on the "2" of the visible "x2" leaf.
        anchor = create_anchor(selection_from_range(leaves, 12, 19), canonical)
        assert anchor is not None
        assert anchor.quote_exact == "x2 units"
        assert anchor.start_hint == 8

    def test_selection_absent_from_canonical_keeps_raw(self) -> None:
        leaves = leaves_from_text("Different words here")
        anchor = create_anchor(selection_from_range(leaves, 0, 9), "unrelated text")
        assert anchor is not None
        assert anchor.quote_exact == "Different"
        assert anchor.start_hint == 0


class TestRoundTrip:
    def test_create_resolve_materialize(self) -> None:
        leaves = leaves_from_html(KATEX_HTML)
        canonical = canonical_text(leaves)
        anchor = create_anchor(selection_from_range(leaves, 5, 16), canonical)
        assert anchor is not None

        result = resolve(anchor, canonical)
        assert result.position == 5
        assert result.confidence == 1.0

        live = canonical_leaves(leaves)
        span = materialize(result, anchor, live)
        assert span is not None
        assert span_text(span, live) == anchor.quote_exact

    def test_repeated_quote_round_trip(self) -> None:
        text = "The cat sat. The cat ran."
        leaves = leaves_from_text(text)
        second = text.index("cat", 5)
        anchor = create_anchor(selection_from_range(leaves, second, second + 3), text)
        result = resolve(anchor, text)
        assert result.position == second
        assert result.strategy == "disambiguated"

    @pytest.mark.parametrize(
        "quote,occurrence",
        [("Costs fell", 0), ("Revenue grew", 1), ("12% in Q3", 0), ("again in Q4.", 0)],
    )
    def test_unchanged_text_recovers_quote(self, quote: str, occurrence: int) -> None:
        text = "Revenue grew 12% in Q3. Costs fell. Revenue grew again in Q4."
        start = -1
        for _ in range(occurrence + 1):
            start = text.index(quote, start + 1)
        leaves = leaves_from_text(text)
        anchor = create_anchor(selection_from_range(leaves, start, start + len(quote)), text)
        assert anchor is not None
        assert anchor.quote_exact == quote

        result = resolve(anchor, text)
        assert result.position == start
        span = materialize(result, anchor, leaves)
        assert span_text(span, leaves) == quote
