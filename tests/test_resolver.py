"""Tests for anchoring.resolver module."""
from anchoring.builder import create_anchor
from anchoring.config import AnchoringConfig
from anchoring.leaves import leaves_from_text, selection_from_range
from anchoring.resolver import highlight_length, resolve
from anchoring.types import Anchor, ResolutionResult


def _anchor(quote: str, *, start_hint: int = 0, context: str = "", prefix: str = "", suffix: str = "") -> Anchor:
    return Anchor(
        document_fingerprint="fp",
        quote_exact=quote,
        context_sentences=context,
        start_hint=start_hint,
        prefix=prefix,
        suffix=suffix,
    )


class TestResolve:
    def test_unique_exact_match(self) -> None:
        result = resolve(_anchor("leverage ratio"), "the leverage ratio")
        assert result == ResolutionResult(4, 1.0, "exact")
        assert result.success

    def test_repeated_quote_uses_sentence_context(self) -> None:
        text = "The cat sat. The cat ran."
        result = resolve(_anchor("cat", context="The cat ran."), text)
        assert result.position == text.index("cat", 5)
        assert result.strategy == "disambiguated"
        assert result.confidence == 1.0

    def test_repeated_quote_prefers_legacy_context(self) -> None:
        text = "The cat sat. The cat ran."
        result = resolve(_anchor("cat", context="The cat ran.", prefix="The ", suffix=" sat."), text)
        assert result.position == 4

    def test_repeated_quote_without_context(self) -> None:
        result = resolve(_anchor("cat"), "The cat sat. The cat ran.")
        assert result.position == 4
        assert result.confidence == 0.0

    def test_quote_repeated_inside_its_sentence(self) -> None:
        text = "Intro line. The cat saw the cat."
        second = text.rindex("cat")
        anchor = create_anchor(selection_from_range(leaves_from_text(text), second, second + 3), text)
        assert anchor.start_hint == second
        assert anchor.context_sentences == "The cat saw the cat."
        assert resolve(anchor, text) == ResolutionResult(second, 1.0, "disambiguated")

    def test_first_of_repeats_inside_sentence(self) -> None:
        text = "Intro line. The cat saw the cat."
        anchor = _anchor("cat", start_hint=16, context="The cat saw the cat.")
        assert resolve(anchor, text).position == 16

    def test_without_context_nearest_start_hint_wins(self) -> None:
        text = "The cat sat. The cat ran."
        result = resolve(_anchor("cat", start_hint=17), text)
        assert result.position == 17
        assert result.confidence == 0.0

    def test_edited_tail_resolves_fuzzily(self) -> None:
        quote = "The borrower shall maintain a leverage ratio below four"
        text = "Intro. The borrower shall maintain a leverage ratio under five."
        result = resolve(_anchor(quote, start_hint=7), text)
        assert result == ResolutionResult(7, 0.7, "fuzzy")

    def test_legacy_context(self) -> None:
        anchor = _anchor("completely missing quote text", prefix="before ", suffix=" after")
        result = resolve(anchor, "before CHANGED after")
        assert result == ResolutionResult(7, 0.5, "legacy_context")

    def test_normalized(self) -> None:
        result = resolve(_anchor("Quick, brown fox"), "The **quick** brown fox!")
        assert result == ResolutionResult(6, 0.4, "normalized")

    def test_normalized_hit_at_start_hint_is_not_a_better_tier(self) -> None:
        result = resolve(_anchor("Quick, brown fox", start_hint=6), "The **quick** brown fox!")
        assert result == ResolutionResult(6, 0.2, "start_hint")

    def test_falls_back_to_start_hint(self) -> None:
        result = resolve(_anchor("nothing like it", start_hint=3), "Totally different content.")
        assert result == ResolutionResult(3, 0.2, "start_hint")
        assert result.success

    def test_fuzzy_window_from_config(self) -> None:
        quote = "The borrower shall maintain a leverage ratio below four"
        text = "x" * 400 + "The borrower shall maintain a leverage ratio under five."
        narrow = resolve(_anchor(quote, start_hint=0), text, config=AnchoringConfig(fuzzy_window=10))
        wide = resolve(_anchor(quote, start_hint=0), text, config=AnchoringConfig(fuzzy_window=400))
        assert narrow.strategy != "fuzzy"
        assert wide == ResolutionResult(400, 0.7, "fuzzy")


class TestHighlightLength:
    def test_confident_uses_quote_length(self) -> None:
        anchor = _anchor("cat")
        assert highlight_length(ResolutionResult(0, 0.7, "fuzzy"), anchor) == 3

    def test_low_confidence_raised_to_minimum(self) -> None:
        anchor = _anchor("cat")
        assert highlight_length(ResolutionResult(0, 0.4, "normalized"), anchor) == 10

    def test_low_confidence_capped(self) -> None:
        anchor = _anchor("w" * 150)
        assert highlight_length(ResolutionResult(0, 0.2, "start_hint"), anchor) == 100

    def test_threshold_is_exclusive(self) -> None:
        anchor = _anchor("cat")
        assert highlight_length(ResolutionResult(0, 0.5, "legacy_context"), anchor) == 3
