"""Tests for anchoring.expansion module."""
from anchoring.expansion import (
    char_class,
    expand_to_word_boundaries,
    is_ideographic,
    snap_selection_to_units,
)
from anchoring.types import SelectionDescriptor, TextLeaf


class TestCharClass:
    def test_classes(self) -> None:
        assert char_class(" ") == "space"
        assert char_class("中") == "ideographic"
        assert char_class("あ") == "ideographic"
        assert char_class("a") == "word"
        assert char_class("7") == "word"
        assert char_class(",") == "boundary"

    def test_hangul_is_not_ideographic(self) -> None:
        assert not is_ideographic("한")
        assert char_class("한") == "word"

    def test_fullwidth_punctuation_is_ideographic(self) -> None:
        assert is_ideographic("！")


class TestExpandToWordBoundaries:
    def test_expands_split_words(self) -> None:
        text = "the leverage ratio covenant"
        start = text.index("verage")
        end = text.index("ratio") + 3
        assert expand_to_word_boundaries(text, start, end) == (4, 18)
        assert text[4:18] == "leverage ratio"

    def test_whole_words_unchanged(self) -> None:
        text = "the leverage ratio covenant"
        assert expand_to_word_boundaries(text, 4, 12) == (4, 12)

    def test_stops_at_punctuation(self) -> None:
        text = "x=(alpha)+beta"
        start = text.index("lph")
        assert expand_to_word_boundaries(text, start, start + 3) == (3, 8)

    def test_never_shrinks(self) -> None:
        text = "partial selections grow outward"
        for start, end in [(2, 5), (0, 7), (8, 12), (20, 31)]:
            new_start, new_end = expand_to_word_boundaries(text, start, end)
            assert new_start <= start
            assert new_end >= end

    def test_ideographic_never_expands(self) -> None:
        text = "我们去公园散步"
        start, end = 3, 5
        assert expand_to_word_boundaries(text, start, end) == (3, 5)

    def test_ideographic_with_punctuation_unchanged(self) -> None:
        text = "abc公园！def"
        assert expand_to_word_boundaries(text, 3, 6) == (3, 6)

    def test_script_transition_stops_expansion(self) -> None:
        text = "中文word更多"
        start = text.index("or")
        assert expand_to_word_boundaries(text, start, start + 2) == (2, 6)

    def test_collapsed_span(self) -> None:
        assert expand_to_word_boundaries("word", 2, 2) == (2, 2)


class TestSnapSelectionToUnits:
    LEAVES = (
        TextLeaf("Area is "),
        TextLeaf("x^2", unit_id=0, duplicate=True),
        TextLeaf("x", unit_id=0),
        TextLeaf("2", unit_id=0),
        TextLeaf(" units."),
    )

    def test_start_inside_unit_snaps_to_unit_start(self) -> None:
        sel = SelectionDescriptor(self.LEAVES, start_leaf=3, start_offset=0, end_leaf=4, end_offset=6)
        snapped = snap_selection_to_units(sel)
        assert (snapped.start_leaf, snapped.start_offset) == (1, 0)
        assert (snapped.end_leaf, snapped.end_offset) == (4, 6)

    def test_end_inside_unit_snaps_to_unit_end(self) -> None:
        sel = SelectionDescriptor(self.LEAVES, start_leaf=0, start_offset=0, end_leaf=1, end_offset=1)
        snapped = snap_selection_to_units(sel)
        assert (snapped.end_leaf, snapped.end_offset) == (3, 1)

    def test_plain_selection_untouched(self) -> None:
        sel = SelectionDescriptor(self.LEAVES, start_leaf=0, start_offset=2, end_leaf=0, end_offset=6)
        assert snap_selection_to_units(sel) == sel

    def test_end_at_unit_start_not_snapped(self) -> None:
        sel = SelectionDescriptor(self.LEAVES, start_leaf=0, start_offset=0, end_leaf=1, end_offset=0)
        assert snap_selection_to_units(sel) == sel
