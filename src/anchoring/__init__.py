"""Durable text anchors for re-rendered chat transcripts."""

from anchoring.builder import create_anchor
from anchoring.config import AnchoringConfig, DEFAULT_CONFIG, config_from_dict, load_config
from anchoring.disambiguate import disambiguate_by_context
from anchoring.fingerprint import fingerprint
from anchoring.fuzzy import find_all_matches, find_normalized, fuzzy_find
from anchoring.geometry import merge_rectangles, reading_order
from anchoring.leaves import (
    canonical_leaves,
    canonical_text,
    leaves_from_html,
    leaves_from_text,
    selection_from_range,
)
from anchoring.materialize import MalformedLeafSequenceError, materialize, span_text
from anchoring.prompt import compose_followup_prompt
from anchoring.records import (
    AnchorRecordError,
    anchor_from_record,
    anchor_to_record,
    dumps_anchor,
    load_anchor_records,
    loads_anchor,
    save_anchor_records,
)
from anchoring.render import LocatedHighlight, RenderedMessage, locate, render_pass
from anchoring.resolver import highlight_length, resolve
from anchoring.sentences import extract_sentence_context
from anchoring.similarity import levenshtein, similarity
from anchoring.types import (
    Anchor,
    MaterializedSpan,
    Rect,
    ResolutionResult,
    SelectionDescriptor,
    TextLeaf,
)

__all__ = [
    "Anchor",
    "AnchorRecordError",
    "AnchoringConfig",
    "DEFAULT_CONFIG",
    "LocatedHighlight",
    "MalformedLeafSequenceError",
    "MaterializedSpan",
    "Rect",
    "RenderedMessage",
    "ResolutionResult",
    "SelectionDescriptor",
    "TextLeaf",
    "anchor_from_record",
    "anchor_to_record",
    "canonical_leaves",
    "canonical_text",
    "compose_followup_prompt",
    "config_from_dict",
    "create_anchor",
    "disambiguate_by_context",
    "dumps_anchor",
    "extract_sentence_context",
    "find_all_matches",
    "find_normalized",
    "fingerprint",
    "fuzzy_find",
    "highlight_length",
    "leaves_from_html",
    "leaves_from_text",
    "levenshtein",
    "load_anchor_records",
    "load_config",
    "loads_anchor",
    "locate",
    "materialize",
    "merge_rectangles",
    "reading_order",
    "render_pass",
    "resolve",
    "save_anchor_records",
    "selection_from_range",
    "similarity",
    "span_text",
]
