"""Persisted Anchor records.

Records use the camelCase field names shared with the storage collaborator:
``documentFingerprint``, ``quoteExact``, ``contextSentences``, ``startHint``.
Older records name the fingerprint ``messageFingerprint`` and carry
``prefix``/``suffix`` context instead of sentences; both shapes decode.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from anchoring.types import Anchor


class AnchorRecordError(ValueError):
    """A stored record cannot be decoded into an Anchor."""


def anchor_to_record(anchor: Anchor) -> dict[str, Any]:
    record: dict[str, Any] = {
        "documentFingerprint": anchor.document_fingerprint,
        "quoteExact": anchor.quote_exact,
        "contextSentences": anchor.context_sentences,
        "startHint": anchor.start_hint,
    }
    if anchor.prefix:
        record["prefix"] = anchor.prefix
    if anchor.suffix:
        record["suffix"] = anchor.suffix
    return record


def _str_field(record: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise AnchorRecordError(f"{key} must be a string, got {type(value).__name__}")
        return value
    return ""


def anchor_from_record(record: dict[str, Any]) -> Anchor:
    """Decode a stored record (current or legacy shape).

    Raises:
        AnchorRecordError: If the record is not a mapping, lacks a quote, or
            carries an invalid ``startHint``.
    """
    if not isinstance(record, dict):
        raise AnchorRecordError(f"Anchor record must be an object, got {type(record).__name__}")

    raw_hint = record.get("startHint", 0)
    if isinstance(raw_hint, bool) or not isinstance(raw_hint, (int, float)):
        raise AnchorRecordError(f"startHint must be a number, got {raw_hint!r}")

    try:
        return Anchor(
            document_fingerprint=_str_field(record, "documentFingerprint", "messageFingerprint"),
            quote_exact=_str_field(record, "quoteExact"),
            context_sentences=_str_field(record, "contextSentences"),
            start_hint=int(raw_hint),
            prefix=_str_field(record, "prefix"),
            suffix=_str_field(record, "suffix"),
        )
    except AnchorRecordError:
        raise
    except ValueError as exc:
        raise AnchorRecordError(str(exc)) from exc


def dumps_anchor(anchor: Anchor) -> bytes:
    return orjson.dumps(anchor_to_record(anchor), option=orjson.OPT_SORT_KEYS)


def loads_anchor(raw: bytes | str) -> Anchor:
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise AnchorRecordError(f"Invalid anchor JSON: {exc}") from exc
    return anchor_from_record(payload)


def load_anchor_records(path: Path) -> list[tuple[str, Anchor]]:
    """Load ``(comment_id, anchor)`` pairs from a JSON Lines file.

    Each line is either a bare anchor record or a comment record holding
    ``commentId`` and ``anchor``. Bare records get positional ids
    (``line-<n>``). Blank lines are skipped.
    """
    pairs: list[tuple[str, Anchor]] = []
    for lineno, line in enumerate(path.read_bytes().split(b"\n"), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            payload = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            raise AnchorRecordError(f"{path}:{lineno}: invalid JSON: {exc}") from exc
        if isinstance(payload, dict) and isinstance(payload.get("anchor"), dict):
            comment_id = str(payload.get("commentId") or f"line-{lineno}")
            pairs.append((comment_id, anchor_from_record(payload["anchor"])))
        else:
            pairs.append((f"line-{lineno}", anchor_from_record(payload)))
    return pairs


def save_anchor_records(pairs: list[tuple[str, Anchor]], path: Path) -> None:
    """Write ``(comment_id, anchor)`` pairs as comment records (JSON Lines)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        orjson.dumps(
            {"commentId": comment_id, "anchor": anchor_to_record(anchor)},
            option=orjson.OPT_SORT_KEYS,
        )
        for comment_id, anchor in pairs
    ]
    path.write_bytes(b"\n".join(lines) + b"\n" if lines else b"")
