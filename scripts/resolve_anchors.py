#!/usr/bin/env python3
"""Resolve stored anchors against the current text of a saved message.

Reads comment/anchor records (JSON Lines), re-resolves each one against the
message and prints one JSON row per comment: the ladder tier that matched,
its confidence, the materialized leaf span and the highlighted text.
Comments that cannot be materialized are reported with ``"span": null``.

Usage:
    python3 scripts/resolve_anchors.py --anchors comments.jsonl --message msg.html
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from anchoring.config import DEFAULT_CONFIG, load_config
from anchoring.leaves import canonical_leaves, read_message_leaves
from anchoring.records import AnchorRecordError, load_anchor_records
from anchoring.render import RenderedMessage, locate

log = logging.getLogger("resolve_anchors")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve stored anchors against a saved message."
    )
    parser.add_argument("--anchors", required=True, type=Path, help="JSON Lines anchor records")
    parser.add_argument(
        "--message", required=True, type=Path,
        help="Saved message (.html/.htm parsed as markup, otherwise plain text)",
    )
    parser.add_argument(
        "--min-confidence", type=float, default=0.0,
        help="Drop rows below this confidence (default: 0.0)",
    )
    parser.add_argument(
        "--fingerprint", default="",
        help="Fingerprint stamped on the message when first seen (default: computed)",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON tunables file")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    for path in (args.anchors, args.message):
        if not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            return 1
    config = load_config(args.config) if args.config else DEFAULT_CONFIG

    try:
        pairs = load_anchor_records(args.anchors)
    except AnchorRecordError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    message = RenderedMessage(
        container_id=args.message.name,
        leaves=tuple(canonical_leaves(read_message_leaves(args.message))),
        stamped_fingerprint=args.fingerprint,
    )
    fp = message.fingerprint

    rows: list[dict[str, Any]] = []
    for comment_id, anchor in pairs:
        located = locate(anchor, message, config=config)
        row: dict[str, Any] = {
            "commentId": comment_id,
            "fingerprintMatch": anchor.document_fingerprint == fp,
            "span": None,
        }
        if located is None:
            log.warning("comment %s could not be materialized", comment_id)
        else:
            if located.resolution.confidence < args.min_confidence:
                log.debug("dropping %s (confidence %.2f)", comment_id, located.resolution.confidence)
                continue
            row.update({
                "strategy": located.resolution.strategy,
                "confidence": round(located.resolution.confidence, 4),
                "position": located.resolution.position,
                "span": {
                    "startLeaf": located.span.start_leaf,
                    "startOffset": located.span.start_offset,
                    "endLeaf": located.span.end_leaf,
                    "endOffset": located.span.end_offset,
                },
                "text": located.text,
            })
        rows.append(row)

    log.info("resolved %d of %d anchors", sum(1 for r in rows if r["span"]), len(pairs))
    dump_json(rows)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
