#!/usr/bin/env python3
"""Create an anchor record for a character range of a saved message.

The range is given in rendered-text offsets (the text a reader would select,
equation mirrors included). Prints the anchor record as JSON to stdout and
optionally appends it as a comment record to a JSON Lines file.

Usage:
    python3 scripts/create_anchor.py --message msg.html --start 120 --end 164 \
      --comment-id c1 --append comments.jsonl
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from anchoring.builder import create_anchor
from anchoring.config import DEFAULT_CONFIG, load_config
from anchoring.leaves import canonical_text, read_message_leaves, selection_from_range
from anchoring.records import anchor_to_record, load_anchor_records, save_anchor_records

log = logging.getLogger("create_anchor")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Create an anchor record for a range of a saved message."
    )
    parser.add_argument(
        "--message", required=True, type=Path,
        help="Saved message (.html/.htm parsed as markup, otherwise plain text)",
    )
    parser.add_argument("--start", required=True, type=int, help="Rendered-text start offset")
    parser.add_argument("--end", required=True, type=int, help="Rendered-text end offset (exclusive)")
    parser.add_argument("--comment-id", default=None, help="Comment id for --append")
    parser.add_argument(
        "--append", type=Path, default=None,
        help="JSON Lines file of comment records to append to",
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

    if not args.message.exists():
        print(f"Error: message not found: {args.message}", file=sys.stderr)
        return 1
    config = load_config(args.config) if args.config else DEFAULT_CONFIG

    leaves = read_message_leaves(args.message)
    try:
        selection = selection_from_range(leaves, args.start, args.end)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    anchor = create_anchor(selection, canonical_text(leaves), config=config)
    if anchor is None:
        print("Error: selection holds no visible text", file=sys.stderr)
        return 1
    log.info("anchored %d chars at %d", len(anchor.quote_exact), anchor.start_hint)

    if args.append is not None:
        pairs = load_anchor_records(args.append) if args.append.exists() else []
        comment_id = args.comment_id or f"comment-{len(pairs) + 1}"
        pairs.append((comment_id, anchor))
        save_anchor_records(pairs, args.append)
        log.info("appended %s to %s", comment_id, args.append)

    dump_json(anchor_to_record(anchor))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
