"""Tests for scripts/create_anchor.py."""
from __future__ import annotations

import importlib.util
from pathlib import Path

import orjson

from anchoring.records import load_anchor_records

TEXT = "The cat sat. The cat ran."


def _load_create_anchor_module() -> object:
    root = Path(__file__).resolve().parents[1]
    script_path = root / "scripts" / "create_anchor.py"
    spec = importlib.util.spec_from_file_location("create_anchor", script_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def _message(tmp_path: Path, text: str = TEXT, name: str = "message.txt") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestCreateAnchorScript:
    def test_prints_record(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        mod = _load_create_anchor_module()
        message = _message(tmp_path)
        rc = mod.main(["--message", str(message), "--start", "17", "--end", "20"])
        assert rc == 0
        record = orjson.loads(capsys.readouterr().out)
        assert record["quoteExact"] == "cat"
        assert record["startHint"] == 17
        assert record["contextSentences"] == "The cat ran."

    def test_html_message(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        mod = _load_create_anchor_module()
        message = _message(
            tmp_path,
            '<p>Area <span class="katex"><span class="katex-mathml">x^2</span>'
            '<span class="katex-html" aria-hidden="true">x2</span></span> grows.</p>',
            name="message.html",
        )
        # Rendered text: "Area x^2x2 grows."
        rc = mod.main(["--message", str(message), "--start", "0", "--end", "16"])
        assert rc == 0
        assert orjson.loads(capsys.readouterr().out)["quoteExact"] == "Area x2 grows"

    def test_append_assigns_ids(self, tmp_path: Path) -> None:
        mod = _load_create_anchor_module()
        message = _message(tmp_path)
        out = tmp_path / "comments.jsonl"
        base = ["--message", str(message), "--append", str(out)]
        assert mod.main(base + ["--start", "4", "--end", "7", "--comment-id", "c1"]) == 0
        assert mod.main(base + ["--start", "21", "--end", "24"]) == 0
        pairs = load_anchor_records(out)
        assert [cid for cid, _ in pairs] == ["c1", "comment-2"]
        assert [a.quote_exact for _, a in pairs] == ["cat", "ran"]

    def test_missing_message(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        mod = _load_create_anchor_module()
        rc = mod.main(["--message", str(tmp_path / "nope.txt"), "--start", "0", "--end", "1"])
        assert rc == 1
        assert "message not found" in capsys.readouterr().err

    def test_invalid_range(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        mod = _load_create_anchor_module()
        rc = mod.main(["--message", str(_message(tmp_path)), "--start", "10", "--end", "500"])
        assert rc == 1
        assert "Invalid selection range" in capsys.readouterr().err

    def test_blank_selection(self, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
        mod = _load_create_anchor_module()
        rc = mod.main(["--message", str(_message(tmp_path)), "--start", "12", "--end", "13"])
        assert rc == 1
        assert "no visible text" in capsys.readouterr().err
