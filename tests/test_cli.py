from __future__ import annotations

import json
from pathlib import Path

import pytest

from hiddenword.__main__ import build_parser, main


def _rows() -> list[str]:
    grid = [["."] * 11 for _ in range(11)]
    for x, ch in zip(range(4, 7), "CAT"):
        grid[5][x] = ch
    return ["".join(r) for r in grid]


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HIDDENWORD_LOG_PATH", str(tmp_path / "cli.log"))


def _snapshot(tmp_path: Path, **data) -> str:
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
    args = build_parser().parse_args(["opponent", "x.json", "--difficulty", "easy", "--seed", "3"])
    assert args.command == "opponent" and args.seed == 3


def test_validate_ok(tmp_path: Path, capsys) -> None:
    snap = _snapshot(tmp_path, rows=_rows(), rack="S", placements=[{"x": 7, "y": 5, "letter": "S"}])
    assert main(["validate", snap]) == 0
    assert "CATS" in capsys.readouterr().out


def test_validate_rejects_unknown_word(tmp_path: Path, capsys) -> None:
    snap = _snapshot(tmp_path, rows=_rows(), rack="S", placements=[{"x": 6, "y": 6, "letter": "S"}])
    assert main(["validate", snap]) == 1
    assert "Not in dictionary: TS" in capsys.readouterr().out


def test_validate_rejects_overlap(tmp_path: Path) -> None:
    snap = _snapshot(tmp_path, rows=_rows(), rack="S", placements=[{"x": 5, "y": 5, "letter": "S"}])
    assert main(["validate", snap]) == 1


def test_opponent_and_hint(tmp_path: Path, capsys) -> None:
    snap = _snapshot(tmp_path, rows=_rows(), rack="SHEBORN", difficulty="hard")
    assert main(["opponent", snap, "--seed", "1"]) == 0
    assert "Opponent (hard)" in capsys.readouterr().out
    assert main(["hint", snap, "--seed", "1"]) == 0
    assert "Hint" in capsys.readouterr().out


def test_opponent_without_move(tmp_path: Path, capsys) -> None:
    snap = _snapshot(tmp_path, rack="QQ")
    assert main(["opponent", snap, "--difficulty", "easy"]) == 0
    assert "no legal move" in capsys.readouterr().out


def test_bad_input_exits_with_2(tmp_path: Path) -> None:
    assert main(["validate", str(tmp_path / "missing.json")]) == 2
    bad = _snapshot(tmp_path, rack="12")
    assert main(["validate", bad]) == 2
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert main(["hint", str(broken)]) == 2


def test_custom_word_list(tmp_path: Path) -> None:
    words = tmp_path / "words.txt"
    words.write_text("ZEBRA\n", encoding="utf-8")
    snap = _snapshot(tmp_path, rows=_rows(), rack="S", placements=[{"x": 7, "y": 5, "letter": "S"}])
    # CAT and CATS are unknown to this list
    assert main(["--wordlist", str(words), "validate", snap]) == 1


def test_block_list_applies_to_bundled_words(tmp_path: Path, capsys) -> None:
    blocked = tmp_path / "blocked.txt"
    blocked.write_text("cats\n", encoding="utf-8")
    snap = _snapshot(tmp_path, rows=_rows(), rack="S", placements=[{"x": 7, "y": 5, "letter": "S"}])
    assert main(["--blocklist", str(blocked), "validate", snap]) == 1
    assert "Not in dictionary: CATS" in capsys.readouterr().out
