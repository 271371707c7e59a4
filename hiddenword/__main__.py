"""Command-line entry point: `python -m hiddenword`.

Subcommands work on a JSON snapshot (see `hiddenword.schema`):
- validate: check and score the snapshot's placements
- opponent: let the opponent choose a move for the snapshot rack
- hint: suggest a move for the snapshot rack
"""

from __future__ import annotations

import argparse
import logging
import random
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import (
    blocklist_path,
    default_seed,
    effective_search_limits,
    show_hidden_modifiers,
    wordlist_path,
)
from .core.board import Board
from .core.difficulty import Difficulty
from .core.lexicon import Lexicon
from .core.opponent import Move, MoveGenerator
from .core.scoring import score_words
from .core.validation import validate_move
from .logging_setup import configure_logging
from .schema import SnapshotState, load_snapshot

log = logging.getLogger("hiddenword")
console = Console()


def render_board(board: Board, highlight: set[tuple[int, int]] | None = None) -> str:
    """Board as text; highlighted cells in bold, hidden modifiers optional."""
    highlight = highlight or set()
    show_hidden = show_hidden_modifiers()
    lines = []
    for y in range(board.size):
        parts = []
        for x in range(board.size):
            cell = board.cell(x, y)
            letter = board.letter_at(x, y)
            if letter:
                text = letter.lower() if cell.letter_override else letter
                parts.append(f"[bold green]{text}[/]" if (x, y) in highlight else text)
            elif cell.modifier and (cell.revealed or show_hidden):
                parts.append("[red]![/]" if cell.modifier.is_evil else "[cyan]+[/]")
            elif cell.is_center:
                parts.append("*")
            else:
                parts.append(".")
        lines.append(" ".join(parts))
    return "\n".join(lines)


def _print_move(state: SnapshotState, move: Move | None, title: str) -> int:
    if move is None:
        console.print(f"[yellow]{title}: no legal move, pass.[/]")
        return 0
    sim = state.board.with_placements(move.placements)
    if sim is None:
        console.print(f"[red]{title}: move does not fit the board.[/]")
        return 1
    console.print(f"[bold]{title}: {move.score} points[/]")
    table = Table()
    table.add_column("Word")
    table.add_column("Cells")
    for word in move.words:
        table.add_row(word.text, " ".join(f"({c.x},{c.y})" for c in word.cells))
    console.print(table)
    console.print(render_board(sim, {(p.x, p.y) for p in move.placements}))
    return 0


def cmd_validate(state: SnapshotState, lexicon: Lexicon, args: argparse.Namespace) -> int:
    sim = state.board.with_placements(state.placements)
    if sim is None:
        console.print("[red]Invalid: placements overlap existing tiles.[/]")
        return 1
    result = validate_move(sim, state.placements, lexicon, require_all_words=args.all_words)
    if not result.ok:
        console.print(f"[red]Invalid ({result.reason}): {result.message}[/]")
        return 1
    total, breakdowns = score_words(sim, state.placements, result.words)
    console.print(f"[bold]Valid move: {total} points[/]")
    table = Table()
    for column in ("Word", "Base", "Word x", "Evil words", "Total"):
        table.add_column(column)
    for bd in breakdowns:
        table.add_row(
            bd.word, str(bd.base_points), str(bd.word_multiplier), str(bd.evil_word_count), str(bd.total)
        )
    console.print(table)
    console.print(render_board(sim, {(p.x, p.y) for p in state.placements}))
    return 0


def cmd_opponent(state: SnapshotState, lexicon: Lexicon, args: argparse.Namespace) -> int:
    difficulty = (
        Difficulty.from_string(args.difficulty)
        if args.difficulty
        else state.difficulty or Difficulty.NORMAL
    )
    generator = MoveGenerator(lexicon, rng=random.Random(args.seed))
    move = generator.choose_move(
        state.board, state.rack, difficulty, limits=effective_search_limits(difficulty)
    )
    return _print_move(state, move, f"Opponent ({difficulty.value})")


def cmd_hint(state: SnapshotState, lexicon: Lexicon, args: argparse.Namespace) -> int:
    generator = MoveGenerator(lexicon, rng=random.Random(args.seed))
    return _print_move(state, generator.find_hint(state.board, state.rack), "Hint")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hiddenword",
        description="Validate, score and search moves on a hidden-modifier word board.",
    )
    parser.add_argument("--wordlist", help="word list file (default: bundled list)")
    parser.add_argument("--blocklist", help="block-list file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="validate and score the snapshot placements")
    p_validate.add_argument("snapshot")
    p_validate.add_argument(
        "--all-words", action="store_true", help="also check every word on the whole board"
    )
    p_validate.set_defaults(func=cmd_validate)

    p_opponent = sub.add_parser("opponent", help="choose the opponent move for the rack")
    p_opponent.add_argument("snapshot")
    p_opponent.add_argument("--difficulty", choices=[d.value for d in Difficulty])
    p_opponent.add_argument("--seed", type=int, default=default_seed())
    p_opponent.set_defaults(func=cmd_opponent)

    p_hint = sub.add_parser("hint", help="suggest a move for the rack")
    p_hint.add_argument("snapshot")
    p_hint.add_argument("--seed", type=int, default=default_seed())
    p_hint.set_defaults(func=cmd_hint)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        state = load_snapshot(args.snapshot).build()
    except (OSError, ValueError) as exc:
        # pydantic.ValidationError is a ValueError subclass
        kind = "Invalid snapshot" if isinstance(exc, ValidationError) else "Cannot load snapshot"
        console.print(f"[red]{kind}: {escape(str(exc))}[/]")
        return 2
    log.debug(
        "Snapshot %s: %d rack tiles, %d placements",
        args.snapshot,
        len(state.rack),
        len(state.placements),
    )

    try:
        lexicon = Lexicon.from_path(
            args.wordlist or wordlist_path(), args.blocklist or blocklist_path()
        )
    except OSError as exc:
        console.print(f"[red]Cannot load word list: {escape(str(exc))}[/]")
        return 2

    return args.func(state, lexicon, args)


if __name__ == "__main__":
    sys.exit(main())
