from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from .board import Board
from .constants import BONUS_WORDS
from .types import Modifier, PlacedTile, ScoreBreakdown, WordPlay


@dataclass
class RevealResult:
    """Board after a committed turn plus labels of modifiers revealed just now."""
    board: Board
    revealed_now: list[str] = field(default_factory=list)


def score_words(
    board: Board,
    placements: Sequence[PlacedTile],
    words: Sequence[WordPlay],
) -> tuple[int, list[ScoreBreakdown]]:
    """Computes the turn score and a breakdown per word.

    Modifiers apply only on cells placed this turn whose modifier has not
    triggered yet. EVIL_LETTER negates that letter; each EVIL_WORD subtracts
    the base once more after the word multiplier:
    `base * word_multiplier - base * evil_word_count`.
    Bonus words score a flat amount and ignore modifiers.
    """
    new_cells = {(p.x, p.y) for p in placements}
    total_score = 0
    breakdowns: list[ScoreBreakdown] = []

    for word in words:
        text = word.text.upper()
        if text in BONUS_WORDS:
            flat = BONUS_WORDS[text]
            total_score += flat
            breakdowns.append(ScoreBreakdown(text, flat, 1, 0, flat, bonus_word=True))
            continue

        base = 0
        word_multiplier = 1
        evil_word_count = 0
        for wc in word.cells:
            tile = board.tiles_by_id.get(wc.tile_id)
            if tile is None:
                continue
            cell = board.cell(wc.x, wc.y)
            letter_score = tile.value
            evil_letter = False
            if (wc.x, wc.y) in new_cells and cell.modifier and not cell.triggered:
                if cell.modifier is Modifier.DL:
                    letter_score *= 2
                elif cell.modifier is Modifier.TL:
                    letter_score *= 3
                elif cell.modifier is Modifier.DW:
                    word_multiplier *= 2
                elif cell.modifier is Modifier.TW:
                    word_multiplier *= 3
                elif cell.modifier is Modifier.EVIL_LETTER:
                    evil_letter = True
                elif cell.modifier is Modifier.EVIL_WORD:
                    evil_word_count += 1
            base += -letter_score if evil_letter else letter_score

        total = base * word_multiplier - base * evil_word_count
        total_score += total
        breakdowns.append(
            ScoreBreakdown(
                word=text,
                base_points=base,
                word_multiplier=word_multiplier,
                evil_word_count=evil_word_count,
                total=total,
            )
        )
    return total_score, breakdowns


def score_turn(
    board: Board,
    placements: Sequence[PlacedTile],
    words: Sequence[WordPlay],
) -> int:
    total, _ = score_words(board, placements, words)
    return total


def count_evil_hits(board: Board, placements: Sequence[PlacedTile]) -> int:
    """Number of new tiles landing on an evil modifier that has not triggered yet."""
    hits = 0
    for p in placements:
        if not board.inside(p.x, p.y):
            continue
        cell = board.cell(p.x, p.y)
        if cell.triggered or cell.modifier is None:
            continue
        if cell.modifier.is_evil:
            hits += 1
    return hits


def apply_reveal_this_turn(
    board: Board,
    placements: Sequence[PlacedTile],
    *,
    now: float | None = None,
) -> RevealResult:
    """After a committed turn: reveal and trigger the modifiers under the new tiles.

    Must run exactly once per committed turn, after scoring. Returns a new
    board; the input board is left as it was.
    """
    next_board = board.copy()
    revealed_now: list[str] = []
    stamp = time.time() if now is None else now
    for p in placements:
        if not next_board.inside(p.x, p.y):
            continue
        cell = next_board.cell(p.x, p.y)
        if cell.modifier is None:
            continue
        if not cell.revealed:
            cell.revealed = True
            cell.revealed_at = stamp
            revealed_now.append(cell.modifier.label)
        cell.triggered = True
    return RevealResult(next_board, revealed_now)
