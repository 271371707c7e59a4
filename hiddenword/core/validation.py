"""Move validation shared by the human turn and the opponent search.

The board handed to `validate_move` already carries this turn's tentative
tiles (see `Board.with_placements`). `placements` says which of those tiles
are new. Rule violations never raise: they come back as a failed
`ValidationResult` with a short reason code and a user-facing message.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .board import Board
from .constants import ALPHABET
from .lexicon import Lexicon
from .rules import (
    collect_board_words,
    connected_to_existing,
    covers_center,
    cross_word,
    has_existing_tiles,
    main_word,
    placements_in_line,
)
from .types import PlacedTile, WordPlay

NO_TILES = "no_tiles_placed"
PLACEMENT_MISMATCH = "placement_mismatch"
OVERRIDE_ON_PLAIN_TILE = "override_on_plain_tile"
BLANK_WITHOUT_LETTER = "blank_without_letter"
MUST_COVER_CENTER = "first_move_must_cover_center"
NOT_CONNECTED = "not_connected"
NOT_IN_ONE_LINE = "not_in_one_line"
GAPS_IN_LINE = "gaps_in_line"
SINGLE_LETTER_INVALID = "single_letter_invalid"
WORD_NOT_IN_DICT = "word_not_in_dict"
NO_WORD_FORMED = "no_word_formed"

_MESSAGES = {
    NO_TILES: "Place at least one tile before submitting.",
    PLACEMENT_MISMATCH: "Placed tiles do not match the board.",
    OVERRIDE_ON_PLAIN_TILE: "Only a blank tile can stand for another letter.",
    BLANK_WITHOUT_LETTER: "Choose a letter for the blank tile.",
    MUST_COVER_CENTER: "First move must cover the center start square.",
    NOT_CONNECTED: "Move must connect to existing tiles.",
    NOT_IN_ONE_LINE: "Tiles must be placed in a single straight line.",
    GAPS_IN_LINE: "Move contains a gap between tiles.",
    SINGLE_LETTER_INVALID: "Single-letter word is not valid.",
    NO_WORD_FORMED: "Place tiles to form a valid word.",
}


@dataclass
class ValidationResult:
    """Result of validating one turn.

    - ok: whether the placement is legal
    - words: formed words (main word first) on success, or the offending
      word(s) on failure when one could be identified
    - reason: short reason code (None on success); dictionary failures carry
      the word as suffix, e.g. `word_not_in_dict:TS`
    """

    ok: bool
    words: list[WordPlay] = field(default_factory=list)
    reason: str | None = None

    @property
    def code(self) -> str | None:
        return self.reason.split(":", 1)[0] if self.reason else None

    @property
    def message(self) -> str:
        if self.reason is None:
            return ""
        code, _, word = self.reason.partition(":")
        if code == WORD_NOT_IN_DICT:
            return f"Not in dictionary: {word}"
        return _MESSAGES.get(code, self.reason)

    @classmethod
    def fail(cls, reason: str, words: list[WordPlay] | None = None) -> ValidationResult:
        return cls(False, list(words or []), reason)


def _placements_match_board(board: Board, placements: Sequence[PlacedTile]) -> bool:
    seen: set[tuple[int, int]] = set()
    for p in placements:
        if not board.inside(p.x, p.y) or (p.x, p.y) in seen:
            return False
        seen.add((p.x, p.y))
        if p.tile_id not in board.tiles_by_id:
            return False
        cell = board.cell(p.x, p.y)
        if cell.tile_id != p.tile_id or cell.letter_override != p.letter_override:
            return False
    return True


def _check_overrides(board: Board, placements: Sequence[PlacedTile]) -> str | None:
    """A blank needs exactly one A-Z letter; any other tile shows its own."""
    for p in placements:
        tile = board.tiles_by_id[p.tile_id]
        if not tile.is_blank:
            if p.letter_override is not None:
                return OVERRIDE_ON_PLAIN_TILE
        elif len(p.letter_override or "") != 1 or p.letter_override not in ALPHABET:
            return BLANK_WITHOUT_LETTER
    return None


def validate_move(
    board: Board,
    placements: Sequence[PlacedTile],
    lexicon: Lexicon,
    *,
    require_all_words: bool = False,
) -> ValidationResult:
    """Checks turn legality and returns the words formed.

    Rules are applied in a fixed order; the first violated rule decides the
    reason. `require_all_words` additionally checks every run on the whole
    board; the per-turn path does not need it.
    """
    if not placements:
        return ValidationResult.fail(NO_TILES)
    if not _placements_match_board(board, placements):
        return ValidationResult.fail(PLACEMENT_MISMATCH)
    override_error = _check_overrides(board, placements)
    if override_error:
        return ValidationResult.fail(override_error)

    if not has_existing_tiles(board, placements):
        if not covers_center(board, placements):
            return ValidationResult.fail(MUST_COVER_CENTER)
    elif not connected_to_existing(board, placements):
        return ValidationResult.fail(NOT_CONNECTED)

    direction = placements_in_line(placements)
    if direction is None:
        return ValidationResult.fail(NOT_IN_ONE_LINE)

    main = main_word(board, placements, direction)
    if main is None:
        return ValidationResult.fail(GAPS_IN_LINE)

    words: list[WordPlay] = []
    keys: set[tuple[tuple[int, int], ...]] = set()
    if len(main.text) > 1:
        words.append(main)
        keys.add(main.key)

    for p in placements:
        cross = cross_word(board, p.x, p.y, direction)
        if cross is None or cross.key in keys:
            continue
        keys.add(cross.key)
        words.append(cross)

    if not words and len(main.text) == 1:
        if not lexicon.is_word(main.text):
            return ValidationResult.fail(SINGLE_LETTER_INVALID, [main])
        words.append(main)

    for word in words:
        if not lexicon.is_word(word.text):
            return ValidationResult.fail(f"{WORD_NOT_IN_DICT}:{word.text}", [word])

    if require_all_words:
        bad = find_invalid_board_words(board, lexicon)
        if bad:
            return ValidationResult.fail(f"{WORD_NOT_IN_DICT}:{bad[0].text}", [bad[0]])

    if not words:
        return ValidationResult.fail(NO_WORD_FORMED)

    return ValidationResult(True, words)


def find_invalid_board_words(board: Board, lexicon: Lexicon) -> list[WordPlay]:
    """Runs of 2+ tiles anywhere on the board that are not dictionary words."""
    return [w for w in collect_board_words(board) if not lexicon.is_word(w.text)]
