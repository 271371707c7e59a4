from __future__ import annotations

from hiddenword.core.board import Board
from hiddenword.core.lexicon import Lexicon
from hiddenword.core.scoring import apply_reveal_this_turn
from hiddenword.core.types import Direction, Modifier, PlacedTile
from hiddenword.core.validation import (
    BLANK_WITHOUT_LETTER,
    GAPS_IN_LINE,
    MUST_COVER_CENTER,
    NO_TILES,
    NOT_CONNECTED,
    NOT_IN_ONE_LINE,
    OVERRIDE_ON_PLAIN_TILE,
    PLACEMENT_MISMATCH,
    SINGLE_LETTER_INVALID,
    WORD_NOT_IN_DICT,
    find_invalid_board_words,
    validate_move,
)


def _validate(board: Board, placements: list[PlacedTile], lexicon: Lexicon, **kw):
    sim = board.with_placements(placements)
    assert sim is not None
    return validate_move(sim, placements, lexicon, **kw)


def test_first_move_through_center(board: Board, lexicon: Lexicon, lay_word) -> None:
    result = _validate(board, lay_word(board, "CAT", 4, 5), lexicon)
    assert result.ok
    assert [w.text for w in result.words] == ["CAT"]
    assert result.reason is None and result.message == ""


def test_first_move_off_center(board: Board, lexicon: Lexicon, lay_word) -> None:
    result = _validate(board, lay_word(board, "CAT", 0, 0), lexicon)
    assert not result.ok
    assert result.reason == MUST_COVER_CENTER


def test_cross_word_not_in_dictionary(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    result = _validate(board, lay_word(board, "S", 6, 6), lexicon)
    assert not result.ok
    assert result.reason == f"{WORD_NOT_IN_DICT}:TS"
    assert result.code == WORD_NOT_IN_DICT
    assert result.message == "Not in dictionary: TS"
    assert [w.text for w in result.words] == ["TS"]


def test_extending_existing_letter_down(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    result = _validate(board, lay_word(board, "TS", 5, 6, Direction.DOWN), lexicon)
    assert result.ok
    assert [w.text for w in result.words] == ["ATS"]
    assert result.words[0].key == ((5, 5), (5, 6), (5, 7))


def test_single_tile_forming_only_a_cross_word(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    result = _validate(board, lay_word(board, "A", 6, 4), lexicon)
    assert result.ok
    assert [w.text for w in result.words] == ["AT"]


def test_main_word_first_then_cross_words(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    # A lands under the T of CAT and forms "TA" down
    result = _validate(board, lay_word(board, "AT", 6, 6), lexicon)
    assert result.ok
    assert [w.text for w in result.words] == ["AT", "TA"]


def test_no_tiles(board: Board, lexicon: Lexicon) -> None:
    result = validate_move(board, [], lexicon)
    assert not result.ok and result.reason == NO_TILES
    assert "at least one tile" in result.message


def test_placements_must_be_on_board(board: Board, lexicon: Lexicon, lay_word) -> None:
    placements = lay_word(board, "CAT", 4, 5)
    # board without the tentative tiles
    result = validate_move(board, placements, lexicon)
    assert result.reason == PLACEMENT_MISMATCH
    sim = board.with_placements(placements)
    duplicate = [placements[0], placements[0]]
    assert validate_move(sim, duplicate, lexicon).reason == PLACEMENT_MISMATCH


def test_unregistered_tile_is_a_mismatch(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "AT", 5, 5, commit=True)
    ghost = [PlacedTile("ghost", 4, 5)]
    result = _validate(board, ghost, lexicon)
    assert not result.ok
    assert result.reason == PLACEMENT_MISMATCH
    assert result.words == []


def test_not_connected(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    result = _validate(board, lay_word(board, "AT", 0, 0), lexicon)
    assert result.reason == NOT_CONNECTED


def test_not_in_one_line(board: Board, lexicon: Lexicon, lay_word) -> None:
    placements = [*lay_word(board, "A", 5, 5), *lay_word(board, "T", 6, 6)]
    result = _validate(board, placements, lexicon)
    assert result.reason == NOT_IN_ONE_LINE


def test_gap_in_line(board: Board, lexicon: Lexicon, lay_word) -> None:
    placements = [*lay_word(board, "C", 5, 5), *lay_word(board, "T", 7, 5)]
    result = _validate(board, placements, lexicon)
    assert result.reason == GAPS_IN_LINE


def test_gap_bridged_by_existing_tile(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "A", 5, 5, commit=True)
    placements = [*lay_word(board, "C", 4, 5), *lay_word(board, "T", 6, 5)]
    result = _validate(board, placements, lexicon)
    assert result.ok
    assert [w.text for w in result.words] == ["CAT"]


def test_single_letter_rule(board: Board, lexicon: Lexicon, lay_word) -> None:
    ok = _validate(board, lay_word(board, "A", 5, 5), lexicon)
    assert ok.ok and [w.text for w in ok.words] == ["A"]
    bad = _validate(board, lay_word(board, "C", 5, 5), lexicon)
    assert not bad.ok and bad.reason == SINGLE_LETTER_INVALID


def test_blank_uses_its_override(board: Board, lexicon: Lexicon, lay_word, make_tiles) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    (blank,) = make_tiles("?")
    board.register_tiles([blank])
    result = _validate(board, [PlacedTile(blank.id, 7, 5, letter_override="S")], lexicon)
    assert result.ok
    assert [w.text for w in result.words] == ["CATS"]


def test_whole_board_check(board: Board, lexicon: Lexicon, lay_word) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    lay_word(board, "QX", 0, 0, commit=True)
    placements = lay_word(board, "S", 7, 5)
    assert _validate(board, placements, lexicon).ok
    strict = _validate(board, placements, lexicon, require_all_words=True)
    assert not strict.ok
    assert strict.reason == f"{WORD_NOT_IN_DICT}:QX"
    assert [w.text for w in find_invalid_board_words(board, lexicon)] == ["QX"]


def test_committed_move_stays_consistent(board: Board, lexicon: Lexicon, lay_word) -> None:
    placements = lay_word(board, "CAT", 4, 5)
    assert _validate(board, placements, lexicon).ok
    board.place(placements)
    assert find_invalid_board_words(board, lexicon) == []
    # a follow-up through the committed tiles is judged normally
    assert _validate(board, lay_word(board, "S", 7, 5), lexicon).ok


def test_override_only_on_blanks(board: Board, lexicon: Lexicon, make_tiles) -> None:
    o, i, j = make_tiles("OIJ")
    board.register_tiles([o, i, j])
    relabelled = [
        PlacedTile(o.id, 4, 5, letter_override="C"),
        PlacedTile(i.id, 5, 5, letter_override="A"),
        PlacedTile(j.id, 6, 5, letter_override="T"),
    ]
    result = _validate(board, relabelled, lexicon)
    assert not result.ok
    assert result.reason == OVERRIDE_ON_PLAIN_TILE
    assert "blank" in result.message


def test_blank_needs_a_letter(board: Board, lexicon: Lexicon, lay_word, make_tiles) -> None:
    lay_word(board, "CAT", 4, 5, commit=True)
    (blank,) = make_tiles("?")
    board.register_tiles([blank])
    for override in (None, "", "ST", "?", "s"):
        result = _validate(board, [PlacedTile(blank.id, 7, 5, letter_override=override)], lexicon)
        assert result.reason == BLANK_WITHOUT_LETTER, override


def test_committed_move_revalidates_in_place(lexicon: Lexicon, lay_word) -> None:
    board = Board.empty(modifiers={(4, 5): Modifier.DW})
    lay_word(board, "CAT", 4, 5, commit=True)
    placements = lay_word(board, "TS", 5, 6, Direction.DOWN)
    sim = board.with_placements(placements)
    first = validate_move(sim, placements, lexicon)
    assert first.ok
    committed = apply_reveal_this_turn(sim, placements).board
    again = validate_move(committed, placements, lexicon)
    assert again.ok
    assert [w.key for w in again.words] == [w.key for w in first.words]
