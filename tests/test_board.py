from __future__ import annotations

from hiddenword.core.board import Board
from hiddenword.core.constants import CENTER
from hiddenword.core.types import Direction, Modifier, PlacedTile, Tile


def test_empty_board_layout() -> None:
    board = Board.empty(modifiers={(0, 0): Modifier.TW, (5, 6): Modifier.EVIL_WORD})
    assert board.size == 11
    assert board.center == CENTER == (5, 5)
    assert board.cell(5, 5).is_center
    assert board.cell(0, 0).modifier is Modifier.TW
    assert board.cell(5, 6).modifier is Modifier.EVIL_WORD
    assert board.cell(1, 1).modifier is None
    assert not board.has_any_tile()
    assert all(not c.revealed and not c.triggered for c in board.iter_cells())


def test_cells_are_indexed_by_x_then_y() -> None:
    board = Board.empty(7)
    cell = board.cell(2, 4)
    assert (cell.x, cell.y) == (2, 4)
    assert board.cells[4][2] is cell
    assert board.center == (3, 3)


def test_letter_override_wins() -> None:
    board = Board.empty()
    blank = Tile("b", "?", 0, is_blank=True)
    board.register_tiles([blank])
    board.place([PlacedTile("b", 5, 5, letter_override="Q")])
    assert board.letter_at(5, 5) == "Q"
    assert board.tile_at(5, 5) == blank
    assert board.letter_at(-1, 5) == ""
    assert board.letter_at(0, 0) == ""


def test_with_placements_returns_a_copy(lay_word) -> None:
    board = Board.empty()
    placements = lay_word(board, "CAT", 4, 5)
    sim = board.with_placements(placements)
    assert sim is not None
    assert sim.letter_at(4, 5) == "C"
    assert board.is_empty(4, 5)
    # occupied or off-board targets are rejected
    assert sim.with_placements([PlacedTile("x", 4, 5)]) is None
    assert board.with_placements([PlacedTile("x", 11, 0)]) is None


def test_copy_is_independent(lay_word) -> None:
    board = Board.empty(modifiers={(5, 5): Modifier.DL})
    lay_word(board, "CAT", 4, 5, commit=True)
    clone = board.copy()
    clone.cell(5, 5).revealed = True
    clone.clear([PlacedTile(clone.tile_id_at(4, 5), 4, 5)])
    assert not board.cell(5, 5).revealed
    assert board.letter_at(4, 5) == "C"
    assert clone.is_empty(4, 5)


def test_adjacency_and_runs(lay_word) -> None:
    board = Board.empty()
    lay_word(board, "CAT", 4, 5, commit=True)
    assert board.is_adjacent_to_tile(3, 5)
    assert board.is_adjacent_to_tile(5, 6)
    assert not board.is_adjacent_to_tile(4, 7)
    assert board.run_bounds(5, 5, Direction.ACROSS) == (4, 6)
    assert board.run_bounds(5, 5, Direction.DOWN) == (5, 5)
    word = board.line_word(5, 4, 6, Direction.ACROSS)
    assert word is not None and word.text == "CAT"
    assert word.key == ((4, 5), (5, 5), (6, 5))
    assert board.line_word(5, 4, 7, Direction.ACROSS) is None


def test_str_marks_center_and_blanks() -> None:
    board = Board.empty(3)
    board.register_tiles([Tile("b", "?", 0, is_blank=True)])
    assert str(board).splitlines()[1] == ". * ."
    board.place([PlacedTile("b", 0, 0, letter_override="E")])
    assert str(board).splitlines()[0] == "e . ."
