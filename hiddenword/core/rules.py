from __future__ import annotations

from collections.abc import Sequence

from .board import Board
from .types import Direction, PlacedTile, WordPlay

_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def placed_keys(placements: Sequence[PlacedTile]) -> set[tuple[int, int]]:
    return {(p.x, p.y) for p in placements}


def has_existing_tiles(board: Board, placements: Sequence[PlacedTile]) -> bool:
    """Whether the board holds any tile that was not placed this turn."""
    new = placed_keys(placements)
    return any(
        cell.tile_id and (cell.x, cell.y) not in new for cell in board.iter_cells()
    )


def covers_center(board: Board, placements: Sequence[PlacedTile]) -> bool:
    """Whether the placement covers the start square."""
    return board.center in placed_keys(placements)


def connected_to_existing(board: Board, placements: Sequence[PlacedTile]) -> bool:
    """At least one new tile must touch a pre-existing tile orthogonally."""
    new = placed_keys(placements)
    for p in placements:
        for dx, dy in _NEIGHBOURS:
            nx, ny = p.x + dx, p.y + dy
            if board.tile_id_at(nx, ny) and (nx, ny) not in new:
                return True
    return False


def placements_in_line(placements: Sequence[PlacedTile]) -> Direction | None:
    """ACROSS when all tiles share a row (a single tile counts as ACROSS), DOWN for a column."""
    xs = {p.x for p in placements}
    ys = {p.y for p in placements}
    if len(ys) == 1:
        return Direction.ACROSS
    if len(xs) == 1:
        return Direction.DOWN
    return None


def main_word(
    board: Board, placements: Sequence[PlacedTile], direction: Direction
) -> WordPlay | None:
    """Word along the placement line, extended over abutting tiles.

    Returns None when an empty cell sits between the first and last tile.
    """
    if direction is Direction.ACROSS:
        line = placements[0].y
        coords = [p.x for p in placements]
    else:
        line = placements[0].x
        coords = [p.y for p in placements]
    start, end = min(coords), max(coords)

    def occupied(pos: int) -> bool:
        if direction is Direction.ACROSS:
            return board.tile_id_at(pos, line) is not None
        return board.tile_id_at(line, pos) is not None

    while start > 0 and occupied(start - 1):
        start -= 1
    while end < board.size - 1 and occupied(end + 1):
        end += 1
    return board.line_word(line, start, end, direction)


def cross_word(board: Board, x: int, y: int, direction: Direction) -> WordPlay | None:
    """Perpendicular word through (x, y) for a main line in `direction`; None below 2 letters."""
    cross = direction.cross
    start, end = board.run_bounds(x, y, cross)
    line = y if cross is Direction.ACROSS else x
    word = board.line_word(line, start, end, cross)
    if word is None or len(word.text) <= 1:
        return None
    return word


def collect_board_words(board: Board) -> list[WordPlay]:
    """Every maximal horizontal and vertical run of two or more tiles."""
    words: list[WordPlay] = []
    seen: set[tuple[tuple[int, int], ...]] = set()
    size = board.size

    def add(word: WordPlay | None) -> None:
        if word is None or len(word.text) < 2 or word.key in seen:
            return
        seen.add(word.key)
        words.append(word)

    for direction in (Direction.ACROSS, Direction.DOWN):
        for line in range(size):
            pos = 0
            while pos < size:
                x, y = (pos, line) if direction is Direction.ACROSS else (line, pos)
                if not board.tile_id_at(x, y):
                    pos += 1
                    continue
                start = pos
                while pos < size and board.tile_id_at(
                    *((pos, line) if direction is Direction.ACROSS else (line, pos))
                ):
                    pos += 1
                add(board.line_word(line, start, pos - 1, direction))
    return words
