from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace

from .constants import BOARD_SIZE
from .types import BoardCell, Direction, Modifier, PlacedTile, Tile, WordCell, WordPlay

_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Board:
    """Square grid of `BoardCell`s plus the registry of tiles it can show.

    The registry maps tile id -> `Tile` so that a cell only needs to store
    the id of its occupant. Tiles are immutable, so snapshots share them.
    """

    def __init__(
        self,
        cells: list[list[BoardCell]],
        tiles_by_id: Mapping[str, Tile] | None = None,
    ) -> None:
        self.cells = cells
        self.tiles_by_id: dict[str, Tile] = dict(tiles_by_id or {})

    @classmethod
    def empty(
        cls,
        size: int = BOARD_SIZE,
        *,
        modifiers: Mapping[tuple[int, int], Modifier] | None = None,
        tiles: Iterable[Tile] = (),
    ) -> Board:
        """Creates a board with no tiles. The modifier layout is taken as given."""
        cx = cy = size // 2
        layout = modifiers or {}
        cells = [
            [
                BoardCell(x=x, y=y, is_center=(x == cx and y == cy), modifier=layout.get((x, y)))
                for x in range(size)
            ]
            for y in range(size)
        ]
        board = cls(cells)
        board.register_tiles(tiles)
        return board

    # ---------------- lookups ----------------
    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def center(self) -> tuple[int, int]:
        for row in self.cells:
            for cell in row:
                if cell.is_center:
                    return cell.x, cell.y
        return self.size // 2, self.size // 2

    def inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def cell(self, x: int, y: int) -> BoardCell:
        return self.cells[y][x]

    def tile_id_at(self, x: int, y: int) -> str | None:
        if not self.inside(x, y):
            return None
        return self.cells[y][x].tile_id

    def tile_at(self, x: int, y: int) -> Tile | None:
        tile_id = self.tile_id_at(x, y)
        return self.tiles_by_id.get(tile_id) if tile_id else None

    def letter_at(self, x: int, y: int) -> str:
        """Effective letter on the cell: the blank override wins over the tile."""
        if not self.inside(x, y):
            return ""
        cell = self.cells[y][x]
        if cell.letter_override:
            return cell.letter_override
        if not cell.tile_id:
            return ""
        tile = self.tiles_by_id.get(cell.tile_id)
        return tile.letter if tile else ""

    def is_empty(self, x: int, y: int) -> bool:
        return self.tile_id_at(x, y) is None

    def has_any_tile(self) -> bool:
        return any(cell.tile_id for row in self.cells for cell in row)

    def is_adjacent_to_tile(self, x: int, y: int) -> bool:
        return any(self.tile_id_at(x + dx, y + dy) for dx, dy in _NEIGHBOURS)

    def iter_cells(self) -> Iterable[BoardCell]:
        for row in self.cells:
            yield from row

    # ---------------- mutation ----------------
    def register_tiles(self, tiles: Iterable[Tile]) -> None:
        for tile in tiles:
            self.tiles_by_id[tile.id] = tile

    def place(self, placements: Iterable[PlacedTile]) -> None:
        """Puts tiles on the board in place (no rule checks)."""
        for p in placements:
            cell = self.cells[p.y][p.x]
            cell.tile_id = p.tile_id
            cell.letter_override = p.letter_override

    def clear(self, placements: Iterable[PlacedTile]) -> None:
        """Removes tentative tiles again. Reveal/trigger flags stay untouched."""
        for p in placements:
            cell = self.cells[p.y][p.x]
            cell.tile_id = None
            cell.letter_override = None

    def copy(self) -> Board:
        """Snapshot with copied cells and a copied tile registry."""
        cells = [[replace(cell) for cell in row] for row in self.cells]
        return Board(cells, self.tiles_by_id)

    def with_placements(self, placements: Iterable[PlacedTile]) -> Board | None:
        """Returns a copy with `placements` applied, or None on an occupied or off-board cell."""
        sim = self.copy()
        for p in placements:
            if not sim.inside(p.x, p.y):
                return None
            cell = sim.cells[p.y][p.x]
            if cell.tile_id:
                return None
            cell.tile_id = p.tile_id
            cell.letter_override = p.letter_override
        return sim

    # ---------------- words ----------------
    def line_word(
        self, line: int, start: int, end: int, direction: Direction
    ) -> WordPlay | None:
        """Word spelled by cells start..end on a row (ACROSS) or column (DOWN).

        Returns None when any cell in the range is empty.
        """
        cells: list[WordCell] = []
        letters: list[str] = []
        for i in range(start, end + 1):
            x, y = (i, line) if direction is Direction.ACROSS else (line, i)
            tile_id = self.tile_id_at(x, y)
            if not tile_id:
                return None
            cells.append(WordCell(x, y, tile_id))
            letters.append(self.letter_at(x, y))
        return WordPlay("".join(letters), cells)

    def run_bounds(self, x: int, y: int, direction: Direction) -> tuple[int, int]:
        """Extends from (x, y) over occupied neighbours and returns (start, end) on the line."""
        dx, dy = direction.step
        pos = x if direction is Direction.ACROSS else y
        start = end = pos
        while self.tile_id_at(x - dx * (pos - start + 1), y - dy * (pos - start + 1)):
            start -= 1
        while self.tile_id_at(x + dx * (end - pos + 1), y + dy * (end - pos + 1)):
            end += 1
        return start, end

    def __str__(self) -> str:
        lines = []
        for y in range(self.size):
            parts = []
            for x in range(self.size):
                letter = self.letter_at(x, y)
                if letter:
                    parts.append(letter.lower() if self.cells[y][x].letter_override else letter)
                elif self.cells[y][x].is_center:
                    parts.append("*")
                else:
                    parts.append(".")
            lines.append(" ".join(parts))
        return "\n".join(lines)
