"""JSON snapshot schema for the command line.

A tolerant Pydantic model that turns a hand-written board/rack snapshot into
core objects (`Board`, rack `Tile`s, tentative `PlacedTile`s).

Snapshot format:
- `rows`: one string per board row, '.' for empty, 'A'..'Z' for tiles,
  lowercase for a blank showing that letter; empty list -> empty board
- `modifiers`: list of {x, y, modifier, revealed, triggered}
- `rack`: rack letters, '?' for a blank
- `placements`: tiles placed this turn, taken from the rack
  ({x, y, letter} with letter '?' plus `blank_as` for a blank)
- `difficulty`: optional opponent tier
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from .core.board import Board
from .core.constants import BLANK, BOARD_SIZE
from .core.difficulty import Difficulty
from .core.tiles import LETTER_VALUES
from .core.types import Modifier, PlacedTile, Tile


class ModifierSpec(BaseModel):
    """A modifier cell of the snapshot board."""

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    modifier: Modifier
    revealed: bool = False
    triggered: bool = False

    @field_validator("modifier", mode="before")
    @classmethod
    def _norm_modifier(cls, v: object) -> object:
        """Accepts 'tl', 'evil_word', ... in any case."""
        return v.strip().upper() if isinstance(v, str) else v


class PlacementSpec(BaseModel):
    """One tile placed this turn."""

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    letter: str
    blank_as: str | None = None

    @field_validator("letter", "blank_as")
    @classmethod
    def _one_letter(cls, v: str | None) -> str | None:
        """A letter is exactly one character, A-Z or '?'."""
        if v is None:
            return None
        s = str(v).strip().upper()
        if len(s) != 1 or not (s == BLANK or ("A" <= s <= "Z")):
            raise ValueError("letter_must_be_single_a_to_z")
        return s

    @model_validator(mode="after")
    def _blank_needs_mapping(self) -> PlacementSpec:
        if self.letter == BLANK and (self.blank_as is None or self.blank_as == BLANK):
            raise ValueError("blank_has_no_mapping")
        return self


class Snapshot(BaseModel):
    rows: list[str] = Field(default_factory=list)
    modifiers: list[ModifierSpec] = Field(default_factory=list)
    rack: str = ""
    placements: list[PlacementSpec] = Field(default_factory=list)
    difficulty: Difficulty | None = None

    @field_validator("rows")
    @classmethod
    def _square_grid(cls, rows: list[str]) -> list[str]:
        for row in rows:
            if len(row) != len(rows):
                raise ValueError("board_must_be_square")
            if any(ch != "." and not ("A" <= ch.upper() <= "Z") for ch in row):
                raise ValueError("board_cells_must_be_dot_or_letter")
        return rows

    @field_validator("rack")
    @classmethod
    def _rack_letters(cls, rack: str) -> str:
        rack = rack.strip().upper()
        if any(ch != BLANK and not ("A" <= ch <= "Z") for ch in rack):
            raise ValueError("rack_must_be_letters_or_blank")
        return rack

    @field_validator("difficulty", mode="before")
    @classmethod
    def _norm_difficulty(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _inside_board(self) -> Snapshot:
        size = self.size
        for item in [*self.modifiers, *self.placements]:
            if item.x >= size or item.y >= size:
                raise ValueError("out_of_bounds")
        return self

    @property
    def size(self) -> int:
        return len(self.rows) or BOARD_SIZE

    def build(self) -> SnapshotState:
        """Creates the board, the rack tiles and this turn's placements.

        Raises:
            ValueError: when a placement needs a tile the rack does not hold
        """
        layout = {(m.x, m.y): m.modifier for m in self.modifiers}
        board = Board.empty(self.size, modifiers=layout)
        for m in self.modifiers:
            cell = board.cell(m.x, m.y)
            cell.revealed = m.revealed
            cell.triggered = m.triggered

        board_tiles: list[Tile] = []
        for y, row in enumerate(self.rows):
            for x, ch in enumerate(row):
                if ch == ".":
                    continue
                tile_id = f"b{len(board_tiles)}"
                cell = board.cell(x, y)
                if ch.islower():
                    tile = Tile(tile_id, BLANK, 0, is_blank=True)
                    cell.letter_override = ch.upper()
                else:
                    tile = Tile(tile_id, ch, LETTER_VALUES.get(ch, 0))
                board_tiles.append(tile)
                cell.tile_id = tile_id
        board.register_tiles(board_tiles)

        rack = [
            Tile(f"r{i}", ch, 0 if ch == BLANK else LETTER_VALUES.get(ch, 0), is_blank=ch == BLANK)
            for i, ch in enumerate(self.rack)
        ]
        board.register_tiles(rack)

        available = list(rack)
        placements: list[PlacedTile] = []
        for p in self.placements:
            tile = next((t for t in available if t.letter == p.letter), None)
            if tile is None:
                raise ValueError(f"rack_missing_tile:{p.letter}")
            available.remove(tile)
            override = p.blank_as if tile.is_blank else None
            placements.append(PlacedTile(tile.id, p.x, p.y, override))
        return SnapshotState(board, rack, placements, self.difficulty)


@dataclass
class SnapshotState:
    """Core objects built from a snapshot."""

    board: Board
    rack: list[Tile]
    placements: list[PlacedTile]
    difficulty: Difficulty | None = None


def load_snapshot(path: str | Path) -> Snapshot:
    """Reads and validates a snapshot file (raises pydantic.ValidationError)."""
    with Path(path).open(encoding="utf-8") as f:
        data = json.load(f)
    return Snapshot.model_validate(data)
