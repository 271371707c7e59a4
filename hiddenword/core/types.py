from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

# Coordinates are (x, y): x is the column, y is the row. The grid is board[y][x].


class Direction(Enum):
    """Line direction of a word on the board."""
    ACROSS = auto()
    DOWN = auto()

    @property
    def step(self) -> tuple[int, int]:
        return (1, 0) if self is Direction.ACROSS else (0, 1)

    @property
    def cross(self) -> Direction:
        return Direction.DOWN if self is Direction.ACROSS else Direction.ACROSS


class Modifier(Enum):
    """Hidden cell effects. Two of them are evil and cost points."""
    DL = "DL"  # Double Letter
    TL = "TL"  # Triple Letter
    DW = "DW"  # Double Word
    TW = "TW"  # Triple Word
    EVIL_LETTER = "EVIL_LETTER"
    EVIL_WORD = "EVIL_WORD"

    @property
    def is_evil(self) -> bool:
        return self in (Modifier.EVIL_LETTER, Modifier.EVIL_WORD)

    @property
    def label(self) -> str:
        """Short label shown when the modifier gets revealed."""
        if self is Modifier.EVIL_LETTER:
            return "Evil Letter"
        if self is Modifier.EVIL_WORD:
            return "Evil Word"
        return self.value


@dataclass(frozen=True)
class Tile:
    """A physical tile. Blanks carry letter '?' and value 0."""
    id: str
    letter: str
    value: int
    is_blank: bool = False


@dataclass
class BoardCell:
    """One grid square.

    `modifier` is fixed when the board is generated. Only `revealed`,
    `revealed_at` and `triggered` change afterwards, and only when a tile
    is newly placed on the cell.
    """
    x: int
    y: int
    is_center: bool = False
    modifier: Modifier | None = None
    revealed: bool = False
    triggered: bool = False
    revealed_at: float | None = None
    tile_id: str | None = None
    # A blank pins its effective letter here
    letter_override: str | None = None


@dataclass(frozen=True)
class PlacedTile:
    """A tile placed during the current, not yet committed turn."""
    tile_id: str
    x: int
    y: int
    letter_override: str | None = None


@dataclass(frozen=True)
class WordCell:
    x: int
    y: int
    tile_id: str


@dataclass
class WordPlay:
    """A formed word together with the cells that spell it."""
    text: str
    cells: list[WordCell] = field(default_factory=list)

    @property
    def key(self) -> tuple[tuple[int, int], ...]:
        return tuple((c.x, c.y) for c in self.cells)

    def __len__(self) -> int:
        return len(self.text)


@dataclass
class ScoreBreakdown:
    """Detailed score of one word."""
    word: str
    base_points: int
    word_multiplier: int
    evil_word_count: int
    total: int
    bonus_word: bool = False
