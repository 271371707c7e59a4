from __future__ import annotations

import random
from dataclasses import dataclass, field

from .constants import BLANK
from .difficulty import Difficulty
from .types import Tile

LETTER_VALUES: dict[str, int] = {
    "A": 1, "E": 1, "I": 1, "O": 1, "R": 1, "S": 1, "T": 1,
    "D": 2, "N": 2, "L": 2, "U": 2,
    "H": 3, "G": 3, "Y": 3,
    "B": 4, "C": 4, "F": 4, "M": 4, "P": 4, "W": 4,
    "V": 5, "K": 5,
    "X": 8,
    "J": 10, "Q": 10, "Z": 10,
}


@dataclass(frozen=True)
class DistributionEntry:
    """How many tiles of one letter (or the blank) the bag holds."""

    letter: str
    count: int
    value: int
    is_blank: bool = False


BASE_DISTRIBUTION: tuple[DistributionEntry, ...] = (
    DistributionEntry(BLANK, 2, 0, is_blank=True),
    DistributionEntry("A", 9, 1),
    DistributionEntry("E", 13, 1),
    DistributionEntry("I", 8, 1),
    DistributionEntry("O", 8, 1),
    DistributionEntry("R", 6, 1),
    DistributionEntry("S", 5, 1),
    DistributionEntry("T", 7, 1),
    DistributionEntry("D", 5, 2),
    DistributionEntry("N", 5, 2),
    DistributionEntry("L", 4, 2),
    DistributionEntry("U", 4, 2),
    DistributionEntry("H", 4, 3),
    DistributionEntry("G", 3, 3),
    DistributionEntry("Y", 2, 3),
    DistributionEntry("B", 2, 4),
    DistributionEntry("C", 2, 4),
    DistributionEntry("F", 2, 4),
    DistributionEntry("M", 2, 4),
    DistributionEntry("P", 2, 4),
    DistributionEntry("W", 2, 4),
    DistributionEntry("V", 2, 5),
    DistributionEntry("K", 1, 5),
    DistributionEntry("X", 1, 8),
    DistributionEntry("J", 1, 10),
    DistributionEntry("Q", 1, 10),
    DistributionEntry("Z", 1, 10),
)

BASE_TOTAL = sum(entry.count for entry in BASE_DISTRIBUTION)

TARGET_TILE_COUNT: dict[Difficulty, int] = {
    Difficulty.EASY: 64,
    Difficulty.NORMAL: 84,
    Difficulty.HARD: BASE_TOTAL,
}


def get_tile_points() -> dict[str, int]:
    """Point value of every letter; the blank is worth 0."""
    points = dict(LETTER_VALUES)
    points[BLANK] = 0
    return points


def scale_distribution(target_total: int) -> list[DistributionEntry]:
    """Scales the base distribution to `target_total` tiles.

    Rare letters (count <= 2) and blanks keep their count. The rest are
    scaled proportionally, floored (at least 1 each), and the rounding
    remainder goes to the largest fractional parts first.
    """
    fixed = [e for e in BASE_DISTRIBUTION if e.count <= 2]
    variable = [e for e in BASE_DISTRIBUTION if e.count > 2]
    fixed_total = sum(e.count for e in fixed)
    variable_total = sum(e.count for e in variable)
    desired_variable = max(target_total - fixed_total, 0)
    factor = desired_variable / variable_total if variable_total > 0 else 0

    # [letter, count, fraction]
    scaled: list[list] = []
    for e in variable:
        raw = e.count * factor
        floored = int(raw)
        scaled.append([e.letter, max(1, floored), raw - floored])

    diff = target_total - (fixed_total + sum(s[1] for s in scaled))
    if diff > 0:
        by_frac = sorted(scaled, key=lambda s: s[2], reverse=True)
        for i in range(diff):
            by_frac[i % len(by_frac)][1] += 1
    elif diff < 0:
        by_frac = sorted(scaled, key=lambda s: s[2])
        idx = 0
        while diff < 0 and idx < len(by_frac):
            if by_frac[idx][1] > 1:
                by_frac[idx][1] -= 1
                diff += 1
            else:
                idx += 1

    counts = {s[0]: s[1] for s in scaled}
    return [
        DistributionEntry(e.letter, counts.get(e.letter, e.count), e.value, e.is_blank)
        for e in BASE_DISTRIBUTION
    ]


def get_distribution(difficulty: Difficulty) -> list[DistributionEntry]:
    if difficulty is Difficulty.HARD:
        return list(BASE_DISTRIBUTION)
    return scale_distribution(TARGET_TILE_COUNT[difficulty])


def create_tile_bag(difficulty: Difficulty = Difficulty.HARD) -> list[Tile]:
    """All tiles of a match in distribution order, with ids t0, t1, ..."""
    bag: list[Tile] = []
    next_id = 0
    for entry in get_distribution(difficulty):
        for _ in range(entry.count):
            bag.append(Tile(f"t{next_id}", entry.letter, entry.value, entry.is_blank))
            next_id += 1
    return bag


@dataclass
class TileBag:
    """Tile bag for one match, scaled to the difficulty."""

    seed: int | None = None
    difficulty: Difficulty = Difficulty.HARD
    tiles: list[Tile] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        # Given tiles are kept in their exact order; otherwise fill and shuffle
        if not self.tiles:
            self.tiles = create_tile_bag(self.difficulty)
            self._rng.shuffle(self.tiles)

    def draw(self, n: int) -> list[Tile]:
        """Draws n tiles (or fewer when the bag runs out)."""
        out, self.tiles = self.tiles[:n], self.tiles[n:]
        return out

    def put_back(self, tiles: list[Tile]) -> None:
        self.tiles.extend(tiles)
        self._rng.shuffle(self.tiles)

    def swap(self, tile: Tile) -> Tile | None:
        """Exchanges one tile: a random bag tile comes out, `tile` goes in at a random spot.

        Returns None (and keeps `tile` out of the bag) when the bag is empty.
        """
        if not self.tiles:
            return None
        incoming = self.tiles.pop(self._rng.randrange(len(self.tiles)))
        self.tiles.insert(self._rng.randrange(len(self.tiles) + 1), tile)
        return incoming

    def remaining(self) -> int:
        return len(self.tiles)
