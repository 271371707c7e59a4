"""Pytest configuration and fixtures.

Provides:
- a small hand-picked lexicon so tests do not depend on the bundled list
- factories for rack tiles and for words laid on a board
- isolation from HIDDENWORD_* variables of the developer environment
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable

import pytest

from hiddenword.core.board import Board
from hiddenword.core.constants import BLANK
from hiddenword.core.lexicon import Lexicon
from hiddenword.core.tiles import LETTER_VALUES
from hiddenword.core.types import Direction, PlacedTile, Tile

WORDS = [
    "A", "AT", "AS", "TA",
    "CAT", "CATS", "ACT", "ACTS", "ATS", "SAT", "SCAT", "CAST",
    "HAT", "HATS", "BAT", "BATS", "TAB",
]

TileFactory = Callable[[Iterable[str]], list[Tile]]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop HIDDENWORD_* overrides a local .env might have exported."""
    for key in list(os.environ):
        if key.startswith("HIDDENWORD_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def lexicon() -> Lexicon:
    return Lexicon(WORDS)


@pytest.fixture
def board() -> Board:
    return Board.empty()


@pytest.fixture
def make_tiles() -> TileFactory:
    """Tiles for the given letters with unique ids; '?' makes a blank."""
    counter = iter(range(10_000))

    def factory(letters: Iterable[str]) -> list[Tile]:
        tiles = []
        for ch in letters:
            n = next(counter)
            if ch == BLANK:
                tiles.append(Tile(f"k{n}", BLANK, 0, is_blank=True))
            else:
                tiles.append(Tile(f"k{n}", ch, LETTER_VALUES[ch]))
        return tiles

    return factory


@pytest.fixture
def lay_word(make_tiles: TileFactory) -> Callable[..., list[PlacedTile]]:
    """Registers tiles for `word` on `board` and returns their placements.

    With `commit=True` the tiles are also put on the board, as if played
    in an earlier turn.
    """

    def factory(
        board: Board,
        word: str,
        x: int,
        y: int,
        direction: Direction = Direction.ACROSS,
        *,
        commit: bool = False,
    ) -> list[PlacedTile]:
        tiles = make_tiles(word)
        board.register_tiles(tiles)
        dx, dy = direction.step
        placements = [
            PlacedTile(tile.id, x + dx * i, y + dy * i) for i, tile in enumerate(tiles)
        ]
        if commit:
            board.place(placements)
        return placements

    return factory
