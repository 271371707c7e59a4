"""Helpers for the player's and the opponent's rack.

`consume_rack`, `refill_rack` and `rebalance_rack` are pure: they return new
lists and leave their inputs alone. `RackPool` is mutable: the opponent
search takes tiles from it and puts them back while it backtracks.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from .constants import RACK_SIZE, VOWELS
from .types import PlacedTile, Tile


def consume_rack(rack: Sequence[Tile], placements: Iterable[PlacedTile]) -> list[Tile]:
    """Rack without the tiles used by `placements` (matched by tile id).

    Order of the surviving tiles is kept. Ids not on the rack are ignored.
    """
    used = {p.tile_id for p in placements}
    return [t for t in rack if t.id not in used]


def _is_vowel(tile: Tile) -> bool:
    return tile.letter in VOWELS


def rebalance_rack(rack: Sequence[Tile], bag: Sequence[Tile]) -> tuple[list[Tile], list[Tile]]:
    """Swaps one tile with the bag when the rack is all vowels or all consonants.

    A rack holding a blank is left alone, as is one with no matching tile
    in the bag.
    """
    rack_out, bag_out = list(rack), list(bag)
    has_blank = any(t.is_blank for t in rack_out)
    has_vowel = any(not t.is_blank and _is_vowel(t) for t in rack_out)
    has_consonant = any(not t.is_blank and not _is_vowel(t) for t in rack_out)
    if has_blank or (has_vowel and has_consonant) or not bag_out:
        return rack_out, bag_out

    need_vowel = not has_vowel
    bag_index = next(
        (i for i, t in enumerate(bag_out) if not t.is_blank and _is_vowel(t) == need_vowel),
        -1,
    )
    rack_index = next(
        (i for i, t in enumerate(rack_out) if not t.is_blank and _is_vowel(t) != need_vowel),
        -1,
    )
    if bag_index == -1 or rack_index == -1:
        return rack_out, bag_out

    rack_out[rack_index], bag_out[bag_index] = bag_out[bag_index], rack_out[rack_index]
    return rack_out, bag_out


def refill_rack(
    rack: Sequence[Tile], bag: Sequence[Tile], size: int = RACK_SIZE
) -> tuple[list[Tile], list[Tile]]:
    """Tops the rack up from the front of the bag, then rebalances it."""
    needed = max(size - len(rack), 0)
    return rebalance_rack([*rack, *bag[:needed]], bag[needed:])


class RackPool:
    """Search-time view of a rack: per-letter counts and id pools plus blank ids.

    `take`/`give_back` must always be paired; the search wraps them in
    try/finally so every exit path restores the pool.
    """

    def __init__(self, tiles: Iterable[Tile]) -> None:
        self.ids: dict[str, list[str]] = {}
        self.blank_ids: list[str] = []
        for tile in tiles:
            if tile.is_blank:
                self.blank_ids.append(tile.id)
                continue
            letter = tile.letter.upper()
            if len(letter) != 1 or not letter.isascii() or not letter.isalpha():
                continue
            self.ids.setdefault(letter, []).append(tile.id)
        self.letters: list[str] = list(self.ids)

    def count(self, letter: str) -> int:
        return len(self.ids.get(letter, ()))

    def take(self, letter: str) -> str | None:
        pool = self.ids.get(letter)
        if not pool:
            return None
        return pool.pop()

    def give_back(self, letter: str, tile_id: str) -> None:
        self.ids[letter].append(tile_id)

    def take_blank(self) -> str | None:
        if not self.blank_ids:
            return None
        return self.blank_ids.pop()

    def give_back_blank(self, tile_id: str) -> None:
        self.blank_ids.append(tile_id)

    @property
    def has_blank(self) -> bool:
        return bool(self.blank_ids)

    def __len__(self) -> int:
        return sum(len(ids) for ids in self.ids.values()) + len(self.blank_ids)
