"""Opponent move search: anchor-based generation with trie pruning.

Every candidate the search finds is simulated on a board copy, then checked
by `validate_move` and priced by `score_turn`, the same functions that
judge the human's turn. The difficulty decides how much of the board is
searched and which of the legal candidates is finally played.
"""
from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .board import Board
from .constants import ALPHABET
from .difficulty import Difficulty, SearchLimits
from .lexicon import Lexicon, TrieNode
from .rack import RackPool
from .scoring import count_evil_hits, score_turn
from .types import Direction, PlacedTile, Tile, WordPlay
from .validation import validate_move

log = logging.getLogger("hiddenword")

NORMAL_TOP_N = 8
NORMAL_LENGTH_BAND = (4, 6)
NORMAL_SKIP_BEST_CHANCE = 0.35
EASY_SHORT_WORD_MAX = 4
EASY_POOL_CAP = 12
EASY_DROP_FRONT_FRACTION = 0.4
EASY_FULL_POOL_CHANCE = 0.2


@dataclass
class Move:
    """A legal, scored candidate placement."""

    placements: list[PlacedTile]
    words: list[WordPlay] = field(default_factory=list)
    score: int = 0
    max_word_length: int = 0
    tile_count: int = 0
    evil_hits: int = 0

    @property
    def main_word(self) -> str:
        return self.words[0].text if self.words else ""


def find_anchors(board: Board) -> list[tuple[int, int]]:
    """Empty cells next to a tile; the center cell alone on an empty board."""
    if not board.has_any_tile():
        return [board.center]
    return [
        (cell.x, cell.y)
        for cell in board.iter_cells()
        if not cell.tile_id and board.is_adjacent_to_tile(cell.x, cell.y)
    ]


def _is_better(candidate: Move, current: Move | None) -> bool:
    if current is None:
        return True
    if candidate.score != current.score:
        return candidate.score > current.score
    return candidate.max_word_length > current.max_word_length


# ---------------- selection policies ----------------
def _choose_hard(moves: list[Move], best: Move, rng: random.Random) -> Move:
    return best


def _choose_normal(moves: list[Move], best: Move, rng: random.Random) -> Move:
    ranked = sorted(moves, key=lambda m: m.score, reverse=True)
    top = ranked[:NORMAL_TOP_N]
    low, high = NORMAL_LENGTH_BAND
    medium = [m for m in top if low <= m.max_word_length <= high]
    pick_from = medium or top
    if len(pick_from) > 1 and rng.random() < NORMAL_SKIP_BEST_CHANCE:
        pick_from = pick_from[1:]
    return rng.choice(pick_from)


def _choose_easy(moves: list[Move], best: Move, rng: random.Random) -> Move:
    with_evil = [m for m in moves if m.evil_hits > 0]
    pool = with_evil or moves
    ranked = sorted(pool, key=lambda m: (-m.evil_hits, m.max_word_length, m.score))
    short = [m for m in ranked if m.max_word_length <= EASY_SHORT_WORD_MAX]
    base = short or ranked
    pick_from = base[:EASY_POOL_CAP]
    if len(pick_from) > 3:
        pick_from = pick_from[int(len(pick_from) * EASY_DROP_FRONT_FRACTION):]
    if rng.random() < EASY_FULL_POOL_CHANCE:
        pick_from = base
    return rng.choice(pick_from)


_POLICIES: dict[Difficulty, Callable[[list[Move], Move, random.Random], Move]] = {
    Difficulty.HARD: _choose_hard,
    Difficulty.NORMAL: _choose_normal,
    Difficulty.EASY: _choose_easy,
}


class _Search:
    """State of one `choose_move` call: rack pool, cross-check memo, budget, results."""

    def __init__(
        self,
        board: Board,
        rack: Sequence[Tile],
        lexicon: Lexicon,
        limits: SearchLimits,
        keep_candidates: bool,
    ) -> None:
        self.board = board
        # Rack tiles must be resolvable on the simulated boards
        self.sim_base = board.copy()
        self.sim_base.register_tiles(rack)
        self.lexicon = lexicon
        self.pool = RackPool(rack)
        self.max_evaluations = limits.max_evaluations
        self.keep_candidates = keep_candidates
        self.cross_cache: dict[tuple[int, int, Direction], frozenset[str] | None] = {}
        self.best: Move | None = None
        self.candidates: list[Move] = []
        self.evaluations = 0
        self.reached_limit = False

    # ---------------- cross-checks ----------------
    def cross_check(self, x: int, y: int, direction: Direction) -> frozenset[str] | None:
        """Letters allowed at (x, y) by the perpendicular run; None means unconstrained."""
        key = (x, y, direction)
        if key in self.cross_cache:
            return self.cross_cache[key]

        board = self.board
        dx, dy = direction.cross.step
        prefix: list[str] = []
        cx, cy = x - dx, y - dy
        while board.tile_id_at(cx, cy):
            prefix.append(board.letter_at(cx, cy))
            cx, cy = cx - dx, cy - dy
        suffix: list[str] = []
        cx, cy = x + dx, y + dy
        while board.tile_id_at(cx, cy):
            suffix.append(board.letter_at(cx, cy))
            cx, cy = cx + dx, cy + dy

        if not prefix and not suffix:
            self.cross_cache[key] = None
            return None

        before = "".join(reversed(prefix))
        after = "".join(suffix)
        allowed = frozenset(
            letter for letter in ALPHABET if self.lexicon.is_word(f"{before}{letter}{after}")
        )
        self.cross_cache[key] = allowed
        return allowed

    # ---------------- evaluation ----------------
    def evaluate(self, placements: list[PlacedTile]) -> None:
        if not placements or self.reached_limit:
            return
        self.evaluations += 1
        if self.max_evaluations is not None and self.evaluations > self.max_evaluations:
            self.reached_limit = True
            return
        sim = self.sim_base.with_placements(placements)
        if sim is None:
            return
        result = validate_move(sim, placements, self.lexicon)
        if not result.ok:
            return
        move = Move(
            placements=list(placements),
            words=result.words,
            score=score_turn(sim, placements, result.words),
            max_word_length=max(len(w.text) for w in result.words),
            tile_count=len(placements),
            evil_hits=count_evil_hits(self.board, placements),
        )
        if _is_better(move, self.best):
            self.best = move
        if self.keep_candidates:
            self.candidates.append(move)

    # ---------------- line walk ----------------
    def search_line(self, anchor: tuple[int, int], direction: Direction) -> None:
        ax, ay = anchor
        horizontal = direction is Direction.ACROSS
        line = ay if horizontal else ax
        anchor_pos = ax if horizontal else ay
        size = self.board.size

        def coord(pos: int) -> tuple[int, int]:
            return (pos, line) if horizontal else (line, pos)

        def next_is_open(pos: int) -> bool:
            return pos + 1 >= size or self.board.tile_id_at(*coord(pos + 1)) is None

        def advance(pos: int, node: TrieNode, placements: list[PlacedTile], placed: int) -> None:
            # Candidate check after filling `pos`, then continue along the line
            if (
                node.is_terminal
                and pos >= anchor_pos
                and placed > 0
                and next_is_open(pos)
            ):
                self.evaluate(placements)
            if pos + 1 < size:
                dfs(pos + 1, node, placements, placed)

        def dfs(pos: int, node: TrieNode, placements: list[PlacedTile], placed: int) -> None:
            if self.reached_limit or pos >= size:
                return
            x, y = coord(pos)
            if self.board.tile_id_at(x, y):
                nxt = self.lexicon.child(node, self.board.letter_at(x, y))
                if nxt is not None:
                    advance(pos, nxt, placements, placed)
                return

            allowed = self.cross_check(x, y, direction)

            for letter in self.pool.letters:
                if self.reached_limit:
                    return
                if self.pool.count(letter) <= 0:
                    continue
                if allowed is not None and letter not in allowed:
                    continue
                nxt = self.lexicon.child(node, letter)
                if nxt is None:
                    continue
                tile_id = self.pool.take(letter)
                if tile_id is None:
                    continue
                placements.append(PlacedTile(tile_id, x, y))
                try:
                    advance(pos, nxt, placements, placed + 1)
                finally:
                    placements.pop()
                    self.pool.give_back(letter, tile_id)

            if not self.pool.has_blank:
                return
            for letter in ALPHABET:
                if self.reached_limit:
                    return
                if allowed is not None and letter not in allowed:
                    continue
                nxt = self.lexicon.child(node, letter)
                if nxt is None:
                    continue
                tile_id = self.pool.take_blank()
                if tile_id is None:
                    continue
                placements.append(PlacedTile(tile_id, x, y, letter_override=letter))
                try:
                    advance(pos, nxt, placements, placed + 1)
                finally:
                    placements.pop()
                    self.pool.give_back_blank(tile_id)

        for start in range(anchor_pos + 1):
            if self.reached_limit:
                break
            # A word may not start right after an existing tile
            if start > 0 and self.board.tile_id_at(*coord(start - 1)):
                continue
            dfs(start, self.lexicon.root, [], 0)


class MoveGenerator:
    """Finds and selects the opponent's move for a given difficulty.

    The lexicon is shared and read-only; every call builds its own search
    state, so one generator can serve many turns.
    """

    def __init__(self, lexicon: Lexicon, *, rng: random.Random | None = None) -> None:
        self.lexicon = lexicon
        self.rng = rng or random.Random()

    def choose_move(
        self,
        board: Board,
        rack: Sequence[Tile],
        difficulty: Difficulty,
        *,
        limits: SearchLimits | None = None,
    ) -> Move | None:
        """Best-fitting legal move for `difficulty`, or None when the opponent must pass."""
        if not rack:
            return None
        limits = limits or difficulty.limits

        anchors = find_anchors(board)
        if difficulty.shuffles_anchors:
            self.rng.shuffle(anchors)
        if limits.anchor_limit is not None:
            anchors = anchors[: limits.anchor_limit]

        search = _Search(
            board,
            rack,
            self.lexicon,
            limits,
            keep_candidates=difficulty is not Difficulty.HARD,
        )
        for anchor in anchors:
            if search.reached_limit:
                break
            search.search_line(anchor, Direction.ACROSS)
            search.search_line(anchor, Direction.DOWN)

        log.debug(
            "Search (%s): %d anchors, %d evaluations, %d candidates, limit reached=%s",
            difficulty.value,
            len(anchors),
            search.evaluations,
            len(search.candidates),
            search.reached_limit,
        )
        if search.best is None:
            return None
        pool = search.candidates or [search.best]
        return _POLICIES[difficulty](pool, search.best, self.rng)

    def find_hint(self, board: Board, rack: Sequence[Tile]) -> Move | None:
        """Suggestion for the human: easy, then normal, then hard policy."""
        for difficulty in (Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD):
            move = self.choose_move(board, rack, difficulty)
            if move is not None:
                return move
        return None


def choose_move(
    board: Board,
    rack: Sequence[Tile],
    difficulty: Difficulty,
    lexicon: Lexicon,
    *,
    rng: random.Random | None = None,
    limits: SearchLimits | None = None,
) -> Move | None:
    return MoveGenerator(lexicon, rng=rng).choose_move(board, rack, difficulty, limits=limits)


def find_hint(
    board: Board,
    rack: Sequence[Tile],
    lexicon: Lexicon,
    *,
    rng: random.Random | None = None,
) -> Move | None:
    return MoveGenerator(lexicon, rng=rng).find_hint(board, rack)
