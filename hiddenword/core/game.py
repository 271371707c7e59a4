from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from ..config import effective_search_limits
from ..logging_setup import TURN_ID_VAR
from .board import Board
from .constants import RACK_SIZE
from .difficulty import Difficulty, SearchLimits
from .lexicon import Lexicon
from .opponent import Move, MoveGenerator
from .rack import consume_rack, rebalance_rack, refill_rack
from .scoring import apply_reveal_this_turn, score_turn
from .tiles import TileBag
from .types import Modifier, PlacedTile, Tile, WordPlay
from .validation import PLACEMENT_MISMATCH, ValidationResult, validate_move

log = logging.getLogger("hiddenword")

PASS_LIMIT = 3
SCORELESS_LIMIT = 3


class Side(Enum):
    PLAYER = "player"
    OPPONENT = "opponent"


class GameEndReason(Enum):
    """Why the match ended."""

    PLAYER_PASSED_THREE_TIMES = auto()
    OPPONENT_PASSED_THREE_TIMES = auto()
    BAG_EMPTY_AND_RACK_EMPTIED = auto()
    THREE_SCORELESS_TURNS = auto()


@dataclass
class TurnResult:
    """Outcome of one turn. A pass has `passed=True` and no words."""

    side: Side
    validation: ValidationResult | None = None
    points: int = 0
    placements: list[PlacedTile] = field(default_factory=list)
    revealed_now: list[str] = field(default_factory=list)
    passed: bool = False

    @property
    def ok(self) -> bool:
        return self.passed or (self.validation is not None and self.validation.ok)

    @property
    def words(self) -> list[WordPlay]:
        return self.validation.words if self.validation else []


class Match:
    """UI-free turn controller: human vs. scripted opponent.

    The board is replaced (never mutated in place) by each committed turn,
    so a rejected move can never leave it half-applied.
    """

    def __init__(
        self,
        *,
        board: Board,
        bag: TileBag,
        lexicon: Lexicon,
        difficulty: Difficulty,
        player_rack: Sequence[Tile],
        opponent_rack: Sequence[Tile],
        rng: random.Random | None = None,
        limits: SearchLimits | None = None,
    ) -> None:
        self.board = board
        self.bag = bag
        self.lexicon = lexicon
        self.difficulty = difficulty
        self.racks: dict[Side, list[Tile]] = {
            Side.PLAYER: list(player_rack),
            Side.OPPONENT: list(opponent_rack),
        }
        # Every tile of the match must resolve on the board, bag included
        self.board.register_tiles([*player_rack, *opponent_rack, *bag.tiles])
        self.rng = rng or random.Random()
        self.limits = limits
        self.generator = MoveGenerator(lexicon, rng=self.rng)
        self.scores: dict[Side, int] = {Side.PLAYER: 0, Side.OPPONENT: 0}
        self.pass_streaks: dict[Side, int] = {Side.PLAYER: 0, Side.OPPONENT: 0}
        self.scoreless_turns = 0
        self.swaps_used = 0
        self.turn = 0
        self.ended = False
        self.end_reason: GameEndReason | None = None

    @classmethod
    def new(
        cls,
        lexicon: Lexicon,
        difficulty: Difficulty = Difficulty.NORMAL,
        *,
        modifiers: Mapping[tuple[int, int], Modifier] | None = None,
        seed: int | None = None,
        limits: SearchLimits | None = None,
    ) -> Match:
        """Fresh match: shuffled bag, both racks dealt and rebalanced."""
        rng = random.Random(seed)
        bag = TileBag(seed=rng.randrange(2**32), difficulty=difficulty)
        board = Board.empty(modifiers=modifiers, tiles=bag.tiles)
        player, rest = rebalance_rack(bag.tiles[:RACK_SIZE], bag.tiles[RACK_SIZE:])
        opponent, rest = rebalance_rack(rest[:RACK_SIZE], rest[RACK_SIZE:])
        bag.tiles = rest
        return cls(
            board=board,
            bag=bag,
            lexicon=lexicon,
            difficulty=difficulty,
            player_rack=player,
            opponent_rack=opponent,
            rng=rng,
            limits=limits,
        )

    # ---------------- queries ----------------
    @property
    def player_rack(self) -> list[Tile]:
        return self.racks[Side.PLAYER]

    @property
    def opponent_rack(self) -> list[Tile]:
        return self.racks[Side.OPPONENT]

    def _begin_turn(self) -> None:
        """Refuses to act on a finished match and tags log records with the turn."""
        if self.ended:
            raise RuntimeError("Match has already ended")
        TURN_ID_VAR.set(str(self.turn))

    def propose(self, placements: Sequence[PlacedTile], side: Side = Side.PLAYER) -> TurnResult:
        """Validates and scores a tentative placement without touching the match."""
        placements = list(placements)
        rack_ids = {t.id for t in self.racks[side]}
        if any(p.tile_id not in rack_ids for p in placements):
            return TurnResult(side, ValidationResult.fail(PLACEMENT_MISMATCH), placements=placements)
        sim = self.board.with_placements(placements)
        if sim is None:
            return TurnResult(side, ValidationResult.fail(PLACEMENT_MISMATCH), placements=placements)
        validation = validate_move(sim, placements, self.lexicon)
        points = score_turn(sim, placements, validation.words) if validation.ok else 0
        return TurnResult(side, validation, points, placements)

    def hint(self) -> Move | None:
        return self.generator.find_hint(self.board, self.player_rack)

    # ---------------- turns ----------------
    def commit_player_turn(self, placements: Sequence[PlacedTile]) -> TurnResult:
        """Plays the human's placement if it is legal; an illegal one changes nothing."""
        self._begin_turn()
        return self._commit(Side.PLAYER, placements)

    def play_opponent_turn(self) -> TurnResult:
        """Lets the opponent search and play; no legal move means a pass."""
        self._begin_turn()
        limits = self.limits or effective_search_limits(self.difficulty)
        move = self.generator.choose_move(
            self.board, self.opponent_rack, self.difficulty, limits=limits
        )
        if move is None:
            log.info("Opponent found no legal move and passes")
            return self.pass_turn(Side.OPPONENT)
        result = self._commit(Side.OPPONENT, move.placements)
        if not result.ok:
            # The search only returns validated moves; treat a mismatch as a pass
            log.warning("Opponent move rejected (%s); passing", result.validation.reason)
            return self.pass_turn(Side.OPPONENT)
        return result

    def pass_turn(self, side: Side = Side.PLAYER) -> TurnResult:
        self._begin_turn()
        self.pass_streaks[side] += 1
        self._record_points(0)
        self.turn += 1
        log.info("%s passes (streak %d)", side.value, self.pass_streaks[side])
        self._check_game_over()
        return TurnResult(side, passed=True)

    def swap_tile(self, tile_id: str) -> Tile | None:
        """Exchanges one of the player's tiles with a random bag tile; costs the turn.

        Returns the incoming tile, or None when nothing could be swapped.
        """
        self._begin_turn()
        rack = self.player_rack
        index = next((i for i, t in enumerate(rack) if t.id == tile_id), -1)
        if index == -1 or not self.bag.remaining():
            return None
        incoming = self.bag.swap(rack[index])
        if incoming is None:
            return None
        rack[index] = incoming
        self.board.register_tiles([incoming])
        self.swaps_used += 1
        self.scoreless_turns = 0
        self.pass_streaks[Side.PLAYER] = 0
        self.turn += 1
        self._check_game_over()
        return incoming

    def _commit(self, side: Side, placements: Sequence[PlacedTile]) -> TurnResult:
        proposal = self.propose(placements, side)
        if not proposal.ok:
            return proposal

        sim = self.board.with_placements(proposal.placements)
        if sim is None:
            return TurnResult(
                side, ValidationResult.fail(PLACEMENT_MISMATCH), placements=proposal.placements
            )
        reveal = apply_reveal_this_turn(sim, proposal.placements)
        self.board = reveal.board
        proposal.revealed_now = reveal.revealed_now

        rack = consume_rack(self.racks[side], proposal.placements)
        rack, bag_tiles = refill_rack(rack, self.bag.tiles)
        self.racks[side] = rack
        self.bag.tiles = bag_tiles

        self.scores[side] += proposal.points
        self.pass_streaks[side] = 0
        self._record_points(proposal.points)
        self.turn += 1
        log.info(
            "%s played %s for %d points",
            side.value,
            ", ".join(w.text for w in proposal.words),
            proposal.points,
        )
        self._check_game_over()
        return proposal

    def _record_points(self, points: int) -> None:
        self.scoreless_turns = self.scoreless_turns + 1 if points == 0 else 0

    def _check_game_over(self) -> None:
        reason: GameEndReason | None = None
        if self.pass_streaks[Side.PLAYER] >= PASS_LIMIT:
            reason = GameEndReason.PLAYER_PASSED_THREE_TIMES
        elif self.pass_streaks[Side.OPPONENT] >= PASS_LIMIT:
            reason = GameEndReason.OPPONENT_PASSED_THREE_TIMES
        elif not self.bag.remaining() and (not self.player_rack or not self.opponent_rack):
            reason = GameEndReason.BAG_EMPTY_AND_RACK_EMPTIED
        elif self.scoreless_turns >= SCORELESS_LIMIT and any(s > 0 for s in self.scores.values()):
            reason = GameEndReason.THREE_SCORELESS_TURNS
        if reason is None:
            return
        self.ended = True
        self.end_reason = reason
        log.info("Match over: %s, scores %s", reason.name, self.score_table())

    def score_table(self) -> dict[str, int]:
        return {side.value: score for side, score in self.scores.items()}

    def winner(self) -> Side | None:
        """Side with more points once the match is over; None for a draw or a running match."""
        if not self.ended:
            return None
        player, opponent = self.scores[Side.PLAYER], self.scores[Side.OPPONENT]
        if player == opponent:
            return None
        return Side.PLAYER if player > opponent else Side.OPPONENT
