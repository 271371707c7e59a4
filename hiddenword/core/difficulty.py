"""Opponent difficulty tiers and their search budgets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SearchLimits:
    """Work bounds of one search. None means unlimited."""

    anchor_limit: int | None
    max_evaluations: int | None


class Difficulty(Enum):
    """Opponent skill tier.

    Determines how the opponent searches and which candidate it picks:
    - EASY: small budget, drawn to evil cells, short low-scoring words
    - NORMAL: medium budget, random pick among the strong mid-length moves
    - HARD: exhaustive search, always the best-scoring move
    """

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @property
    def limits(self) -> SearchLimits:
        """Default anchor cap and evaluation budget."""
        return _LIMITS[self]

    @property
    def shuffles_anchors(self) -> bool:
        return self is not Difficulty.HARD

    @classmethod
    def from_string(cls, value: str) -> Difficulty:
        """Convert string to Difficulty.

        Raises:
            ValueError: If the string names no tier
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(d.value for d in cls)
            raise ValueError(f"Invalid difficulty: {value}. Valid values: {valid}")


_LIMITS: dict[Difficulty, SearchLimits] = {
    Difficulty.EASY: SearchLimits(anchor_limit=14, max_evaluations=250),
    Difficulty.NORMAL: SearchLimits(anchor_limit=24, max_evaluations=700),
    Difficulty.HARD: SearchLimits(anchor_limit=None, max_evaluations=None),
}
