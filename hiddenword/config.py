"""Configuration and environment flags for hiddenword.

Rules:
- `.env` is loaded early but never overrides variables already set in the OS.
- HIDDENWORD_WORDLIST / HIDDENWORD_BLOCKLIST replace the bundled word lists.
- HIDDENWORD_<TIER>_MAX_EVALUATIONS / HIDDENWORD_<TIER>_ANCHOR_LIMIT tune the
  opponent search budget per difficulty tier (EASY, NORMAL, HARD).
  A value of 0 or below means "unlimited".
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

from .core.assets import get_blocklist_path, get_wordlist_path
from .core.difficulty import Difficulty, SearchLimits

# Load .env early, without replacing existing OS variables
if os.getenv("PYTEST_CURRENT_TEST") is None:
    load_dotenv(override=False)

_TRUE = {"1", "true", "yes", "on", "y", "t"}
_FALSE = {"0", "false", "no", "off", "n", "f"}


def _parse_bool(val: str | None) -> bool | None:
    """Tolerant boolean parsing; None when the value is not recognised."""
    if val is None:
        return None
    v = val.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return None


def _parse_int(val: str | None) -> int | None:
    """Integer parsing that returns None for missing or malformed values."""
    if val is None:
        return None
    try:
        return int(val.strip())
    except ValueError:
        return None


def wordlist_path() -> str:
    return os.getenv("HIDDENWORD_WORDLIST") or get_wordlist_path()


def blocklist_path() -> str:
    return os.getenv("HIDDENWORD_BLOCKLIST") or get_blocklist_path()


def default_seed() -> int | None:
    """Seed for CLI runs (HIDDENWORD_SEED); None keeps selection random."""
    return _parse_int(os.getenv("HIDDENWORD_SEED"))


def show_hidden_modifiers() -> bool:
    """Whether the CLI board dump shows un-revealed modifiers (debug aid)."""
    return bool(_parse_bool(os.getenv("HIDDENWORD_SHOW_HIDDEN")))


def effective_search_limits(difficulty: Difficulty) -> SearchLimits:
    """Default search limits of `difficulty` with environment overrides applied.

    - override > 0  -> that cap
    - override <= 0 -> unlimited
    - missing/bad   -> tier default
    """
    tier = difficulty.value.upper()
    base = difficulty.limits
    anchors = _parse_int(os.getenv(f"HIDDENWORD_{tier}_ANCHOR_LIMIT"))
    evals = _parse_int(os.getenv(f"HIDDENWORD_{tier}_MAX_EVALUATIONS"))
    return SearchLimits(
        anchor_limit=base.anchor_limit if anchors is None else (anchors if anchors > 0 else None),
        max_evaluations=base.max_evaluations if evals is None else (evals if evals > 0 else None),
    )
