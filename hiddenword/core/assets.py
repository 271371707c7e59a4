"""Access to bundled assets (word list, block-list).

Paths are resolved relative to this module, independent of the cwd.
"""

from __future__ import annotations

from pathlib import Path


def get_assets_path() -> Path:
    """Path to the project's `assets/` directory.

    Found relative to this module (`hiddenword/core/assets.py`).
    """

    return Path(__file__).resolve().parent.parent / "assets"


def get_wordlist_path() -> str:
    """Full path of the bundled `wordlist.txt` (as a text path)."""

    return str(get_assets_path() / "wordlist.txt")


def get_blocklist_path() -> str:
    return str(get_assets_path() / "wordlist-blocked.txt")
