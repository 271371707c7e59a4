"""Word lexicon with a prefix trie for the opponent search.

The lexicon is built once from a curated word list and is never mutated
afterwards, so one instance can be handed to every consumer (validator,
move generator, match) for the whole process lifetime.

Curation of the bundled list:
- only ASCII letters A-Z, uppercased,
- single letters only when listed in `SINGLE_LETTER_WORDS`,
- two-letter words only when listed in `COMMON_TWO_LETTER`,
- an explicit block-list is subtracted,
- the always-legal short words and the bonus words are added.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..config import blocklist_path, wordlist_path
from .constants import BOARD_SIZE, BONUS_WORDS

log = logging.getLogger("hiddenword")

SINGLE_LETTER_WORDS = frozenset({"A", "I"})

COMMON_TWO_LETTER = frozenset({
    "AA", "AB", "AD", "AE", "AG", "AH", "AI", "AL", "AM", "AN", "AR", "AS", "AT", "AW", "AX", "AY",
    "BA", "BE", "BI", "BO", "BY",
    "DA", "DE", "DO",
    "ED", "EF", "EH", "EL", "EM", "EN", "ER", "ES", "ET", "EW", "EX",
    "FA",
    "GO",
    "HA", "HE", "HI", "HM", "HO",
    "ID", "IF", "IN", "IS", "IT",
    "JO",
    "KA", "KI",
    "LA", "LI", "LO",
    "MA", "ME", "MI", "MM", "MO", "MU", "MY",
    "NA", "NE", "NO", "NU",
    "OD", "OE", "OF", "OH", "OI", "OM", "ON", "OP", "OR", "OS", "OW", "OX", "OY",
    "PA", "PE", "PI",
    "QI",
    "RE",
    "SH", "SI", "SO",
    "TA", "TE", "TI", "TO",
    "UH", "UM", "UN", "UP", "US", "UT",
    "WE", "WO",
    "XI", "XU",
    "YA", "YE", "YO",
    "ZA",
})


def _normalize(word: str) -> str:
    w = word.strip().upper()
    if not w or not w.isascii() or not w.isalpha():
        return ""
    return w


class TrieNode:
    """Single node in the prefix trie."""

    __slots__ = ("children", "is_terminal")

    def __init__(self) -> None:
        self.children: dict[str, TrieNode] = {}
        self.is_terminal: bool = False


class Lexicon:
    """Immutable word set plus prefix trie.

    Attributes:
        words: frozen set of accepted words in UPPERCASE.
        root: trie root; only words up to `max_length` letters are in the trie.
    """

    def __init__(
        self,
        words: Iterable[str],
        *,
        bonus_words: Iterable[str] = BONUS_WORDS,
        max_length: int = BOARD_SIZE,
    ) -> None:
        accepted = {w for w in (_normalize(word) for word in words) if w}
        accepted.update(w for w in (_normalize(word) for word in bonus_words) if w)
        self.words: frozenset[str] = frozenset(accepted)
        self.max_length = max_length
        self._root = TrieNode()
        for word in self.words:
            if len(word) <= max_length:
                self._insert(word)

    @classmethod
    def from_word_list(
        cls,
        lines: Iterable[str],
        *,
        blocked: Iterable[str] = (),
        single_letters: Iterable[str] = SINGLE_LETTER_WORDS,
        two_letter: Iterable[str] = COMMON_TWO_LETTER,
        bonus_words: Iterable[str] = BONUS_WORDS,
        max_length: int = BOARD_SIZE,
    ) -> Lexicon:
        """Builds a lexicon from raw word-list lines using the curated filter."""
        singles = frozenset(single_letters)
        twos = frozenset(two_letter)
        block = {w for w in (_normalize(b) for b in blocked if not b.lstrip().startswith("#")) if w}
        words: set[str] = set()
        for line in lines:
            if line.lstrip().startswith("#"):
                continue
            w = _normalize(line)
            if not w:
                continue
            if len(w) == 1 and w not in singles:
                continue
            if len(w) == 2 and w not in twos:
                continue
            words.add(w)
        words -= block
        words |= singles
        words |= twos
        return cls(words, bonus_words=bonus_words, max_length=max_length)

    @classmethod
    def from_path(cls, path: str | Path, blocked_path: str | Path | None = None) -> Lexicon:
        """Loads a word list (one word per line) and an optional block-list."""
        with Path(path).open(encoding="utf-8", errors="ignore") as f:
            lines = f.read().splitlines()
        blocked: list[str] = []
        if blocked_path is not None and Path(blocked_path).exists():
            with Path(blocked_path).open(encoding="utf-8", errors="ignore") as f:
                blocked = f.read().splitlines()
        lexicon = cls.from_word_list(lines, blocked=blocked)
        log.info("Loaded %s words from %s", f"{len(lexicon):,}", path)
        return lexicon

    @classmethod
    def default(cls) -> Lexicon:
        """Bundled word list, unless HIDDENWORD_WORDLIST/HIDDENWORD_BLOCKLIST point elsewhere."""
        return cls.from_path(wordlist_path(), blocklist_path())

    def _insert(self, word: str) -> None:
        node = self._root
        for ch in word:
            nxt = node.children.get(ch)
            if nxt is None:
                nxt = TrieNode()
                node.children[ch] = nxt
            node = nxt
        node.is_terminal = True

    # ---------------- queries ----------------
    def is_word(self, text: str) -> bool:
        """Exact, case-insensitive membership (bonus words included)."""
        if not text:
            return False
        return text.upper() in self.words

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and self.is_word(text)

    def __len__(self) -> int:
        return len(self.words)

    def is_prefix(self, text: str) -> bool:
        node: TrieNode | None = self._root
        for ch in text.upper():
            node = self.child(node, ch)
            if node is None:
                return False
        return True

    # ---------------- trie traversal ----------------
    @property
    def root(self) -> TrieNode:
        return self._root

    @staticmethod
    def child(node: TrieNode | None, letter: str) -> TrieNode | None:
        if node is None:
            return None
        return node.children.get(letter)

    @staticmethod
    def is_terminal(node: TrieNode | None) -> bool:
        return node is not None and node.is_terminal
