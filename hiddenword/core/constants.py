from __future__ import annotations

import string

BOARD_SIZE = 11
RACK_SIZE = 7

CENTER = (BOARD_SIZE // 2, BOARD_SIZE // 2)  # (x, y)

ALPHABET = string.ascii_uppercase

BLANK = "?"

# Literal words that skip modifiers and score a flat amount
BONUS_WORDS: dict[str, int] = {"BATMAN": 100}

VOWELS = frozenset("AEIOU")
