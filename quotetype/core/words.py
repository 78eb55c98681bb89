"""Quote tokenization into words of per-character typing state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class CharState(str, Enum):
    INACTIVE = "inactive"
    CURRENT = "current"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass
class Character:
    """A single expected grapheme and how the user has typed it so far."""

    char: str
    state: CharState = CharState.INACTIVE


@dataclass
class Word:
    """A space-delimited run of characters. The separating space is not stored."""

    characters: List[Character] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.characters)

    @property
    def text(self) -> str:
        return "".join(c.char for c in self.characters)


def tokenize(quote: str) -> List[Word]:
    """Split *quote* on single spaces and mark the very first character current.

    Runs of spaces are not collapsed, so ``"a  b"`` yields an empty middle word.
    An empty quote yields no words.
    """
    if not quote:
        return []
    words = [Word([Character(ch) for ch in part]) for part in quote.split(" ")]
    if words[0].characters:
        words[0].characters[0].state = CharState.CURRENT
    return words


def count_chars(words: List[Word]) -> int:
    """Length of the quote the words came from, separating spaces included."""
    if not words:
        return 0
    return sum(len(w) for w in words) + len(words) - 1
