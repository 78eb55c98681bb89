"""Keystroke processing for a single typing attempt.

All functions here operate on a :class:`SessionState` owned by the caller and
mutate it in place. Each call completes its cursor, character and statistics
updates before returning, so a caller processing events one at a time never
observes a half-applied keystroke. Timer handling and mode rules are left to
:mod:`quotetype.core.session`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from quotetype.core.stats import TypingStats
from quotetype.core.words import Character, CharState, Word, tokenize

logger = logging.getLogger(__name__)

SPACE = " "


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Char:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class RequestNewQuote:
    pass


@dataclass(frozen=True)
class RequestFocus:
    pass


KeyCommand = Union[Char, Backspace, RequestNewQuote, RequestFocus]


class KeyResult(str, Enum):
    IGNORED = "ignored"
    WORD_ADVANCED = "word_advanced"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CORRECTED = "corrected"


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass
class SessionState:
    """Words, cursor and statistics of one attempt at one quote."""

    quote: str
    words: List[Word]
    stats: TypingStats = field(default_factory=TypingStats)
    word_index: int = 0
    char_index: int = 0
    is_active: bool = False
    is_finished: bool = False
    # Typed state of the last character of a word the cursor backed into,
    # stored as (word_index, char_index, state) while that character shows as current.
    masked: Optional[Tuple[int, int, CharState]] = None

    @classmethod
    def from_quote(cls, quote: str) -> "SessionState":
        return cls(quote=quote, words=tokenize(quote), stats=TypingStats(total_chars=len(quote)))

    @property
    def current_word(self) -> Optional[Word]:
        if 0 <= self.word_index < len(self.words):
            return self.words[self.word_index]
        return None

    @property
    def is_last_word(self) -> bool:
        return self.word_index == len(self.words) - 1

    def current_character(self) -> Optional[Character]:
        """The character the user is expected to type next, if any."""
        word = self.current_word
        if word is None or self.char_index >= len(word):
            return None
        return word.characters[self.char_index]


# ---------------------------------------------------------------------------
# Input processing
# ---------------------------------------------------------------------------

def process_keystroke(state: SessionState, input_char: str) -> KeyResult:
    """Apply one typed character (a space or a printable character)."""
    if state.is_finished or not state.words or not input_char:
        return KeyResult.IGNORED

    if not state.is_active:
        state.is_active = True

    word = state.words[state.word_index]

    if input_char == SPACE:
        return _advance_word(state, word)

    if state.char_index >= len(word):
        return KeyResult.IGNORED

    expected = word.characters[state.char_index]
    correct = input_char == expected.char
    state.stats.record(correct)
    expected.state = CharState.CORRECT if correct else CharState.INCORRECT

    if state.char_index < len(word) - 1:
        word.characters[state.char_index + 1].state = CharState.CURRENT
    elif state.is_last_word:
        state.is_finished = True
        state.is_active = False
        logger.debug("Finished quote with %d/%d correct", state.stats.correct_chars, state.stats.total_chars)

    state.char_index += 1
    return KeyResult.CORRECT if correct else KeyResult.INCORRECT


def _advance_word(state: SessionState, word: Word) -> KeyResult:
    # Only a fully typed word accepts the terminating space.
    if state.char_index != len(word) or state.is_last_word:
        return KeyResult.IGNORED

    _unmask(state)
    state.word_index += 1
    state.char_index = 0
    next_word = state.words[state.word_index]
    if next_word.characters:
        next_word.characters[0].state = CharState.CURRENT
    elif state.is_last_word:
        # A trailing space leaves an empty final word with nothing to type.
        state.is_finished = True
        state.is_active = False
    return KeyResult.WORD_ADVANCED


# ---------------------------------------------------------------------------
# Smart backspace
# ---------------------------------------------------------------------------

def smart_backspace(state: SessionState) -> KeyResult:
    """Undo input, jumping straight back to the first error of the current word.

    At the start of a word the cursor moves to the end of the previous word
    without touching statistics. Inside a word that contains an incorrect
    character, the cursor jumps to the end of the leading correct run in one
    step. Otherwise a single character is removed and its count reverted.
    """
    if state.is_finished or not state.words:
        return KeyResult.IGNORED

    masked = state.masked
    state.masked = None

    if state.char_index == 0:
        if state.word_index == 0:
            return KeyResult.IGNORED
        current = state.current_character()
        if current is not None:
            current.state = CharState.INACTIVE
        state.word_index -= 1
        previous = state.words[state.word_index]
        state.char_index = len(previous)
        if previous.characters:
            last = previous.characters[-1]
            state.masked = (state.word_index, len(previous) - 1, last.state)
            last.state = CharState.CURRENT
        return KeyResult.CORRECTED

    word = state.words[state.word_index]
    typed = [_typed_state(state, masked, i) for i in range(state.char_index)]
    last_correct, has_errors = _scan_typed(typed)

    if has_errors and last_correct < state.char_index:
        for ch in word.characters[last_correct:]:
            ch.state = CharState.INACTIVE
        word.characters[last_correct].state = CharState.CURRENT
        state.char_index = last_correct
        return KeyResult.CORRECTED

    old_current = state.current_character()
    state.char_index -= 1
    reverted = word.characters[state.char_index]
    prior = typed[state.char_index]
    reverted.state = CharState.CURRENT
    if old_current is not None:
        old_current.state = CharState.INACTIVE
    if prior is CharState.CORRECT:
        state.stats.revert(correct=True)
    elif prior is CharState.INCORRECT:
        state.stats.revert(correct=False)
    return KeyResult.CORRECTED


def _scan_typed(typed: List[CharState]) -> tuple[int, bool]:
    """Return (end of the leading correct run, whether any error was typed)."""
    last_correct = 0
    in_run = True
    has_errors = False
    for index, char_state in enumerate(typed):
        if char_state is CharState.INCORRECT:
            has_errors = True
        if in_run and char_state is CharState.CORRECT:
            last_correct = index + 1
        else:
            in_run = False
    return last_correct, has_errors


def _typed_state(
    state: SessionState, masked: Optional[Tuple[int, int, CharState]], index: int
) -> CharState:
    if masked is not None and masked[:2] == (state.word_index, index):
        return masked[2]
    return state.words[state.word_index].characters[index].state


def _unmask(state: SessionState) -> None:
    if state.masked is None:
        return
    word_index, char_index, char_state = state.masked
    state.words[word_index].characters[char_index].state = char_state
    state.masked = None


def dispatch(state: SessionState, command: KeyCommand) -> KeyResult:
    """Route a key command to the matching state transition.

    Quote and focus requests are session-level concerns and are ignored here.
    """
    if isinstance(command, Char):
        return process_keystroke(state, command.char)
    if isinstance(command, Backspace):
        return smart_backspace(state)
    return KeyResult.IGNORED
