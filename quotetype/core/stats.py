from __future__ import annotations

from dataclasses import dataclass

CHARS_PER_WORD = 5


@dataclass
class TypingStats:
    """Live statistics for one typing attempt."""

    wpm: float = 0.0
    accuracy: float = 100.0
    correct_chars: int = 0
    incorrect_chars: int = 0
    total_chars: int = 0
    elapsed_time: float = 0.0

    def record(self, correct: bool) -> None:
        if correct:
            self.correct_chars += 1
        else:
            self.incorrect_chars += 1
        self.accuracy = calculate_accuracy(self.correct_chars, self.incorrect_chars)

    def revert(self, correct: bool) -> None:
        """Undo one recorded keystroke; counters never drop below zero."""
        if correct:
            self.correct_chars = max(0, self.correct_chars - 1)
        else:
            self.incorrect_chars = max(0, self.incorrect_chars - 1)
        self.accuracy = calculate_accuracy(self.correct_chars, self.incorrect_chars)


def calculate_wpm(correct_chars: int, elapsed_seconds: float) -> float:
    """Words per minute using the five-characters-per-word convention."""
    if elapsed_seconds <= 0:
        return 0.0
    return max(0.0, (correct_chars / CHARS_PER_WORD) / (elapsed_seconds / 60.0))


def calculate_accuracy(correct_chars: int, incorrect_chars: int) -> float:
    total = correct_chars + incorrect_chars
    if total <= 0:
        return 100.0
    return (correct_chars / total) * 100.0
