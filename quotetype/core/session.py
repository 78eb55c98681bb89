from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from quotetype.core.engine import (
    KeyCommand,
    KeyResult,
    RequestFocus,
    RequestNewQuote,
    SessionState,
)
from quotetype.core import engine
from quotetype.core.shortcuts import ShortcutMap
from quotetype.core.stats import TypingStats
from quotetype.core.timer import DEFAULT_TICK_MS, Scheduler, StatsTimer
from quotetype.core.words import CharState

logger = logging.getLogger(__name__)

# Called with the quote and its final stats; a truthy return marks a new personal best.
CompletionCallback = Callable[[str, TypingStats], Optional[bool]]


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a session for the presentation layer."""

    quote_available: bool
    quote: str
    words: Tuple[Tuple[Tuple[str, CharState], ...], ...]
    stats: TypingStats
    word_index: int
    char_index: int
    is_active: bool
    is_finished: bool
    death_mode: bool
    repeat_mode: bool
    death_mode_failures: int
    new_personal_best: bool
    quote_number: int
    total_quotes: int
    shortcuts: ShortcutMap


class TypingSession:
    """Lifecycle of typing tests over a pool of quotes.

    Owns the current :class:`SessionState`, the stats timer and the mode
    flags. Death mode and repeat mode are mutually exclusive. In death mode
    any incorrect keystroke counts a failure and restarts the quote.

    Completion stats are reported to ``on_complete`` at most once per
    attempt, when the last character of the last word is typed.
    """

    def __init__(
        self,
        quotes: Sequence[str],
        scheduler: Scheduler,
        on_complete: Optional[CompletionCallback] = None,
        *,
        tick_ms: int = DEFAULT_TICK_MS,
        auto_advance: bool = True,
        shortcuts: Optional[ShortcutMap] = None,
        on_focus: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._quotes: List[str] = list(quotes)
        self._on_complete = on_complete
        self._on_focus = on_focus
        self._auto_advance = auto_advance
        self._rng = rng or random.Random()
        self._timer = StatsTimer(scheduler, tick_ms, clock)
        self._state: Optional[SessionState] = None
        self._completion_reported = False
        self.shortcuts = shortcuts or ShortcutMap()
        self.death_mode = False
        self.repeat_mode = False
        self.death_mode_failures = 0
        self.new_personal_best = False
        self.quote_number = 1
        self.session_wpms: List[float] = []
        self.load_quote()

    @property
    def state(self) -> Optional[SessionState]:
        """Current attempt, or None when no quote is available."""
        return self._state

    @property
    def quotes(self) -> List[str]:
        return list(self._quotes)

    @property
    def timer(self) -> StatsTimer:
        return self._timer

    # ------------------------------------------------------------------
    # Quote loading
    # ------------------------------------------------------------------

    def set_quotes(self, quotes: Sequence[str]) -> bool:
        """Replace the quote pool (e.g. after an upload) and load from it."""
        self._quotes = list(quotes)
        self.quote_number = 1
        self.session_wpms = []
        return self.load_quote()

    def load_quote(self) -> bool:
        """Pick a random quote from the pool. Returns False if none is available."""
        self._timer.stop()
        if not self._quotes:
            logger.warning("No quotes available to load")
            self._state = None
            return False
        quote = self._quotes[self._rng.randrange(len(self._quotes))]
        return self.select_quote(quote)

    def select_quote(self, quote: str) -> bool:
        """Load an explicitly chosen quote."""
        self._timer.stop()
        self.death_mode_failures = 0
        self.new_personal_best = False
        self._completion_reported = False
        if not quote:
            logger.warning("Refusing to load an empty quote")
            self._state = None
            return False
        self._state = SessionState.from_quote(quote)
        logger.debug("Loaded quote (%d chars, %d words)", len(quote), len(self._state.words))
        return True

    def reset(self) -> None:
        """Restart the current quote, keeping mode settings."""
        self._timer.stop()
        self._completion_reported = False
        self.new_personal_best = False
        if self._state is None:
            return
        self._state = SessionState.from_quote(self._state.quote)

    def advance(self) -> bool:
        """Report the finished attempt and move on to the next one.

        Repeat mode reloads the same quote, otherwise a new one is picked.
        Returns False if the current attempt is not finished.
        """
        state = self._state
        if state is None or not state.is_finished:
            return False
        self._report_completion()
        best = self.new_personal_best
        self.quote_number = min(self.quote_number + 1, max(1, len(self._quotes)))
        if self.repeat_mode:
            self.reset()
        else:
            self.load_quote()
        self.new_personal_best = best
        return True

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def toggle_death_mode(self) -> None:
        self.death_mode = not self.death_mode
        if self.death_mode:
            self.repeat_mode = False
        self.reset()

    def toggle_repeat_mode(self) -> None:
        self.repeat_mode = not self.repeat_mode
        if self.repeat_mode:
            self.death_mode = False
        self.reset()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def dispatch(self, command: KeyCommand) -> Snapshot:
        """Apply one key command and return the resulting snapshot."""
        if isinstance(command, RequestNewQuote):
            self.load_quote()
        elif isinstance(command, RequestFocus):
            if self._on_focus is not None:
                self._on_focus()
        elif self._state is not None:
            self._apply(self._state, command)
        return self.snapshot()

    def _apply(self, state: SessionState, command: KeyCommand) -> None:
        was_active = state.is_active
        was_finished = state.is_finished
        result = engine.dispatch(state, command)

        if state.is_active and not was_active:
            self._timer.start(state.stats)

        if result is KeyResult.INCORRECT and self.death_mode:
            self.death_mode_failures += 1
            logger.info("Death mode failure #%d, restarting quote", self.death_mode_failures)
            self.reset()
            return

        if state.is_finished and not was_finished:
            self._timer.tick()
            self._timer.stop()
            self._report_completion()
            if self._auto_advance:
                self.advance()

    def _report_completion(self) -> None:
        if self._completion_reported or self._state is None:
            return
        self._completion_reported = True
        stats = replace(self._state.stats)
        logger.info("Quote finished: %.1f wpm, %.1f%% accuracy", stats.wpm, stats.accuracy)
        if stats.wpm > 0:
            self.session_wpms.append(stats.wpm)
        if self._on_complete is not None:
            self.new_personal_best = bool(self._on_complete(self._state.quote, stats))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        state = self._state
        modes = dict(
            death_mode=self.death_mode,
            repeat_mode=self.repeat_mode,
            death_mode_failures=self.death_mode_failures,
            new_personal_best=self.new_personal_best,
            quote_number=self.quote_number,
            total_quotes=len(self._quotes),
            shortcuts=self.shortcuts,
        )
        if state is None:
            return Snapshot(
                quote_available=False,
                quote="",
                words=(),
                stats=TypingStats(),
                word_index=0,
                char_index=0,
                is_active=False,
                is_finished=False,
                **modes,
            )
        return Snapshot(
            quote_available=True,
            quote=state.quote,
            words=tuple(tuple((c.char, c.state) for c in w.characters) for w in state.words),
            stats=replace(state.stats),
            word_index=state.word_index,
            char_index=state.char_index,
            is_active=state.is_active,
            is_finished=state.is_finished,
            **modes,
        )
