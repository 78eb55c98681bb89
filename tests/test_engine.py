"""Tests for quotetype.core.engine – keystroke processing and smart backspace."""

from __future__ import annotations

import copy

import pytest

from quotetype.core.engine import (
    Backspace,
    Char,
    KeyResult,
    RequestFocus,
    RequestNewQuote,
    SessionState,
    dispatch,
    process_keystroke,
    smart_backspace,
)
from quotetype.core.words import CharState

C = CharState.CORRECT
I = CharState.INCORRECT
N = CharState.INACTIVE
CUR = CharState.CURRENT


def _type(state: SessionState, text: str) -> None:
    for ch in text:
        process_keystroke(state, ch)


def _word_states(state: SessionState, index: int):
    return [c.state for c in state.words[index].characters]


def _all_states(state: SessionState):
    return [c.state for w in state.words for c in w.characters]


# ---------------------------------------------------------------------------
# SessionState
# ---------------------------------------------------------------------------

class TestSessionState:
    def test_from_quote(self):
        s = SessionState.from_quote("abc de")
        assert s.stats.total_chars == 6
        assert (s.word_index, s.char_index) == (0, 0)
        assert not s.is_active
        assert not s.is_finished

    def test_current_character(self):
        s = SessionState.from_quote("ab")
        assert s.current_character().char == "a"
        _type(s, "ab")
        assert s.current_character() is None


# ---------------------------------------------------------------------------
# process_keystroke
# ---------------------------------------------------------------------------

class TestProcessKeystroke:
    def test_first_keystroke_activates(self):
        s = SessionState.from_quote("abc")
        process_keystroke(s, "a")
        assert s.is_active

    def test_first_space_also_activates(self):
        s = SessionState.from_quote("abc")
        assert process_keystroke(s, " ") is KeyResult.IGNORED
        assert s.is_active

    def test_correct_char(self):
        s = SessionState.from_quote("abc")
        assert process_keystroke(s, "a") is KeyResult.CORRECT
        assert _word_states(s, 0) == [C, CUR, N]
        assert s.char_index == 1
        assert s.stats.correct_chars == 1

    def test_incorrect_char(self):
        s = SessionState.from_quote("abc")
        assert process_keystroke(s, "z") is KeyResult.INCORRECT
        assert _word_states(s, 0) == [I, CUR, N]
        assert s.stats.incorrect_chars == 1
        assert s.stats.accuracy == 0.0

    def test_end_of_word_has_no_current(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab")
        assert CUR not in _all_states(s)
        assert s.char_index == 2

    def test_space_advances_after_full_word(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab")
        assert process_keystroke(s, " ") is KeyResult.WORD_ADVANCED
        assert (s.word_index, s.char_index) == (1, 0)
        assert _word_states(s, 1) == [CUR, N]

    def test_space_mid_word_is_noop(self):
        s = SessionState.from_quote("abc de")
        process_keystroke(s, "a")
        before = copy.deepcopy(s)
        assert process_keystroke(s, " ") is KeyResult.IGNORED
        assert s == before

    def test_space_does_not_count_in_stats(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab ")
        assert s.stats.correct_chars + s.stats.incorrect_chars == 2

    def test_extra_chars_at_word_end_ignored(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab")
        assert process_keystroke(s, "x") is KeyResult.IGNORED
        assert s.stats.incorrect_chars == 0

    def test_finishes_on_last_char_without_space(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab c")
        assert not s.is_finished
        process_keystroke(s, "d")
        assert s.is_finished
        assert not s.is_active

    def test_input_after_finish_ignored(self):
        s = SessionState.from_quote("a")
        process_keystroke(s, "a")
        before = copy.deepcopy(s)
        assert process_keystroke(s, "a") is KeyResult.IGNORED
        assert process_keystroke(s, " ") is KeyResult.IGNORED
        assert s == before

    def test_space_on_last_word_ignored(self):
        s = SessionState.from_quote("ab")
        _type(s, "a")
        assert process_keystroke(s, " ") is KeyResult.IGNORED

    def test_trailing_space_quote_finishes_on_final_space(self):
        s = SessionState.from_quote("ab ")
        _type(s, "ab")
        assert not s.is_finished
        process_keystroke(s, " ")
        assert s.is_finished

    def test_empty_input_ignored(self):
        s = SessionState.from_quote("ab")
        assert process_keystroke(s, "") is KeyResult.IGNORED
        assert not s.is_active

    def test_perfect_run(self):
        quote = "The quick brown fox."
        s = SessionState.from_quote(quote)
        for i, ch in enumerate(quote):
            assert not s.is_finished
            process_keystroke(s, ch)
        assert s.is_finished
        assert s.stats.incorrect_chars == 0
        assert s.stats.accuracy == 100.0
        assert s.stats.correct_chars == len(quote.replace(" ", ""))


# ---------------------------------------------------------------------------
# smart_backspace
# ---------------------------------------------------------------------------

class TestSmartBackspace:
    def test_noop_at_very_start(self):
        s = SessionState.from_quote("abc")
        before = copy.deepcopy(s)
        assert smart_backspace(s) is KeyResult.IGNORED
        assert s == before

    def test_single_step_reverts_correct(self):
        s = SessionState.from_quote("abc")
        _type(s, "ab")
        smart_backspace(s)
        assert s.char_index == 1
        assert _word_states(s, 0) == [C, CUR, N]
        assert s.stats.correct_chars == 1

    def test_jumps_to_first_error(self):
        s = SessionState.from_quote("abcde")
        _type(s, "axcd")
        smart_backspace(s)
        assert s.char_index == 1
        assert _word_states(s, 0) == [C, CUR, N, N, N]

    def test_jump_keeps_counts(self):
        s = SessionState.from_quote("abcde")
        _type(s, "axcd")
        smart_backspace(s)
        assert s.stats.correct_chars == 3
        assert s.stats.incorrect_chars == 1

    def test_trailing_error_jump(self):
        s = SessionState.from_quote("abc de")
        _type(s, "abx")
        smart_backspace(s)
        assert s.char_index == 2
        assert _word_states(s, 0) == [C, C, CUR]
        assert s.stats.incorrect_chars == 1

    def test_error_at_word_start_jumps_to_zero(self):
        s = SessionState.from_quote("abcd")
        _type(s, "xbc")
        smart_backspace(s)
        assert s.char_index == 0
        assert _word_states(s, 0) == [CUR, N, N, N]

    def test_cross_word_boundary(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab ")
        smart_backspace(s)
        assert (s.word_index, s.char_index) == (0, 2)
        assert _word_states(s, 0) == [C, CUR]
        assert _word_states(s, 1) == [N, N]
        assert s.stats.correct_chars == 2

    def test_exactly_one_current_after_boundary(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab ")
        smart_backspace(s)
        assert _all_states(s).count(CUR) == 1

    def test_ignored_after_finish(self):
        s = SessionState.from_quote("ab")
        _type(s, "ab")
        assert smart_backspace(s) is KeyResult.IGNORED
        assert s.char_index == 2

    def test_backspace_across_space_reverts_counts(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab c")
        for _ in range(4):
            smart_backspace(s)
        assert (s.word_index, s.char_index) == (0, 0)
        assert _all_states(s) == [CUR, N, N, N]
        assert s.stats.correct_chars == 0
        assert s.stats.incorrect_chars == 0

    def test_backspace_across_space_reverts_incorrect(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ax ")
        smart_backspace(s)
        assert _word_states(s, 0) == [C, CUR]
        smart_backspace(s)
        # the masked error is still found, so the cursor jumps without recounting
        assert s.char_index == 1
        assert _word_states(s, 0) == [C, CUR]
        assert s.stats.incorrect_chars == 1

    def test_space_after_boundary_backspace_restores_state(self):
        s = SessionState.from_quote("ab cd")
        _type(s, "ab ")
        smart_backspace(s)
        process_keystroke(s, " ")
        assert _word_states(s, 0) == [C, C]
        assert _word_states(s, 1) == [CUR, N]
        assert _all_states(s).count(CUR) == 1

    @pytest.mark.parametrize("typed", ["a", "ab", "abcd", "abcdefg", "abcdefg ", "abcdefg hi"])
    def test_backspaces_undo_correct_keystrokes(self, typed: str):
        s = SessionState.from_quote("abcdefg hij")
        process_keystroke(s, "a")
        smart_backspace(s)
        before = copy.deepcopy(s)
        _type(s, typed)
        for _ in typed:
            smart_backspace(s)
        assert (s.word_index, s.char_index) == (before.word_index, before.char_index)
        assert _all_states(s) == _all_states(before)
        assert (
            s.stats.correct_chars + s.stats.incorrect_chars
            == before.stats.correct_chars + before.stats.incorrect_chars
        )


# ---------------------------------------------------------------------------
# dispatch and scenarios
# ---------------------------------------------------------------------------

class TestDispatch:
    def test_routes_char_and_backspace(self):
        s = SessionState.from_quote("ab")
        assert dispatch(s, Char("a")) is KeyResult.CORRECT
        assert dispatch(s, Backspace()) is KeyResult.CORRECTED
        assert s.char_index == 0

    def test_session_commands_ignored(self):
        s = SessionState.from_quote("ab")
        assert dispatch(s, RequestNewQuote()) is KeyResult.IGNORED
        assert dispatch(s, RequestFocus()) is KeyResult.IGNORED
        assert not s.is_active

    def test_abc_de_scenario(self):
        s = SessionState.from_quote("abc de")
        for command in [Char("a"), Char("b"), Char("x"), Backspace(), Char("c"), Char(" "), Char("d"), Char("e")]:
            dispatch(s, command)
        assert _word_states(s, 0) == [C, C, C]
        assert _word_states(s, 1) == [C, C]
        assert s.is_finished
        assert s.stats.incorrect_chars == 1
        assert s.stats.correct_chars == 5
        assert s.stats.accuracy == pytest.approx(83.3333, rel=1e-4)
