"""Tests for the search cursor: wrap-around, clearing, and re-running terms."""

from __future__ import annotations

import unittest

from mdrs.search import NO_MATCH, SearchMatch, SearchState

TEXT = "foo\nbar foo\nbaz\nfoo"


class SearchStateTests(unittest.TestCase):
    def test_set_term_points_at_first_match(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        self.assertEqual(state.match_count, 3)
        self.assertEqual(state.current_index, 0)
        self.assertEqual(state.current(), (SearchMatch(0, 0, 3), True))

    def test_set_term_without_matches(self) -> None:
        state = SearchState()
        state.set_term("zzz", TEXT)
        self.assertTrue(state.is_active)
        self.assertEqual(state.current_index, NO_MATCH)
        self.assertEqual(state.current(), (None, False))
        self.assertEqual(state.next(), (None, False))
        self.assertEqual(state.prev(), (None, False))
        self.assertEqual(state.status_text(), "No matches for: zzz")

    def test_next_wraps_around(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        lines = [state.next()[0].line for _ in range(4)]
        self.assertEqual(lines, [1, 3, 0, 1])

    def test_prev_wraps_around(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        match, found = state.prev()
        self.assertTrue(found)
        self.assertEqual(match.line, 3)
        self.assertEqual(state.current_index, 2)

    def test_next_and_prev_cycle_back_to_start(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        for _ in range(state.match_count):
            state.next()
        self.assertEqual(state.current_index, 0)
        for _ in range(state.match_count):
            state.prev()
        self.assertEqual(state.current_index, 0)

    def test_clear_resets_everything(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        state.clear()
        self.assertEqual(state.term, "")
        self.assertEqual(state.matches, [])
        self.assertEqual(state.current_index, NO_MATCH)
        self.assertFalse(state.is_active)
        self.assertEqual(state.status_text(), "")

    def test_status_text_counts_from_one(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        state.next()
        self.assertEqual(state.status_text(), "Match 2 of 3: foo")

    def test_refresh_keeps_position_clamped(self) -> None:
        state = SearchState()
        state.set_term("foo", TEXT)
        state.prev()
        state.refresh("foo\nfoo")
        self.assertEqual(state.match_count, 2)
        self.assertEqual(state.current_index, 1)

    def test_refresh_without_term_is_noop(self) -> None:
        state = SearchState()
        state.refresh(TEXT)
        self.assertEqual(state.matches, [])

    def test_toggle_case_sensitive(self) -> None:
        state = SearchState()
        self.assertTrue(state.toggle_case_sensitive())
        state.set_term("FOO", TEXT)
        self.assertEqual(state.match_count, 0)
        self.assertFalse(state.toggle_case_sensitive())
        state.set_term("FOO", TEXT)
        self.assertEqual(state.match_count, 3)


if __name__ == "__main__":
    unittest.main()
