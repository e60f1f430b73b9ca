"""Tests for frame composition: document rows, status bar, prompt, and help modal."""

from __future__ import annotations

import unittest

from mdrs.actions import Action
from mdrs.ansi import strip_ansi
from mdrs.config import Keybindings
from mdrs.keys import KeyBindingTable
from mdrs.render import build_prompt_line, build_status_line, help_lines, position_text, render_frame
from mdrs.session import ViewerSession
from mdrs.ui_theme import DEFAULT_THEME, PLAIN_THEME


def _identity(document: str, width: int) -> str:
    return document


def _session() -> ViewerSession:
    lines = [f"line {i}" for i in range(100)]
    lines[3] = "foo and foo"
    lines[50] = "foo"
    session = ViewerSession("\n".join(lines) + "\n", renderer=_identity, name="doc.md")
    session.resize(80, 21)
    return session


class StatusLineTests(unittest.TestCase):
    def test_status_line_right_aligns_help_hint(self) -> None:
        self.assertEqual(build_status_line("left", 20), "left       │ ? Help")

    def test_status_line_truncates_left_text(self) -> None:
        line = build_status_line("x" * 50, 20)
        self.assertEqual(len(line), 19)
        self.assertTrue(line.endswith("│ ? Help"))

    def test_position_text(self) -> None:
        session = _session()
        session.display_text()
        self.assertEqual(position_text(session), "doc.md (1-20/100  20.0%)")

    def test_prompt_line(self) -> None:
        self.assertEqual(build_prompt_line("abc", 80, PLAIN_THEME), "/abc_")
        self.assertEqual(build_prompt_line("abcdefgh", 6, PLAIN_THEME), "/fgh_")


class RenderFrameTests(unittest.TestCase):
    def test_frame_shows_visible_rows_and_status(self) -> None:
        frame = render_frame(_session(), 80, 21, PLAIN_THEME)
        rows = frame.split("\r\n")
        self.assertEqual(len(rows), 21)
        self.assertEqual(rows[0], "\033[H\033[Jline 0")
        self.assertEqual(rows[19], "line 19")
        self.assertTrue(rows[20].startswith("doc.md (1-20/100  20.0%)"))
        self.assertTrue(rows[20].endswith("│ ? Help"))

    def test_status_bar_is_reversed_with_default_theme(self) -> None:
        frame = render_frame(_session(), 80, 21, DEFAULT_THEME)
        last = frame.split("\r\n")[-1]
        self.assertTrue(last.startswith("\033[7m"))
        self.assertTrue(last.endswith("\033[0m"))

    def test_horizontal_offset_slices_rows(self) -> None:
        session = _session()
        session.dispatch(Action.SCROLL_RIGHT)
        session.dispatch(Action.SCROLL_RIGHT)
        frame = render_frame(session, 80, 21, PLAIN_THEME)
        self.assertEqual(frame.split("\r\n")[0], "\033[H\033[Jne 0")

    def test_search_status_replaces_position(self) -> None:
        session = _session()
        session.commit_search_entry("foo")
        frame = render_frame(session, 80, 21, PLAIN_THEME)
        rows = frame.split("\r\n")
        self.assertTrue(rows[-1].startswith("Match 1 of 3: foo"))
        self.assertEqual(strip_ansi(rows[3]), "foo and foo")
        self.assertNotEqual(rows[3], "foo and foo")

    def test_prompt_row_while_entering_search(self) -> None:
        session = _session()
        session.begin_search_entry()
        session.search_entry_key("f")
        session.search_entry_key("o")
        rows = render_frame(session, 80, 21, PLAIN_THEME).split("\r\n")
        self.assertEqual(len(rows), 21)
        self.assertEqual(rows[-1], "/fo_")
        self.assertTrue(rows[-2].startswith("doc.md (1-19/100"))

    def test_frame_resizes_session(self) -> None:
        session = _session()
        render_frame(session, 60, 11, PLAIN_THEME)
        self.assertEqual(session.content_rows, 10)
        self.assertEqual(session.viewport.screen_width, 60)


class HelpTests(unittest.TestCase):
    def test_help_lines_list_configured_keys_per_section(self) -> None:
        lines = help_lines(KeyBindingTable(Keybindings()), PLAIN_THEME)
        text = "\n".join(lines)
        for heading in ("Navigation", "Search", "General", "Notes"):
            self.assertIn(heading, lines)
        self.assertIn("Down, j, e", text)
        self.assertIn("scroll down one line", text)
        self.assertIn("C-t", text)

    def test_help_lines_follow_custom_bindings(self) -> None:
        lines = help_lines(KeyBindingTable(Keybindings(quit=("x",))), PLAIN_THEME)
        quit_line = next(line for line in lines if line.endswith("quit"))
        self.assertEqual(quit_line.split()[0], "x")

    def test_help_modal_replaces_document_frame(self) -> None:
        session = _session()
        session.dispatch(Action.SHOW_HELP)
        frame = render_frame(session, 100, 40, PLAIN_THEME)
        self.assertTrue(frame.startswith("\033[H\033[J"))
        self.assertIn("mdrs help", frame)
        self.assertIn("╭", frame)
        self.assertNotIn("line 0", frame)


if __name__ == "__main__":
    unittest.main()
