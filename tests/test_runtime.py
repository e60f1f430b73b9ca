"""Tests for mode-based key routing, the main loop, and non-interactive output."""

from __future__ import annotations

import os
import unittest
from unittest import mock

from mdrs.config import Keybindings, ViewerConfig
from mdrs.keys import KeyBindingTable
from mdrs.runtime import handle_key, run_main_loop, run_pager
from mdrs.session import ViewerSession
from mdrs.ui_theme import PLAIN_THEME


def _identity(document: str, width: int) -> str:
    return document


def _session() -> ViewerSession:
    document = "".join(f"line {i} foo\n" if i % 10 == 0 else f"line {i}\n" for i in range(50))
    session = ViewerSession(document, renderer=_identity, name="doc.md")
    session.resize(80, 11)
    return session


TABLE = KeyBindingTable(Keybindings())


class HandleKeyTests(unittest.TestCase):
    def test_normal_mode_dispatches_bound_actions(self) -> None:
        session = _session()
        self.assertTrue(handle_key(session, TABLE, "j"))
        self.assertEqual(session.viewport.y_offset, 1)
        self.assertTrue(handle_key(session, TABLE, "unbound"))
        self.assertFalse(handle_key(session, TABLE, "q"))

    def test_help_mode_swallows_keys_until_closed(self) -> None:
        session = _session()
        handle_key(session, TABLE, "?")
        self.assertTrue(session.show_help)
        self.assertTrue(handle_key(session, TABLE, "j"))
        self.assertTrue(session.show_help)
        self.assertEqual(session.viewport.y_offset, 0)
        self.assertTrue(handle_key(session, TABLE, "q"))
        self.assertFalse(session.show_help)

    def test_search_entry_mode(self) -> None:
        session = _session()
        handle_key(session, TABLE, "/")
        for key in ("f", "o", "x", "BACKSPACE", "o", "q"):
            self.assertTrue(handle_key(session, TABLE, key))
        self.assertEqual(session.search_buffer, "fooq")
        handle_key(session, TABLE, "BACKSPACE")
        handle_key(session, TABLE, "ENTER")
        self.assertFalse(session.search_entry_active)
        self.assertEqual(session.status_text(), "Match 1 of 5: foo")

        handle_key(session, TABLE, "n")
        self.assertEqual(session.status_text(), "Match 2 of 5: foo")

    def test_search_entry_cancel_keys(self) -> None:
        for cancel in ("ESC", "CTRL_C", "CTRL_G"):
            with self.subTest(cancel=cancel):
                session = _session()
                handle_key(session, TABLE, "/")
                handle_key(session, TABLE, "f")
                self.assertTrue(handle_key(session, TABLE, cancel))
                self.assertFalse(session.search_entry_active)
                self.assertFalse(session.search.is_active)


class MainLoopTests(unittest.TestCase):
    def test_loop_draws_reads_and_quits(self) -> None:
        session = _session()
        terminal = mock.MagicMock()
        size = os.terminal_size((80, 11))

        with mock.patch("mdrs.runtime.read_key", side_effect=["", "j", "q"]) as read_mock:
            run_main_loop(session, terminal, 7, TABLE, PLAIN_THEME, terminal_size=lambda: size)

        terminal.raw_mode.assert_called_once_with()
        self.assertEqual(terminal.write_frame.call_count, 2)
        self.assertEqual(read_mock.call_count, 3)
        self.assertEqual(read_mock.call_args.args, (7,))
        self.assertEqual(session.viewport.y_offset, 1)

    def test_resize_triggers_redraw(self) -> None:
        session = _session()
        terminal = mock.MagicMock()
        sizes = iter([os.terminal_size((80, 11)), os.terminal_size((80, 11)), os.terminal_size((60, 8))])

        with mock.patch("mdrs.runtime.read_key", side_effect=["", "", "q"]):
            run_main_loop(session, terminal, 0, TABLE, PLAIN_THEME, terminal_size=lambda: next(sizes))

        self.assertEqual(terminal.write_frame.call_count, 2)
        self.assertEqual(session.content_rows, 7)


class RunPagerTests(unittest.TestCase):
    def test_nopager_prints_rendered_markdown(self) -> None:
        stdout = mock.MagicMock()
        stdout.fileno.return_value = 1
        with mock.patch("mdrs.runtime.sys.stdout", stdout), mock.patch("mdrs.runtime.os.isatty", return_value=False):
            run_pager("# Title\n\nbody\n", "doc.md", ViewerConfig(), nopager=True, width=40)

        stdout.write.assert_called_once_with("    # Title\n\n    body\n")

    def test_non_tty_stdout_prints_instead_of_paging(self) -> None:
        stdout = mock.MagicMock()
        stdout.fileno.return_value = 1
        with mock.patch("mdrs.runtime.sys.stdout", stdout), mock.patch(
            "mdrs.runtime.os.isatty", return_value=False
        ), mock.patch("mdrs.runtime.run_main_loop") as loop_mock:
            run_pager("text\n", "doc.md", ViewerConfig(), width=40)

        loop_mock.assert_not_called()
        stdout.write.assert_called_once_with("    text\n")


if __name__ == "__main__":
    unittest.main()
