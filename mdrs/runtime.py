"""Pager host: non-interactive output and the interactive event loop.

The loop polls terminal size, redraws when something changed, reads one
key and routes it by mode (help modal, search prompt, or normal viewing).
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Callable

from .config import ViewerConfig
from .input import read_key
from .keys import KeyBindingTable, KeyComboBinding, KeyComboRegistry
from .markdown import PLAIN_THEME, MarkdownTheme, render_markdown
from .render import HELP_CLOSE_KEYS, render_frame
from .session import ViewerSession
from .terminal import TerminalController
from .ui_theme import DEFAULT_THEME, UITheme

logger = logging.getLogger(__name__)

KEY_POLL_MS = 100
DEFAULT_TERMINAL_SIZE = (80, 24)
SEARCH_CANCEL_KEYS = ("ESC", "CTRL_C", "CTRL_G")


def _default_terminal_size() -> os.terminal_size:
    return shutil.get_terminal_size(DEFAULT_TERMINAL_SIZE)


def _close_help(session: ViewerSession) -> bool:
    session.show_help = False
    return True


def _search_entry_registry(session: ViewerSession) -> KeyComboRegistry:
    def commit() -> bool:
        session.commit_search_entry()
        return True

    def cancel() -> bool:
        session.cancel_search_entry()
        return True

    return KeyComboRegistry().register_bindings(
        KeyComboBinding(("ENTER",), commit),
        KeyComboBinding(SEARCH_CANCEL_KEYS, cancel),
    )


def handle_key(session: ViewerSession, table: KeyBindingTable, key: str) -> bool:
    """Route one key token by mode; return ``False`` when the viewer should quit."""
    if session.show_help:
        if key in HELP_CLOSE_KEYS:
            return _close_help(session)
        return True
    if session.search_entry_active:
        handled = _search_entry_registry(session).dispatch(key)
        if handled is None:
            session.search_entry_key(key)
        return True
    action = table.action_for(key)
    if action is None:
        return True
    return session.dispatch(action)


def run_main_loop(
    session: ViewerSession,
    terminal: TerminalController,
    input_fd: int,
    table: KeyBindingTable,
    theme: UITheme = DEFAULT_THEME,
    terminal_size: Callable[[], os.terminal_size] | None = None,
) -> None:
    """Run the interactive loop until a quit action occurs."""
    if terminal_size is None:
        terminal_size = _default_terminal_size

    last_size: tuple[int, int] | None = None
    dirty = True
    with terminal.raw_mode():
        while True:
            term = terminal_size()
            size = (term.columns, term.lines)
            if size != last_size:
                logger.debug("terminal size %dx%d", *size)
                last_size = size
                session.resize(*size)
                dirty = True
            if dirty:
                terminal.write_frame(render_frame(session, size[0], size[1], theme, table))
                dirty = False

            key = read_key(input_fd, timeout_ms=KEY_POLL_MS)
            if not key:
                continue
            if not handle_key(session, table, key):
                logger.debug("quit on key %r", key)
                break
            dirty = True


def render_document(document: str, config: ViewerConfig, width: int, color: bool) -> str:
    theme = MarkdownTheme.from_colors(config.colors) if color else PLAIN_THEME
    return render_markdown(document, width, theme, config.style)


def run_pager(
    document: str,
    name: str,
    config: ViewerConfig,
    nopager: bool = False,
    width: int | None = None,
) -> None:
    """Show ``document`` interactively, or print it when not attached to a terminal."""
    stdout_fd = sys.stdout.fileno()
    if nopager or not os.isatty(stdout_fd):
        if width is None:
            width = shutil.get_terminal_size(DEFAULT_TERMINAL_SIZE).columns
        sys.stdout.write(render_document(document, config, width, color=os.isatty(stdout_fd)))
        return

    session = ViewerSession(document, config, name=name)
    table = KeyBindingTable(config.keybindings)
    stdin_fd = sys.stdin.fileno()
    if os.isatty(stdin_fd):
        run_main_loop(session, TerminalController(stdin_fd, stdout_fd), stdin_fd, table)
        return

    # stdin carried the document; keys come from the controlling terminal.
    with open("/dev/tty", "rb", buffering=0) as tty_input:
        tty_fd = tty_input.fileno()
        run_main_loop(session, TerminalController(tty_fd, stdout_fd), tty_fd, table)
