"""Frame composition for the pager view.

Builds complete ANSI frames (document rows, search prompt, status bar) as
strings; the runtime owns writing them to the terminal.
"""

from __future__ import annotations

from ..ansi import slice_ansi_line
from ..keys import KeyBindingTable
from ..session import ViewerSession
from ..ui_theme import DEFAULT_THEME, UITheme
from .help import HELP_CLOSE_KEYS, help_lines, render_help_page

SEARCH_PROMPT = "/"


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def position_text(session: ViewerSession) -> str:
    """Return ``name (start-end/total pct%)`` for the current scroll position."""
    first, last = session.viewport.visible_range()
    total = session.viewport.line_count
    percent = 100.0 if total == 0 else last / total * 100.0
    start = first + 1 if total else 0
    name = session.name or "stdin"
    return f"{name} ({start}-{last}/{total} {percent:5.1f}%)"


def _reverse(text: str, theme: UITheme) -> str:
    return f"{theme.reverse}{text}{theme.reset}"


def build_prompt_line(buffer: str, width: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Return the search prompt row: ``/``, the typed text, and a block cursor."""
    room = max(0, width - 2 - len(SEARCH_PROMPT))
    shown = buffer[max(0, len(buffer) - room) :] if room else ""
    cursor = _reverse(" ", theme) if theme.reverse else "_"
    return f"{theme.prompt}{SEARCH_PROMPT}{theme.reset}{shown}{cursor}"


def render_frame(
    session: ViewerSession,
    width: int,
    height: int,
    theme: UITheme = DEFAULT_THEME,
    bindings: KeyBindingTable | None = None,
) -> str:
    """Compose one full frame for ``session`` at the given terminal size."""
    if session.show_help:
        table = bindings if bindings is not None else KeyBindingTable(session.config.keybindings)
        return render_help_page(table, width, height, theme)

    if (width, height) != (session.width, session.height):
        session.resize(width, height)
    text = session.display_text()
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    viewport = session.viewport
    out: list[str] = ["\033[H\033[J"]
    for row in range(session.content_rows):
        idx = viewport.y_offset + row
        if idx < len(lines):
            line = slice_ansi_line(lines[idx], viewport.x_offset, width)
            out.append(line)
            if "\033" in line:
                out.append("\033[0m")
        out.append("\r\n")

    status = session.status_text() or position_text(session)
    out.append(_reverse(build_status_line(status, width), theme))
    if session.search_entry_active:
        out.append("\r\n")
        out.append(build_prompt_line(session.search_buffer, width, theme))
    return "".join(out)


__all__ = [
    "HELP_CLOSE_KEYS",
    "build_prompt_line",
    "build_status_line",
    "help_lines",
    "position_text",
    "render_frame",
    "render_help_page",
]
