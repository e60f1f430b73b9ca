"""Help modal content and rendering.

Lists the configured keys for every action, grouped by section, inside a
centered framed box. Rendering is side-effect free and returns the frame.
"""

from __future__ import annotations

from ..actions import Action
from ..ansi import clip_ansi_line, visible_width
from ..keys import KeyBindingTable, describe_keys
from ..ui_theme import DEFAULT_THEME, UITheme

HELP_TITLE = "mdrs help"
HELP_CLOSE_KEYS = frozenset({"ESC", "ENTER", " ", "q", "?"})

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[Action, str], ...]], ...] = (
    (
        "Navigation",
        (
            (Action.SCROLL_UP, "scroll up one line"),
            (Action.SCROLL_DOWN, "scroll down one line"),
            (Action.SCROLL_LEFT, "scroll left"),
            (Action.SCROLL_RIGHT, "scroll right"),
            (Action.PAGE_UP, "half page up"),
            (Action.PAGE_DOWN, "half page down"),
            (Action.GO_TO_TOP, "go to top"),
            (Action.GO_TO_BOTTOM, "go to bottom"),
        ),
    ),
    (
        "Search",
        (
            (Action.START_SEARCH, "search"),
            (Action.NEXT_MATCH, "next match"),
            (Action.PREV_MATCH, "previous match"),
            (Action.CLEAR_SEARCH, "clear search"),
            (Action.TOGGLE_CASE, "toggle case sensitivity"),
        ),
    ),
    (
        "General",
        (
            (Action.SHOW_HELP, "show this help"),
            (Action.QUIT, "quit"),
        ),
    ),
)

HELP_NOTES: tuple[str, ...] = (
    "Enter runs a search, Esc cancels it; Ctrl-U clears the prompt.",
    "Search wraps around at both ends of the document.",
    "Keys are configurable in the config file (mdrs --config-path).",
)


def help_lines(table: KeyBindingTable, theme: UITheme = DEFAULT_THEME) -> list[str]:
    """Return the styled body lines of the help modal."""
    key_column = max(
        len(describe_keys(table.keys_for(action)))
        for _, entries in HELP_SECTIONS
        for action, _ in entries
    )
    lines: list[str] = []
    for heading, entries in HELP_SECTIONS:
        lines.append(f"{theme.help_heading}{heading}{theme.reset}")
        for action, description in entries:
            keys = describe_keys(table.keys_for(action))
            lines.append(f"  {theme.help_key}{keys.ljust(key_column)}{theme.reset}  {description}")
        lines.append("")
    lines.append(f"{theme.help_heading}Notes{theme.reset}")
    lines.extend(f"  {note}" for note in HELP_NOTES)
    lines.append("")
    lines.append(f"{theme.help_dim}Press ? / Esc / Enter / q to close{theme.reset}")
    return lines


def render_help_page(
    table: KeyBindingTable,
    width: int,
    height: int,
    theme: UITheme = DEFAULT_THEME,
) -> str:
    """Compose the full-screen help modal frame."""
    out: list[str] = ["\033[H\033[J"]
    lines = help_lines(table, theme)

    widest = max(visible_width(line) for line in lines)
    modal_w = max(3, min(width, widest + 6))
    modal_h = max(3, min(height, len(lines) + 3))
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(1, modal_w - 2)
    inner_h = max(1, modal_h - 2)

    for row in range(height):
        out.append(f"\033[{row + 1};1H{theme.help_backdrop}")
        out.append(" " * max(1, width - 1))
        out.append(theme.reset)

    border = theme.help_modal_border
    out.append(f"\033[{y + 1};{x + 1}H{border}╭{'─' * inner_w}╮{theme.reset}")
    for i in range(inner_h):
        out.append(f"\033[{y + 2 + i};{x + 1}H{border}│{theme.reset}")
        out.append(" " * inner_w)
        out.append(f"{border}│{theme.reset}")
    out.append(f"\033[{y + modal_h};{x + 1}H{border}╰{'─' * inner_w}╯{theme.reset}")

    title_x = x + max(1, (modal_w - len(HELP_TITLE)) // 2)
    out.append(f"\033[{y + 1};{title_x + 1}H{theme.help_modal_title}{HELP_TITLE}{theme.reset}")

    body_rows = min(len(lines), inner_h - 1)
    for i in range(body_rows):
        out.append(f"\033[{y + 3 + i};{x + 3}H")
        out.append(clip_ansi_line(lines[i], max(0, inner_w - 2)))
        out.append(theme.reset)

    return "".join(out)
