"""ANSI-aware text measurement and line shaping utilities.

Provides clipping, slicing, and wrapping that preserve escape sequences.
These helpers keep rendering aligned when color codes and wide chars are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
SGR_RESET = "\033[0m"
TAB_STOP = 8

_WRAP_TOKEN_RE = re.compile(
    r"(?P<escape>\x1b\[[0-9;?]*[ -/]*[@-~])"
    r"|(?P<newline>\n)"
    r"|(?P<space>[^\S\n]+)"
    r"|(?P<word>[^\s\x1b]+|\x1b)"
)


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def visible_width(text: str) -> int:
    """Return display columns used by ``text`` once escapes are removed."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def is_sgr(seq: str) -> bool:
    return seq.startswith("\x1b[") and seq.endswith("m")


def track_sgr(active: list[str], seq: str) -> None:
    """Fold one escape sequence into the list of SGR codes still in effect.

    A reset (``ESC[0m`` or ``ESC[m``) empties the list; other SGR codes stack.
    Non-SGR sequences leave the list untouched.
    """
    if not is_sgr(seq):
        return
    params = seq[2:-1]
    if params in {"", "0"}:
        active.clear()
        return
    active.append(seq)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def slice_ansi_line(text: str, start_cols: int, max_cols: int) -> str:
    """Return a horizontal viewport of a styled line.

    The slice starts at ``start_cols`` display columns and includes up to
    ``max_cols`` columns. Styles opened left of the viewport are replayed in
    front of the first visible cell so scrolled text keeps its colors.
    """
    if max_cols <= 0 or not text:
        return ""
    start_cols = max(0, start_cols)

    out: list[str] = []
    active: list[str] = []
    col = 0
    shown = 0
    i = 0
    n = len(text)
    replayed = False
    while i < n and shown < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if col >= start_cols and replayed:
                    out.append(seq)
                else:
                    track_sgr(active, seq)
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w <= start_cols:
            col += w
            i += 1
            continue
        if not replayed:
            out.extend(active)
            replayed = True
        if ch == "\t":
            spaces = min(w, max_cols - shown)
            out.append(" " * spaces)
            shown += spaces
            col += w
            i += 1
            continue
        if shown + w > max_cols:
            break
        out.append(ch)
        shown += w
        col += w
        i += 1

    return "".join(out)


def wrap_ansi_words(text: str, width: int) -> list[str]:
    """Word-wrap a styled paragraph into lines of at most ``width`` columns.

    Whitespace runs collapse to one space, ``\\n`` forces a break, and words
    longer than ``width`` are split by character. Styles open at a break are
    closed on the finished line and reopened on the next one.
    """
    if width <= 0:
        return [text]

    lines: list[str] = []
    out: list[str] = []
    active: list[str] = []
    col = 0
    pending_space = False

    def finish_line() -> None:
        nonlocal out, col
        line = "".join(out)
        if active:
            line += SGR_RESET
        lines.append(line)
        out = list(active)
        col = 0

    for token in _WRAP_TOKEN_RE.finditer(text):
        kind = token.lastgroup
        value = token.group(0)
        if kind == "escape":
            out.append(value)
            track_sgr(active, value)
            continue
        if kind == "newline":
            finish_line()
            pending_space = False
            continue
        if kind == "space":
            pending_space = col > 0
            continue

        word_width = visible_width(value)
        gap = 1 if pending_space else 0
        if col > 0 and col + gap + word_width > width:
            finish_line()
            gap = 0
        pending_space = False
        if gap:
            out.append(" ")
            col += 1
        if col + word_width <= width:
            out.append(value)
            col += word_width
            continue
        for ch in value:
            w = char_display_width(ch, col)
            if col > 0 and col + w > width:
                finish_line()
            out.append(ch)
            col += w

    lines.append("".join(out))
    return lines


def pad_ansi_line(text: str, width: int) -> str:
    """Right-pad a styled line with spaces up to ``width`` display columns."""
    missing = width - visible_width(text)
    if missing <= 0:
        return text
    return text + " " * missing
