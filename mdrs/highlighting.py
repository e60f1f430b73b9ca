"""Overlay search-match emphasis onto already-styled rendered text.

Matches are wrapped in their own SGR sequences while the renderer's styling
is replayed after each match, so colors outside the match survive.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import colors
from .ansi import ANSI_ESCAPE_RE, is_sgr, track_sgr
from .search import SearchMatch, SearchState

BLACK_FOREGROUND = "\033[30m"


@dataclass(frozen=True)
class HighlightPalette:
    """Escape sequences used to open current and non-current match spans."""

    current: str
    other: str
    reset: str = colors.RESET

    @classmethod
    def from_colors(cls, current_color: str, match_color: str) -> HighlightPalette:
        """Build a palette from hex colors; malformed values degrade to reset."""
        return cls(
            current=colors.background(current_color) + BLACK_FOREGROUND,
            other=colors.foreground(match_color),
        )


DEFAULT_PALETTE = HighlightPalette(current="\033[43;30m", other="\033[33m")


def _splits_escape(line: str, start: int, end: int) -> bool:
    """Return whether ``start`` or ``end`` falls strictly inside an escape sequence."""
    for match in ANSI_ESCAPE_RE.finditer(line):
        if match.start() >= end:
            break
        if match.start() < start < match.end() or match.start() < end < match.end():
            return True
    return False


def _is_stale(line: str, match: SearchMatch, cursor: int) -> bool:
    if match.length <= 0 or match.column < cursor or match.end > len(line):
        return True
    return "\x1b" in line and _splits_escape(line, match.column, match.end)


def _reassert(span: str, opener: str) -> str:
    """Re-emit ``opener`` after every SGR in ``span`` so the match stays emphasized."""
    return ANSI_ESCAPE_RE.sub(lambda m: m.group(0) + opener if is_sgr(m.group(0)) else m.group(0), span)


def _highlight_line(
    line: str,
    entries: list[tuple[int, SearchMatch]],
    current_index: int,
    palette: HighlightPalette,
) -> str:
    out: list[str] = []
    active: list[str] = []
    cursor = 0
    for match_index, match in sorted(entries, key=lambda entry: entry[1].column):
        if _is_stale(line, match, cursor):
            continue
        consumed = line[cursor : match.end]
        for escape in ANSI_ESCAPE_RE.finditer(consumed):
            track_sgr(active, escape.group(0))

        opener = palette.current if match_index == current_index else palette.other
        out.append(line[cursor : match.column])
        out.append(opener)
        out.append(_reassert(line[match.column : match.end], opener))
        out.append(palette.reset)
        out.extend(active)
        cursor = match.end
    out.append(line[cursor:])
    return "".join(out)


def apply_highlights(
    rendered: str,
    state: SearchState,
    palette: HighlightPalette = DEFAULT_PALETTE,
) -> str:
    """Return ``rendered`` with every match in ``state`` wrapped in emphasis.

    With no term or no matches the input is returned as-is. Matches whose
    recorded range no longer fits the current text are skipped.
    """
    if not state.term or not state.matches:
        return rendered

    lines = rendered.split("\n")
    by_line: dict[int, list[tuple[int, SearchMatch]]] = {}
    for match_index, match in enumerate(state.matches):
        by_line.setdefault(match.line, []).append((match_index, match))

    for line_number, entries in by_line.items():
        if not 0 <= line_number < len(lines):
            continue
        lines[line_number] = _highlight_line(
            lines[line_number],
            entries,
            state.current_index,
            palette,
        )
    return "\n".join(lines)
