"""Locate every occurrence of a search term in rendered text.

Matches are reported per rendered line as ``(line, column, length)`` offsets
into the original, unfolded line so highlighting can slice it directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import ANSI_ESCAPE_RE


@dataclass(frozen=True, order=True)
class SearchMatch:
    line: int  # 0-based rendered line
    column: int  # offset into the raw line
    length: int

    @property
    def end(self) -> int:
        return self.column + self.length


def _visible_spans(line: str) -> tuple[str, list[int], list[int]]:
    """Return escape-free text plus raw start/end offsets for each kept char."""
    chars: list[str] = []
    starts: list[int] = []
    ends: list[int] = []
    idx = 0
    n = len(line)
    while idx < n:
        if line[idx] == "\x1b":
            match = ANSI_ESCAPE_RE.match(line, idx)
            if match:
                idx = match.end()
                continue
        chars.append(line[idx])
        starts.append(idx)
        idx += 1
        ends.append(idx)
    return "".join(chars), starts, ends


def _fold(text: str) -> tuple[str, list[int] | None]:
    """Case-fold ``text``; also return a folded->source index map if lengths drift."""
    folded = text.casefold()
    if len(folded) == len(text):
        return folded, None
    pieces: list[str] = []
    index_map: list[int] = []
    for source_idx, ch in enumerate(text):
        piece = ch.casefold()
        pieces.append(piece)
        index_map.extend([source_idx] * len(piece))
    return "".join(pieces), index_map


def _line_matches(
    line: str,
    line_number: int,
    term: str,
    case_sensitive: bool,
    skip_escapes: bool,
) -> list[SearchMatch]:
    starts: list[int] | None = None
    ends: list[int] | None = None
    haystack = line
    if skip_escapes and "\x1b" in line:
        haystack, starts, ends = _visible_spans(line)

    index_map: list[int] | None = None
    needle = term
    if not case_sensitive:
        haystack, index_map = _fold(haystack)
        needle = term.casefold()

    found: list[SearchMatch] = []
    step = len(needle)
    cursor = 0
    previous_end = 0
    while True:
        pos = haystack.find(needle, cursor)
        if pos < 0:
            break
        cursor = pos + step

        first, last = pos, pos + step - 1
        if index_map is not None:
            first, last = index_map[first], index_map[last]
            # Resume after the whole source character, not inside its fold.
            while cursor < len(index_map) and index_map[cursor] == last:
                cursor += 1
        if starts is not None and ends is not None:
            column, end = starts[first], ends[last]
        else:
            column, end = first, last + 1
        if column < previous_end:
            continue
        found.append(SearchMatch(line=line_number, column=column, length=end - column))
        previous_end = end
    return found


def find_all(
    text: str,
    term: str,
    case_sensitive: bool = False,
    skip_escapes: bool = False,
) -> list[SearchMatch]:
    """Return non-overlapping matches of ``term`` ordered by line then column.

    An empty ``term`` matches nothing. With ``skip_escapes`` the search runs
    over the visible characters only, so ANSI sequences never produce or
    split a match; offsets still index into the raw line.
    """
    if not term:
        return []

    matches: list[SearchMatch] = []
    for line_number, line in enumerate(text.split("\n")):
        if not line:
            continue
        matches.extend(_line_matches(line, line_number, term, case_sensitive, skip_escapes))
    return matches
