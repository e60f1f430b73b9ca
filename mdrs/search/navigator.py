"""Search state with a cyclic cursor over the current match list."""

from __future__ import annotations

from dataclasses import dataclass, field

from .index import SearchMatch, find_all

NO_MATCH = -1


@dataclass
class SearchState:
    """Term, match list, and current-match cursor for in-document search.

    ``current_index`` is ``-1`` whenever there is nothing to point at and is
    otherwise always a valid index into ``matches``.

    ``skip_escapes`` searches only the visible characters of styled text. A
    match that crosses a style change then covers the escape bytes too, so
    its ``length`` is the raw span and can exceed ``len(term)``.
    """

    term: str = ""
    case_sensitive: bool = False
    matches: list[SearchMatch] = field(default_factory=list)
    current_index: int = NO_MATCH
    skip_escapes: bool = True

    @property
    def is_active(self) -> bool:
        return bool(self.term)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def set_term(self, term: str, text: str) -> None:
        """Search ``text`` for ``term`` and point at the first match, if any."""
        self.term = term
        self.matches = find_all(
            text,
            term,
            case_sensitive=self.case_sensitive,
            skip_escapes=self.skip_escapes,
        )
        self.current_index = 0 if self.matches else NO_MATCH

    def refresh(self, text: str) -> None:
        """Re-run the active term against new text, keeping the cursor position."""
        if not self.term:
            return
        previous = self.current_index
        self.set_term(self.term, text)
        if self.matches and previous > 0:
            self.current_index = min(previous, len(self.matches) - 1)

    def next(self) -> tuple[SearchMatch | None, bool]:
        if not self.matches:
            return None, False
        self.current_index = (self.current_index + 1) % len(self.matches)
        return self.matches[self.current_index], True

    def prev(self) -> tuple[SearchMatch | None, bool]:
        if not self.matches:
            return None, False
        self.current_index = (self.current_index - 1) % len(self.matches)
        return self.matches[self.current_index], True

    def current(self) -> tuple[SearchMatch | None, bool]:
        if not 0 <= self.current_index < len(self.matches):
            return None, False
        return self.matches[self.current_index], True

    def clear(self) -> None:
        self.term = ""
        self.matches = []
        self.current_index = NO_MATCH

    def toggle_case_sensitive(self) -> bool:
        self.case_sensitive = not self.case_sensitive
        return self.case_sensitive

    def status_text(self) -> str:
        """Return the status-bar summary, or ``""`` when no search is active."""
        if not self.term:
            return ""
        if not self.matches:
            return f"No matches for: {self.term}"
        return f"Match {self.current_index + 1} of {len(self.matches)}: {self.term}"
