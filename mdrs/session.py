"""Viewer session: one document, its viewport, and its search.

The session is the single owner of mutable viewer state. The runtime loop
feeds it actions and key tokens and asks it for display text each frame.
"""

from __future__ import annotations

import logging

from .actions import Action
from .config import ViewerConfig
from .highlighting import HighlightPalette
from .markdown import MarkdownTheme, make_renderer
from .pipeline import RenderedView, Renderer, RenderPipeline
from .search import SearchState
from .viewport import Viewport

logger = logging.getLogger(__name__)

STATUS_ROWS = 1
PROMPT_ROWS = 1


class ViewerSession:
    def __init__(
        self,
        document: str,
        config: ViewerConfig | None = None,
        renderer: Renderer | None = None,
        name: str = "",
    ) -> None:
        self.config = config if config is not None else ViewerConfig()
        if renderer is None:
            renderer = make_renderer(MarkdownTheme.from_colors(self.config.colors), self.config.style)
        palette = HighlightPalette.from_colors(
            self.config.colors.search_current,
            self.config.colors.search_match,
        )
        self.pipeline = RenderPipeline(renderer, palette)
        self.document = document
        self.name = name
        self.viewport = Viewport()
        self.search = SearchState(case_sensitive=self.config.case_sensitive)
        self.search_entry_active = False
        self.search_buffer = ""
        self.show_help = False
        self.width = self.viewport.screen_width
        self.height = self.viewport.screen_height + STATUS_ROWS
        self._search_generation = -1

    # -- geometry -----------------------------------------------------------

    @property
    def content_rows(self) -> int:
        rows = self.height - STATUS_ROWS
        if self.search_entry_active:
            rows -= PROMPT_ROWS
        return max(1, rows)

    def resize(self, width: int, height: int) -> None:
        """Adopt a new terminal size; the document re-renders lazily on next draw."""
        self.width = max(1, width)
        self.height = max(1, height)
        self.viewport.resize(self.width, self.content_rows)

    def _sync_geometry(self) -> None:
        self.viewport.resize(self.width, self.content_rows)

    # -- document -----------------------------------------------------------

    def set_document(self, document: str, name: str | None = None) -> None:
        """Replace the document, dropping the search and returning to the top."""
        self.document = document
        if name is not None:
            self.name = name
        self.search.clear()
        self.viewport.x_offset = 0
        self.viewport.y_offset = 0
        self.pipeline.invalidate()

    def rendered_view(self) -> RenderedView:
        """Return the current render, re-running the search if it was re-rendered."""
        view = self.pipeline.rendered(self.document, self.viewport.screen_width)
        if self.search.term and self._search_generation != self.pipeline.generation:
            logger.debug("re-running search %r on generation %d", self.search.term, self.pipeline.generation)
            self.search.refresh(view.text)
        self._search_generation = self.pipeline.generation
        self.viewport.set_line_count(view.line_count)
        return view

    def display_text(self) -> str:
        self.rendered_view()
        return self.pipeline.display_text(
            self.document,
            self.viewport.screen_width,
            self.viewport.screen_height,
            self.search,
        )

    # -- actions ------------------------------------------------------------

    def dispatch(self, action: Action) -> bool:
        """Apply ``action``; return ``False`` when the viewer should quit."""
        self.rendered_view()
        viewport = self.viewport
        if action is Action.QUIT:
            return False
        if action is Action.SCROLL_UP:
            viewport.scroll_by(-1)
        elif action is Action.SCROLL_DOWN:
            viewport.scroll_by(1)
        elif action is Action.SCROLL_LEFT:
            viewport.scroll_by(0, -1)
        elif action is Action.SCROLL_RIGHT:
            viewport.scroll_by(0, 1)
        elif action is Action.PAGE_UP:
            viewport.page_up()
        elif action is Action.PAGE_DOWN:
            viewport.page_down()
        elif action is Action.GO_TO_TOP:
            viewport.go_to_top()
        elif action is Action.GO_TO_BOTTOM:
            viewport.go_to_bottom()
        elif action is Action.START_SEARCH:
            self.begin_search_entry()
        elif action is Action.NEXT_MATCH:
            self.advance_match(1)
        elif action is Action.PREV_MATCH:
            self.advance_match(-1)
        elif action is Action.CLEAR_SEARCH:
            self.search.clear()
        elif action is Action.TOGGLE_CASE:
            self.toggle_case()
        elif action is Action.SHOW_HELP:
            self.show_help = True
        return True

    # -- search -------------------------------------------------------------

    def begin_search_entry(self) -> None:
        self.search_entry_active = True
        self.search_buffer = ""
        self._sync_geometry()

    def search_entry_key(self, key: str) -> None:
        """Edit the prompt buffer with one reader token."""
        if key == "BACKSPACE":
            self.search_buffer = self.search_buffer[:-1]
        elif key == "CTRL_U":
            self.search_buffer = ""
        elif len(key) == 1 and key.isprintable():
            self.search_buffer += key

    def _end_search_entry(self) -> None:
        self.search_entry_active = False
        self.search_buffer = ""
        self._sync_geometry()

    def commit_search_entry(self, text: str | None = None) -> None:
        """Run the typed (or given) term; an empty term clears the search."""
        term = (self.search_buffer if text is None else text).strip()
        self._end_search_entry()
        if not term:
            self.search.clear()
            return
        view = self.rendered_view()
        self.search.set_term(term, view.text)
        self._search_generation = self.pipeline.generation
        self._center_on_current()

    def cancel_search_entry(self) -> None:
        self._end_search_entry()

    def advance_match(self, step: int) -> None:
        if not self.search.term:
            return
        if step < 0:
            self.search.prev()
        else:
            self.search.next()
        self._center_on_current()

    def toggle_case(self) -> bool:
        """Flip case sensitivity and re-run any active term."""
        case_sensitive = self.search.toggle_case_sensitive()
        if self.search.term:
            self.search.set_term(self.search.term, self.rendered_view().text)
            self._center_on_current()
        return case_sensitive

    def _center_on_current(self) -> None:
        match, found = self.search.current()
        if found and match is not None:
            self.viewport.center_on(match.line)

    def status_text(self) -> str:
        return self.search.status_text()
