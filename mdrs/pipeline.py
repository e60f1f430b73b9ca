"""Width-keyed render cache feeding the highlight compositor.

The document is only re-rendered when the screen width or the document
itself changes; search highlighting is re-applied from the clean cached
render on every display pass.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .highlighting import DEFAULT_PALETTE, HighlightPalette, apply_highlights
from .search import SearchState

Renderer = Callable[[str, int], str]


@dataclass(frozen=True)
class RenderedView:
    text: str
    line_count: int
    width: int
    document: str


class RenderPipeline:
    """Own the cached ``RenderedView`` and produce per-frame display text."""

    def __init__(self, renderer: Renderer, palette: HighlightPalette = DEFAULT_PALETTE) -> None:
        self.renderer = renderer
        self.palette = palette
        self.generation = 0
        self._view: RenderedView | None = None

    @property
    def view(self) -> RenderedView | None:
        return self._view

    def invalidate(self) -> None:
        self._view = None

    def _is_current(self, document: str, width: int) -> bool:
        view = self._view
        return view is not None and view.width == width and view.document is document

    def rendered(self, document: str, width: int) -> RenderedView:
        """Return the cached view, re-rendering when width or document changed."""
        if self._is_current(document, width):
            assert self._view is not None
            return self._view
        text = self.renderer(document, width)
        self._view = RenderedView(
            text=text,
            line_count=text.count("\n"),
            width=width,
            document=document,
        )
        self.generation += 1
        return self._view

    def display_text(
        self,
        document: str,
        width: int,
        height: int,
        search_state: SearchState,
    ) -> str:
        """Return the frame's full display text, highlighted when a search is active.

        ``height`` does not affect rendering; it is accepted so the host can
        hand over the whole screen geometry in one call.
        """
        view = self.rendered(document, width)
        if not search_state.term:
            return view.text
        return apply_highlights(view.text, search_state, self.palette)
