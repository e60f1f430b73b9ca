"""Scroll offsets for the document viewport.

Vertical movement is clamped against the rendered line count and screen
height; horizontal movement only has a floor so wide tables stay reachable.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Viewport:
    x_offset: int = 0
    y_offset: int = 0
    screen_width: int = 80
    screen_height: int = 24
    line_count: int = 0

    @property
    def max_y_offset(self) -> int:
        return max(0, self.line_count - self.screen_height + 1)

    def _clamp_y(self) -> None:
        self.y_offset = max(0, min(self.y_offset, self.max_y_offset))

    def _half_page(self) -> int:
        return max(0, self.screen_height) // 2

    def scroll_by(self, dy: int, dx: int = 0) -> None:
        self.y_offset += dy
        self._clamp_y()
        self.x_offset = max(0, self.x_offset + dx)

    def page_up(self) -> None:
        """Move up half a screen so some context stays visible."""
        self.scroll_by(-self._half_page())

    def page_down(self) -> None:
        """Move down half a screen so some context stays visible."""
        self.scroll_by(self._half_page())

    def go_to_top(self) -> None:
        self.y_offset = 0

    def go_to_bottom(self) -> None:
        self.y_offset = self.max_y_offset

    def center_on(self, line: int) -> None:
        """Scroll so ``line`` sits mid-screen, as far as the clamp allows."""
        self.y_offset = line - self.screen_height // 2
        self._clamp_y()

    def resize(self, width: int, height: int) -> None:
        self.screen_width = max(1, width)
        self.screen_height = max(1, height)
        self._clamp_y()

    def set_line_count(self, line_count: int) -> None:
        self.line_count = max(0, line_count)
        self._clamp_y()

    def visible_range(self) -> tuple[int, int]:
        """Return ``(first, last_exclusive)`` rendered lines currently on screen."""
        first = self.y_offset
        return first, min(self.line_count, first + self.screen_height)
