"""Tests for viewport scrolling and clamping."""

from __future__ import annotations

import unittest

from mdrs.viewport import Viewport


def _viewport(lines: int = 100, height: int = 20) -> Viewport:
    return Viewport(screen_width=80, screen_height=height, line_count=lines)


class ViewportTests(unittest.TestCase):
    def test_max_y_offset(self) -> None:
        self.assertEqual(_viewport(100, 20).max_y_offset, 81)
        self.assertEqual(_viewport(5, 20).max_y_offset, 0)

    def test_scroll_is_clamped(self) -> None:
        viewport = _viewport()
        viewport.scroll_by(-5)
        self.assertEqual(viewport.y_offset, 0)
        viewport.scroll_by(500)
        self.assertEqual(viewport.y_offset, 81)

    def test_horizontal_scroll_has_floor_only(self) -> None:
        viewport = _viewport()
        viewport.scroll_by(0, -3)
        self.assertEqual(viewport.x_offset, 0)
        viewport.scroll_by(0, 1000)
        self.assertEqual(viewport.x_offset, 1000)

    def test_pages_move_half_a_screen(self) -> None:
        viewport = _viewport()
        viewport.page_down()
        self.assertEqual(viewport.y_offset, 10)
        viewport.page_down()
        viewport.page_up()
        self.assertEqual(viewport.y_offset, 10)

    def test_top_and_bottom(self) -> None:
        viewport = _viewport()
        viewport.go_to_bottom()
        self.assertEqual(viewport.y_offset, 81)
        viewport.go_to_top()
        self.assertEqual(viewport.y_offset, 0)

    def test_center_on(self) -> None:
        viewport = _viewport()
        viewport.center_on(50)
        self.assertEqual(viewport.y_offset, 40)
        viewport.center_on(3)
        self.assertEqual(viewport.y_offset, 0)
        viewport.center_on(99)
        self.assertEqual(viewport.y_offset, 81)

    def test_resize_and_line_count_reclamp(self) -> None:
        viewport = _viewport()
        viewport.go_to_bottom()
        viewport.resize(80, 50)
        self.assertEqual(viewport.y_offset, 51)
        viewport.set_line_count(10)
        self.assertEqual(viewport.y_offset, 0)

    def test_resize_floors_dimensions(self) -> None:
        viewport = _viewport()
        viewport.resize(0, -4)
        self.assertEqual((viewport.screen_width, viewport.screen_height), (1, 1))

    def test_visible_range(self) -> None:
        viewport = _viewport(25, 20)
        viewport.go_to_bottom()
        self.assertEqual(viewport.visible_range(), (6, 25))


if __name__ == "__main__":
    unittest.main()
