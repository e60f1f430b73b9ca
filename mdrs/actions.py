"""Logical viewer actions the host maps physical keys onto."""

from __future__ import annotations

from enum import Enum


class Action(Enum):
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    SCROLL_LEFT = "scroll_left"
    SCROLL_RIGHT = "scroll_right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    GO_TO_TOP = "go_to_top"
    GO_TO_BOTTOM = "go_to_bottom"
    START_SEARCH = "start_search"
    NEXT_MATCH = "next_match"
    PREV_MATCH = "prev_match"
    CLEAR_SEARCH = "clear_search"
    TOGGLE_CASE = "toggle_case"
    SHOW_HELP = "show_help"
    QUIT = "quit"


__all__ = ["Action"]
