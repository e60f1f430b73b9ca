"""Search package exports.

Combines the match index and the navigator state in one import surface.
"""

from __future__ import annotations

from .index import SearchMatch, find_all
from .navigator import NO_MATCH, SearchState

__all__ = [
    "NO_MATCH",
    "SearchMatch",
    "SearchState",
    "find_all",
]
