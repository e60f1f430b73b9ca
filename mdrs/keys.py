"""Key-name parsing and key-to-action dispatch tables.

Config files name keys the human way (``C-f``, ``PgDn``, ``Space``); the
terminal reader produces normalized tokens (``CTRL_F``, ``PAGE_DOWN``, `` ``).
This module bridges the two.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .actions import Action
from .config import Keybindings

logger = logging.getLogger(__name__)

_NAMED_KEYS: dict[str, str] = {
    "Up": "UP",
    "ArrowUp": "UP",
    "Down": "DOWN",
    "ArrowDown": "DOWN",
    "Left": "LEFT",
    "ArrowLeft": "LEFT",
    "Right": "RIGHT",
    "ArrowRight": "RIGHT",
    "PageUp": "PAGE_UP",
    "PgUp": "PAGE_UP",
    "PageDown": "PAGE_DOWN",
    "PgDn": "PAGE_DOWN",
    "PageDn": "PAGE_DOWN",
    "Space": " ",
    "Enter": "ENTER",
    "Return": "ENTER",
    "Escape": "ESC",
    "Esc": "ESC",
    "Tab": "TAB",
    "Backspace": "BACKSPACE",
    "Delete": "DELETE",
    "Del": "DELETE",
    "Home": "HOME",
    "End": "END",
}

_CTRL_PREFIXES = ("C-", "Ctrl-")


def parse_key(name: str) -> str | None:
    """Translate a config key name into a reader token, or ``None`` if unknown."""
    for prefix in _CTRL_PREFIXES:
        if name.startswith(prefix):
            letter = name[len(prefix) :]
            if len(letter) == 1 and letter.isascii() and letter.isalpha():
                return f"CTRL_{letter.upper()}"
            return None
    token = _NAMED_KEYS.get(name)
    if token is not None:
        return token
    if len(name) == 1:
        return name
    return None


def describe_keys(names: Iterable[str]) -> str:
    return ", ".join(names)


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small key-dispatch table used for fixed, non-configurable key sets."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def dispatch(self, key: str) -> bool | None:
        """Invoke the handler bound to ``key``; ``None`` means unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


class KeyBindingTable:
    """Resolved token -> ``Action`` map built from configured key names.

    When two actions claim the same key the one listed first in ``Action``
    wins and the conflict is logged.
    """

    def __init__(self, keybindings: Keybindings) -> None:
        self.keybindings = keybindings
        self._actions: dict[str, Action] = {}
        for action in Action:
            for name in keybindings.for_action(action):
                token = parse_key(name)
                if token is None:
                    logger.warning("ignoring unknown key name %r for %s", name, action.value)
                    continue
                if token in self._actions:
                    logger.warning(
                        "key %r for %s already bound to %s",
                        name,
                        action.value,
                        self._actions[token].value,
                    )
                    continue
                self._actions[token] = action

    @classmethod
    def from_keybindings(cls, keybindings: Keybindings) -> KeyBindingTable:
        return cls(keybindings)

    def action_for(self, key: str) -> Action | None:
        return self._actions.get(key)

    def keys_for(self, action: Action) -> tuple[str, ...]:
        return self.keybindings.for_action(action)
