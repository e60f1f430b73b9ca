"""Persistent JSON config: color table, keybindings, and search defaults.

All access is defensive: malformed or missing config falls back safely, and
missing or empty values are filled in from the built-in defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from platformdirs import user_config_dir

from .actions import Action

logger = logging.getLogger(__name__)

APP_NAME = "mdrs"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_CONFIG_PATH = Path.home() / ".config" / APP_NAME / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
DEFAULT_STYLE = "monokai"


@dataclass(frozen=True)
class ColorTable:
    """Hex colors per markdown element, plus the two search highlight colors."""

    heading1: str = "#00d7ff"
    heading2: str = "#00afff"
    heading3: str = "#0087ff"
    heading4: str = "#005fff"
    heading5: str = "#0037ff"
    heading6: str = "#001fff"
    bold: str = "#ffffff"
    italic: str = "#87ff00"
    strikethrough: str = "#808080"
    link: str = "#00ffff"
    link_url: str = "#0087af"
    code: str = "#ffff00"
    code_block: str = "#d7ff00"
    code_block_bg: str = "#262626"
    list_marker: str = "#ff8700"
    task_checked: str = "#00ff00"
    task_unchecked: str = "#ff0000"
    blockquote: str = "#808080"
    table_header: str = "#ffff00"
    table_row: str = "#ffffff"
    table_border: str = "#808080"
    search_current: str = "#ffff00"
    search_match: str = "#ff8700"

    @classmethod
    def from_dict(cls, data: object) -> ColorTable:
        """Overlay string values from ``data`` onto the defaults."""
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("ignoring non-object colors section: %r", data)
            return cls()
        values: dict[str, str] = {}
        for item in fields(cls):
            value = data.get(item.name)
            if value is None:
                continue
            if not isinstance(value, str):
                logger.warning("ignoring non-string color %s=%r", item.name, value)
                continue
            if value.strip():
                values[item.name] = value.strip()
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Keybindings:
    """Key names per action; field names match ``Action`` values."""

    scroll_up: tuple[str, ...] = ("Up", "k", "i")
    scroll_down: tuple[str, ...] = ("Down", "j", "e")
    scroll_left: tuple[str, ...] = ("Left", "h")
    scroll_right: tuple[str, ...] = ("Right", "l", "o")
    page_up: tuple[str, ...] = ("PageUp", "u", "C-b")
    page_down: tuple[str, ...] = ("PageDown", "Space", "d", "C-f")
    go_to_top: tuple[str, ...] = ("g", "Home")
    go_to_bottom: tuple[str, ...] = ("G", "End")
    start_search: tuple[str, ...] = ("/",)
    next_match: tuple[str, ...] = ("n", "C-n")
    prev_match: tuple[str, ...] = ("N", "C-p")
    clear_search: tuple[str, ...] = ("Escape",)
    toggle_case: tuple[str, ...] = ("C-t",)
    show_help: tuple[str, ...] = ("?",)
    quit: tuple[str, ...] = ("q", "C-c")

    @classmethod
    def from_dict(cls, data: object) -> Keybindings:
        """Overlay key-name lists from ``data``; empty or invalid lists keep defaults."""
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("ignoring non-object keybindings section: %r", data)
            return cls()
        values: dict[str, tuple[str, ...]] = {}
        for item in fields(cls):
            raw = data.get(item.name)
            if raw is None:
                continue
            if isinstance(raw, str):
                raw = [raw]
            if not isinstance(raw, list):
                logger.warning("ignoring keybinding %s=%r: expected a list", item.name, raw)
                continue
            names = tuple(name for name in raw if isinstance(name, str) and name)
            if names:
                values[item.name] = names
        return cls(**values)

    def for_action(self, action: Action) -> tuple[str, ...]:
        return getattr(self, action.value)

    def to_dict(self) -> dict[str, list[str]]:
        return {item.name: list(getattr(self, item.name)) for item in fields(self)}


@dataclass(frozen=True)
class ViewerConfig:
    colors: ColorTable = field(default_factory=ColorTable)
    keybindings: Keybindings = field(default_factory=Keybindings)
    case_sensitive: bool = False
    style: str = DEFAULT_STYLE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ViewerConfig:
        search = data.get("search")
        case_sensitive = False
        if isinstance(search, dict) and isinstance(search.get("case_sensitive"), bool):
            case_sensitive = search["case_sensitive"]
        style = data.get("style")
        return cls(
            colors=ColorTable.from_dict(data.get("colors")),
            keybindings=Keybindings.from_dict(data.get("keybindings")),
            case_sensitive=case_sensitive,
            style=style.strip() if isinstance(style, str) and style.strip() else DEFAULT_STYLE,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "colors": self.colors.to_dict(),
            "keybindings": self.keybindings.to_dict(),
            "search": {"case_sensitive": self.case_sensitive},
            "style": self.style,
        }


def config_path() -> Path:
    """Return preferred config path, falling back to legacy location when needed."""
    if CONFIG_PATH.exists():
        return CONFIG_PATH
    if CONFIG_PATH == DEFAULT_CONFIG_PATH and LEGACY_CONFIG_PATH.exists():
        return LEGACY_CONFIG_PATH
    return CONFIG_PATH


def load_config_data() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    path = config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("could not read config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("config %s is not a JSON object, using defaults", path)
        return {}
    return data


def load_config() -> ViewerConfig:
    return ViewerConfig.from_dict(load_config_data())


def save_config(config: ViewerConfig) -> bool:
    """Persist ``config`` as pretty-printed JSON; return whether it was written."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)
        return False
    return True


def init_config() -> tuple[Path, bool]:
    """Write the default config unless one already exists.

    Returns the config path and whether a new file was created.
    """
    existing = config_path()
    if existing.exists():
        return existing, False
    return CONFIG_PATH, save_config(ViewerConfig())
