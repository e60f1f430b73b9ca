"""UI chrome palettes (status bar, prompt, help modal).

Markdown element colors live in the config color table; these cover only
the viewer's own frame.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by frame renderers."""

    name: str
    reverse: str
    reset: str
    prompt: str
    help_heading: str
    help_key: str
    help_dim: str
    help_modal_title: str
    help_modal_border: str
    help_backdrop: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    prompt="\033[1;38;5;81m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    help_modal_title="\033[1;38;5;45m",
    help_modal_border="\033[38;5;45m",
    help_backdrop="\033[2m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="",
    reset="",
    prompt="",
    help_heading="",
    help_key="",
    help_dim="",
    help_modal_title="",
    help_modal_border="",
    help_backdrop="",
)


__all__ = ["UITheme", "DEFAULT_THEME", "PLAIN_THEME"]
