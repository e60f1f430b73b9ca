"""24-bit color to xterm 256-color quantization.

Grays land on the 24-step grayscale ramp (with pure black/white taken from
the color cube corners); everything else is quantized into the 6x6x6 cube.
Safe helpers never raise so a bad color value cannot break rendering.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

RESET = "\033[0m"

CUBE_BASE = 16
CUBE_STEPS = 6
GRAY_RAMP_BASE = 232
GRAY_RAMP_STEPS = 24
GRAY_LOW_THRESHOLD = 8
GRAY_HIGH_THRESHOLD = 248
BLACK_INDEX = 16
WHITE_INDEX = 231

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)
_BASIC_PALETTE = (
    (0, 0, 0),
    (128, 0, 0),
    (0, 128, 0),
    (128, 128, 0),
    (0, 0, 128),
    (128, 0, 128),
    (0, 128, 128),
    (192, 192, 192),
    (128, 128, 128),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (0, 0, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
)

RGB = tuple[int, int, int]


class ColorFormatError(ValueError):
    """Raised when a color value is not ``#rrggbb`` or an in-range RGB triple."""


def parse_hex_color(value: str) -> RGB:
    """Parse ``#rrggbb`` (leading ``#`` optional) into an RGB triple."""
    if not isinstance(value, str):
        raise ColorFormatError(f"invalid hex color: {value!r}")
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if len(digits) != 6:
        raise ColorFormatError(f"invalid hex color: {value!r}")
    try:
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
    except ValueError as exc:
        raise ColorFormatError(f"invalid hex color: {value!r}") from exc


def _coerce_rgb(color: str | RGB) -> RGB:
    if isinstance(color, str):
        return parse_hex_color(color)
    try:
        r, g, b = color
    except (TypeError, ValueError) as exc:
        raise ColorFormatError(f"invalid RGB color: {color!r}") from exc
    for channel in (r, g, b):
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise ColorFormatError(f"invalid RGB color: {color!r}")
    return r, g, b


def to_terminal_color(color: str | RGB) -> int:
    """Map a hex string or RGB triple to the nearest-by-rule 256-color index."""
    r, g, b = _coerce_rgb(color)
    if r == g == b:
        if r < GRAY_LOW_THRESHOLD:
            return BLACK_INDEX
        if r > GRAY_HIGH_THRESHOLD:
            return WHITE_INDEX
        step = min(GRAY_RAMP_STEPS - 1, (r - GRAY_LOW_THRESHOLD) // 10)
        return GRAY_RAMP_BASE + step

    last = CUBE_STEPS - 1
    r, g, b = (r * last) // 255, (g * last) // 255, (b * last) // 255
    return CUBE_BASE + 36 * r + 6 * g + b


def escape(index: int, background: bool = False) -> str:
    """Return the SGR sequence selecting palette entry ``index``."""
    layer = 48 if background else 38
    return f"\033[{layer};5;{index}m"


def palette_rgb(index: int) -> RGB:
    """Return the nominal RGB value of xterm palette entry ``index``."""
    if not 0 <= index <= 255:
        raise ColorFormatError(f"palette index out of range: {index}")
    if index < CUBE_BASE:
        return _BASIC_PALETTE[index]
    if index >= GRAY_RAMP_BASE:
        level = 8 + 10 * (index - GRAY_RAMP_BASE)
        return level, level, level
    offset = index - CUBE_BASE
    return (
        _CUBE_LEVELS[offset // 36],
        _CUBE_LEVELS[(offset // 6) % 6],
        _CUBE_LEVELS[offset % 6],
    )


def _safe_escape(color: str, background: bool) -> str:
    if not color:
        return ""
    try:
        return escape(to_terminal_color(color), background=background)
    except ColorFormatError:
        logger.debug("falling back to reset for malformed color %r", color)
        return RESET


def foreground(color: str) -> str:
    """Foreground escape for ``color``; reset on malformed input, ``""`` if empty."""
    return _safe_escape(color, background=False)


def background(color: str) -> str:
    """Background escape for ``color``; reset on malformed input, ``""`` if empty."""
    return _safe_escape(color, background=True)


__all__ = [
    "ColorFormatError",
    "RESET",
    "background",
    "escape",
    "foreground",
    "palette_rgb",
    "parse_hex_color",
    "to_terminal_color",
]
