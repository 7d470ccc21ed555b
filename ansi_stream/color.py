"""Color helpers for consumers of parser output (HTML rendering etc)."""

from __future__ import annotations

from typing import Sequence, Tuple

from ansi_stream.tokens import Color, Color16, Color256, ColorRGB

RGB = Tuple[int, int, int]


class Color16Code:
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7
    BRIGHT_BLACK = 8
    BRIGHT_RED = 9
    BRIGHT_GREEN = 10
    BRIGHT_YELLOW = 11
    BRIGHT_BLUE = 12
    BRIGHT_MAGENTA = 13
    BRIGHT_CYAN = 14
    BRIGHT_WHITE = 15


COLOR_16_NAMES = (
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    "bright-black", "bright-red", "bright-green", "bright-yellow",
    "bright-blue", "bright-magenta", "bright-cyan", "bright-white",
)

PALETTE_16: Tuple[RGB, ...] = (
    (0, 0, 0),
    (170, 0, 0),
    (0, 170, 0),
    (170, 85, 0),
    (0, 0, 170),
    (170, 0, 170),
    (0, 170, 170),
    (170, 170, 170),
    (85, 85, 85),
    (255, 85, 85),
    (85, 255, 85),
    (255, 255, 85),
    (85, 85, 255),
    (255, 85, 255),
    (85, 255, 255),
    (255, 255, 255),
)


def color16_name(color: Color16) -> str:
    return COLOR_16_NAMES[color.code]


def _cube_level(x: int) -> int:
    return 0 if x == 0 else 55 + x * 40


def _color_256(n: int, palette: Sequence[RGB] = PALETTE_16) -> RGB:
    """Convert a 256-color index to RGB."""
    if n < 16:
        return palette[n]
    if n < 232:
        n -= 16
        return _cube_level(n // 36), _cube_level((n % 36) // 6), _cube_level(n % 6)
    v = 8 + (n - 232) * 10
    return v, v, v


def color_to_rgb(color: Color) -> RGB:
    if isinstance(color, Color16):
        return PALETTE_16[color.code]
    if isinstance(color, Color256):
        return _color_256(color.code)
    if isinstance(color, ColorRGB):
        return color.rgb
    raise AssertionError(f"Unhandled color: {color!r}")


def color_to_hex(color: Color, palette: Sequence[RGB] = PALETTE_16) -> str:
    """Convert a validated color to a CSS hex code like ``#ff00aa``.

    *palette* only affects 16-colors; 256-colors 0-15 always use the
    default palette.
    """
    if isinstance(color, Color16):
        r, g, b = palette[color.code]
    else:
        r, g, b = color_to_rgb(color)
    return f"#{r:02x}{g:02x}{b:02x}"
