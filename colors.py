"""Color parsing and the brush palette."""

import os
# pygame prints a banner to stdout on import, which would corrupt the MCP
# stdio stream.
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from cell import Color

RESET_NAMES = ("", "none", "reset", "default")

# Default 16-color palette in the order the palette cycles through it.
DEFAULT_PALETTE: list[tuple] = [
    (0, 0, 0),        # black
    (128, 0, 0),      # red
    (128, 128, 0),    # yellow
    (0, 128, 0),      # green
    (0, 0, 128),      # blue
    (128, 0, 128),    # magenta
    (0, 128, 128),    # cyan
    (192, 192, 192),  # gray
    (128, 128, 128),  # dark gray
    (255, 0, 0),      # light red
    (255, 255, 0),    # light yellow
    (0, 255, 0),      # light green
    (0, 0, 255),      # light blue
    (255, 0, 255),    # light magenta
    (0, 255, 255),    # light cyan
    (255, 255, 255),  # white
]


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def parse_color(value) -> Color:
    """Turn a user color value into an RGB tuple, or None for "reset".

    Accepts None, a reset keyword, any name or hex string pygame.Color
    understands ('red', '#FF8800', '0xff8800'), or an [r, g, b] sequence.
    Raises ValueError for anything else.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() in RESET_NAMES:
            return None
        c = pygame.Color(value.strip())
        return (c.r, c.g, c.b)
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return tuple(clamp(int(v), 0, 255) for v in value)
    raise ValueError(f"Unrecognised color: {value!r}")


def format_color(color: Color) -> str:
    if color is None:
        return "reset"
    return "#{:02x}{:02x}{:02x}".format(*color)


class Palette:
    """Fixed-size list of colors with separate fg/bg cursors."""

    def __init__(self, colors: list[tuple] | None = None):
        self.colors = list(colors or DEFAULT_PALETTE)
        self.fg = 0
        self.bg = len(self.colors) - 1

    def _next(self, index: int) -> int:
        return (index + 1) % len(self.colors)

    def _prev(self, index: int) -> int:
        return (index - 1) % len(self.colors)

    def fg_next(self) -> Color:
        self.fg = self._next(self.fg)
        return self.colors[self.fg]

    def fg_prev(self) -> Color:
        self.fg = self._prev(self.fg)
        return self.colors[self.fg]

    def bg_next(self) -> Color:
        self.bg = self._next(self.bg)
        return self.colors[self.bg]

    def bg_prev(self) -> Color:
        self.bg = self._prev(self.bg)
        return self.colors[self.bg]

    def replace(self, index: int, color: Color):
        if 0 <= index < len(self.colors):
            self.colors[index] = color
