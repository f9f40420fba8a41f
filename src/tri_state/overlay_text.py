"""Bitmap font metrics and primitive drawing for previewing paint plans."""

from __future__ import annotations

from typing import Iterable

try:  # pragma: no cover - optional dependency
    import numpy as _np
except ImportError:  # pragma: no cover - optional dependency
    _np = None


FONT_BASE_WIDTH = 7
FONT_BASE_HEIGHT = 9
LINE_GAP = 1

# Rows of a 7x9 glyph, most significant of the seven bits on the left.
GLYPHS_7x9: dict[str, tuple[int, ...]] = {
    "0": (0x1C, 0x22, 0x41, 0x49, 0x49, 0x49, 0x41, 0x22, 0x1C),
    "1": (0x08, 0x18, 0x28, 0x08, 0x08, 0x08, 0x08, 0x3E, 0x00),
    "2": (0x1C, 0x22, 0x02, 0x04, 0x08, 0x10, 0x20, 0x3E, 0x00),
    "3": (0x1C, 0x22, 0x02, 0x0C, 0x02, 0x02, 0x22, 0x1C, 0x00),
    "4": (0x06, 0x0A, 0x12, 0x22, 0x3E, 0x02, 0x02, 0x02, 0x00),
    "5": (0x3E, 0x20, 0x20, 0x3C, 0x02, 0x02, 0x22, 0x1C, 0x00),
    "6": (0x1C, 0x20, 0x40, 0x7C, 0x42, 0x42, 0x22, 0x1C, 0x00),
    "7": (0x3E, 0x02, 0x04, 0x04, 0x08, 0x08, 0x10, 0x10, 0x00),
    "8": (0x1C, 0x22, 0x22, 0x1C, 0x22, 0x22, 0x22, 0x1C, 0x00),
    "9": (0x1C, 0x22, 0x22, 0x1E, 0x02, 0x02, 0x22, 0x1C, 0x00),
    ".": (0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x0C, 0x0C, 0x00),
    "-": (0x00, 0x00, 0x00, 0x1C, 0x00, 0x00, 0x00, 0x00, 0x00),
    "%": (0x42, 0x44, 0x08, 0x10, 0x20, 0x40, 0x04, 0x04, 0x00),
    "/": (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x00, 0x00),
    "A": (0x1C, 0x22, 0x41, 0x41, 0x7F, 0x41, 0x41, 0x41, 0x00),
    "B": (0x7C, 0x42, 0x42, 0x7C, 0x42, 0x42, 0x42, 0x7C, 0x00),
    "C": (0x1E, 0x21, 0x40, 0x40, 0x40, 0x40, 0x21, 0x1E, 0x00),
    "D": (0x7C, 0x42, 0x41, 0x41, 0x41, 0x41, 0x42, 0x7C, 0x00),
    "E": (0x7E, 0x40, 0x40, 0x7C, 0x40, 0x40, 0x40, 0x7E, 0x00),
    "F": (0x7E, 0x40, 0x40, 0x7C, 0x40, 0x40, 0x40, 0x40, 0x00),
    "G": (0x1E, 0x20, 0x40, 0x4E, 0x42, 0x42, 0x22, 0x1C, 0x00),
    "H": (0x41, 0x41, 0x41, 0x7F, 0x41, 0x41, 0x41, 0x41, 0x00),
    "I": (0x3E, 0x08, 0x08, 0x08, 0x08, 0x08, 0x08, 0x3E, 0x00),
    "L": (0x40, 0x40, 0x40, 0x40, 0x40, 0x40, 0x40, 0x7E, 0x00),
    "M": (0x41, 0x63, 0x55, 0x55, 0x49, 0x41, 0x41, 0x41, 0x00),
    "N": (0x41, 0x61, 0x51, 0x49, 0x45, 0x43, 0x41, 0x41, 0x00),
    "O": (0x1C, 0x22, 0x41, 0x41, 0x41, 0x41, 0x22, 0x1C, 0x00),
    "R": (0x7C, 0x42, 0x42, 0x7C, 0x50, 0x48, 0x44, 0x42, 0x00),
    "S": (0x1E, 0x20, 0x20, 0x1C, 0x02, 0x02, 0x22, 0x1C, 0x00),
    "T": (0x7E, 0x18, 0x18, 0x18, 0x18, 0x18, 0x18, 0x18, 0x00),
    "U": (0x41, 0x41, 0x41, 0x41, 0x41, 0x41, 0x22, 0x1C, 0x00),
    "V": (0x41, 0x41, 0x41, 0x22, 0x22, 0x14, 0x14, 0x08, 0x00),
    "W": (0x41, 0x41, 0x41, 0x49, 0x55, 0x55, 0x63, 0x41, 0x00),
    "Y": (0x41, 0x22, 0x14, 0x08, 0x08, 0x08, 0x08, 0x08, 0x00),
    "Z": (0x7E, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x7E, 0x00),
    "J": (0x0E, 0x04, 0x04, 0x04, 0x04, 0x44, 0x44, 0x38, 0x00),
    "K": (0x42, 0x44, 0x48, 0x70, 0x48, 0x44, 0x42, 0x41, 0x00),
    "P": (0x7C, 0x42, 0x42, 0x7C, 0x40, 0x40, 0x40, 0x40, 0x00),
    "Q": (0x1C, 0x22, 0x41, 0x41, 0x49, 0x45, 0x22, 0x1D, 0x00),
    "X": (0x41, 0x22, 0x14, 0x08, 0x14, 0x22, 0x41, 0x41, 0x00),
    ":": (0x00, 0x0C, 0x0C, 0x00, 0x00, 0x0C, 0x0C, 0x00, 0x00),
    ",": (0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x0C, 0x04, 0x08),
    "_": (0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x7F, 0x00),
    "+": (0x00, 0x08, 0x08, 0x3E, 0x08, 0x08, 0x00, 0x00, 0x00),
    "=": (0x00, 0x00, 0x3E, 0x00, 0x3E, 0x00, 0x00, 0x00, 0x00),
    "<": (0x04, 0x08, 0x10, 0x20, 0x10, 0x08, 0x04, 0x00, 0x00),
    ">": (0x10, 0x08, 0x04, 0x02, 0x04, 0x08, 0x10, 0x00, 0x00),
    "(": (0x04, 0x08, 0x10, 0x10, 0x10, 0x10, 0x08, 0x04, 0x00),
    ")": (0x10, 0x08, 0x04, 0x04, 0x04, 0x04, 0x08, 0x10, 0x00),
    '"': (0x14, 0x14, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00),
    " ": (0x00,) * FONT_BASE_HEIGHT,
}


def font_scale(font: int) -> int:
    """Return the pixel scale used for a font ordinal (1 = XS ... 6 = XXL)."""

    return max(1, int(font))


def measure_text(text: str, glyph_width: int, spacing: int) -> int:
    """Return the width in pixels required to render *text*."""

    count = len(text)
    if not count:
        return 0
    return count * glyph_width + (count - 1) * spacing


class BitmapFontMetrics:
    """Text metrics of the 7x9 bitmap font, one scale step per font ordinal."""

    def line_height(self, font: int) -> int:
        scale = font_scale(font)
        return (FONT_BASE_HEIGHT + LINE_GAP) * scale

    def text_width(self, text: str, font: int) -> int:
        scale = font_scale(font)
        return measure_text(text, FONT_BASE_WIDTH * scale, scale)


def fill_rect(frame, x: int, y: int, width: int, height: int, colour: tuple[int, int, int]) -> None:
    """Fill a rectangle clipped to the frame bounds."""

    if _np is None:
        return
    x0 = max(0, int(x))
    y0 = max(0, int(y))
    x1 = min(frame.shape[1], int(x) + int(width))
    y1 = min(frame.shape[0], int(y) + int(height))
    if x1 <= x0 or y1 <= y0:
        return
    frame[y0:y1, x0:x1] = colour


def draw_text(frame, text: str, x: int, y: int, scale: int, colour: tuple[int, int, int]) -> None:
    """Render *text* with its top-left corner at ``(x, y)``."""

    glyph_w = FONT_BASE_WIDTH * scale
    cursor_x = int(x)
    for char in text.upper():
        glyph = GLYPHS_7x9.get(char)
        if glyph is not None:
            _draw_glyph(frame, glyph, cursor_x, int(y), scale, colour)
        cursor_x += glyph_w + scale


def _draw_glyph(frame, glyph: Iterable[int], x: int, y: int, scale: int, colour: tuple[int, int, int]) -> None:
    for row_index, row in enumerate(glyph):
        for col_index in range(FONT_BASE_WIDTH):
            if (row >> (FONT_BASE_WIDTH - 1 - col_index)) & 1:
                fill_rect(frame, x + col_index * scale, y + row_index * scale, scale, scale, colour)


__all__ = [
    "BitmapFontMetrics",
    "FONT_BASE_HEIGHT",
    "FONT_BASE_WIDTH",
    "GLYPHS_7x9",
    "draw_text",
    "fill_rect",
    "font_scale",
    "measure_text",
]
