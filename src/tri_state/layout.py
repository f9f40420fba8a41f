"""Positioning arithmetic for the title, body and footer bands of a widget."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol

PAD_ABOVE = 2
PAD_BELOW = 2
PAD_LEFT = 6
PAD_RIGHT = 6

# One pixel frame left free so the host can show the focus highlight.
INSET_X = 1
INSET_Y = 1


class VerticalAlign(str, Enum):
    TOP = "top"
    CENTERED = "centered"
    BOTTOM = "bottom"


class HorizontalAlign(str, Enum):
    LEFT = "left"
    CENTERED = "centered"
    RIGHT = "right"


class TextMetrics(Protocol):
    """Text measurement provided by the host renderer."""

    def line_height(self, font: int) -> int: ...

    def text_width(self, text: str, font: int) -> int: ...


@dataclass(frozen=True, slots=True)
class Band:
    """A horizontal strip of the canvas."""

    y: float
    height: float


class LayoutEngine:
    """Compute text positions inside a ``width`` x ``height`` canvas.

    :meth:`begin_frame` must run once per paint; it clears the heights that
    :meth:`reserve_title` and :meth:`reserve_footer` record for the frame.
    """

    def __init__(self) -> None:
        self.width = 0
        self.height = 0
        self.title_height = 0.0
        self.footer_height = 0.0

    def begin_frame(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.title_height = 0.0
        self.footer_height = 0.0

    @staticmethod
    def measure_band_height(
        font_line_height: float, pad_above: float = PAD_ABOVE, pad_below: float = PAD_BELOW
    ) -> float:
        return pad_above + font_line_height + pad_below

    def reserve_title(self, line_height: float) -> Band:
        """Reserve the title band at the top and return its geometry."""

        height = self.measure_band_height(line_height, PAD_ABOVE, PAD_BELOW)
        self.title_height = height
        return Band(y=INSET_Y, height=height - INSET_Y)

    def reserve_footer(self, line_height: float, *, with_background: bool = True) -> Band:
        """Reserve the footer band at the bottom and return its geometry."""

        height = self.measure_band_height(
            line_height, PAD_ABOVE if with_background else 0, PAD_BELOW
        )
        self.footer_height = height
        return Band(y=self.height - height - 2 * INSET_Y, height=height)

    def content_rect(self) -> tuple[float, float, float, float]:
        """Return the inset background rectangle ``(x, y, width, height)``."""

        return (INSET_X, INSET_Y, self.width - 2 * INSET_X, self.height - 2 * INSET_Y)

    def position_line(
        self,
        align: VerticalAlign,
        line_height: float,
        shift_lines: float = 0.0,
        *,
        title_height: float | None = None,
        footer_height: float | None = None,
    ) -> float:
        """Return the top y coordinate of a text line.

        ``shift_lines`` moves the result by whole or fractional line heights
        (``-1`` one line up, ``0.5`` half a line down).
        """

        title = self.title_height if title_height is None else title_height
        footer = self.footer_height if footer_height is None else footer_height

        if align is VerticalAlign.TOP:
            y = INSET_Y + PAD_ABOVE + title
        elif align is VerticalAlign.BOTTOM:
            y = self.height - line_height - footer - PAD_BELOW - INSET_Y
        else:
            box_top = title + PAD_ABOVE + INSET_Y
            box_height = self.height - PAD_BELOW - footer - INSET_Y - box_top
            y = box_top + box_height / 2 - line_height / 2

        return y + shift_lines * line_height

    @staticmethod
    def stack_lines(
        lines: Iterable[str], line_height: float = 0.0, shift: float = 0.0
    ) -> list[tuple[str, float]]:
        """Assign each line a shift so the block is centred on the anchor line.

        ``line_height`` is accepted for symmetry with :meth:`position_line`;
        shifts are expressed in lines, not pixels.
        """

        items = list(lines)
        count = len(items)
        return [(line, -count / 2 - 0.5 + index + shift) for index, line in enumerate(items, start=1)]

    def anchor_x(self, align: HorizontalAlign) -> float:
        if align is HorizontalAlign.LEFT:
            return PAD_LEFT + INSET_X
        if align is HorizontalAlign.RIGHT:
            return self.width - PAD_RIGHT - INSET_X
        return self.width / 2


__all__ = [
    "Band",
    "HorizontalAlign",
    "INSET_X",
    "INSET_Y",
    "LayoutEngine",
    "PAD_ABOVE",
    "PAD_BELOW",
    "PAD_LEFT",
    "PAD_RIGHT",
    "TextMetrics",
    "VerticalAlign",
]
