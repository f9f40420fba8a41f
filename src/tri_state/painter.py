"""Paint plans describing what the host renderer should draw, and where."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

try:  # pragma: no cover - optional dependency on numpy for previews
    import numpy as _np
except ImportError:  # pragma: no cover - optional dependency
    _np = None

from .layout import HorizontalAlign
from .overlay_text import BitmapFontMetrics, draw_text, fill_rect, font_scale

Colour = tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    colour: Colour

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "rect",
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "colour": list(self.colour),
        }


@dataclass(frozen=True, slots=True)
class DrawText:
    """Text anchored at ``x`` according to ``align``; ``y`` is the line top."""

    x: float
    y: float
    text: str
    font: int
    colour: Colour
    align: HorizontalAlign = HorizontalAlign.CENTERED

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "text",
            "x": self.x,
            "y": self.y,
            "text": self.text,
            "font": self.font,
            "colour": list(self.colour),
            "align": self.align.value,
        }


PaintCommand = Union[FillRect, DrawText]


@dataclass(slots=True)
class PaintPlan:
    """Ordered drawing commands for one frame."""

    width: float
    height: float
    commands: list[PaintCommand] = field(default_factory=list)

    def fill(self, x: float, y: float, width: float, height: float, colour: Colour) -> None:
        self.commands.append(FillRect(x, y, width, height, tuple(colour)))

    def text(
        self,
        x: float,
        y: float,
        text: str,
        font: int,
        colour: Colour,
        align: HorizontalAlign = HorizontalAlign.CENTERED,
    ) -> None:
        if not text:
            return
        self.commands.append(DrawText(x, y, text, font, tuple(colour), align))

    def texts(self) -> list[str]:
        return [command.text for command in self.commands if isinstance(command, DrawText)]

    def to_dict(self) -> dict[str, object]:
        return {
            "width": self.width,
            "height": self.height,
            "commands": [command.to_dict() for command in self.commands],
        }


def render_plan(frame, plan: PaintPlan, metrics: BitmapFontMetrics | None = None):
    """Rasterise *plan* onto an RGB numpy *frame* using the bitmap font."""

    if _np is None or not isinstance(frame, _np.ndarray):  # pragma: no cover - optional path
        return frame
    if frame.ndim < 3:
        return frame

    metrics = metrics or BitmapFontMetrics()
    for command in plan.commands:
        if isinstance(command, FillRect):
            fill_rect(
                frame,
                int(round(command.x)),
                int(round(command.y)),
                int(round(command.width)),
                int(round(command.height)),
                command.colour,
            )
            continue
        width = metrics.text_width(command.text.upper(), command.font)
        if command.align is HorizontalAlign.LEFT:
            x = command.x
        elif command.align is HorizontalAlign.RIGHT:
            x = command.x - width
        else:
            x = command.x - width / 2
        draw_text(
            frame,
            command.text,
            int(round(x)),
            int(round(command.y)),
            font_scale(command.font),
            command.colour,
        )
    return frame


__all__ = ["Colour", "DrawText", "FillRect", "PaintCommand", "PaintPlan", "render_plan"]
