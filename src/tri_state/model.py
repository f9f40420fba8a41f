"""Display model deriving the current state, colours and paint plan of a widget."""

from __future__ import annotations

import logging
from typing import Callable

from .i18n import Localizer, StringTable
from .layout import HorizontalAlign, LayoutEngine, TextMetrics, VerticalAlign
from .overlay_text import BitmapFontMetrics
from .painter import Colour, PaintPlan
from .schema import BLACK, RED, StateStyle, WidgetConfig
from .sources import RESETTABLE_CATEGORIES, Source, SourceCategory, SourceRegistry, source_exists
from .states import State, classify, describe_state_range, ensure_state, format_number
from .template import TemplateContext, expand, split_lines

logger = logging.getLogger(__name__)

FONT_XS = 1
FONT_S = 2
FONT_STD = 3
FONT_L = 4
FONT_XL = 5
FONT_XXL = 6

FONT_SIZES: dict[int, int] = {1: FONT_XS, 2: FONT_S, 3: FONT_STD, 4: FONT_L, 5: FONT_XL, 6: FONT_XXL}
FONT_SIZE_CHOICES: tuple[tuple[str, int], ...] = (
    ("XS", 1),
    ("S", 2),
    ("M", 3),
    ("L", 4),
    ("XL", 5),
    ("XXL", 6),
)

TITLE_FONT = FONT_S
DEBUG_FONT = FONT_S
MISSING_SOURCE_FONT = FONT_STD

THRESHOLD_RANGE = 1024.0
THRESHOLD_PRECISION = 2

MISSING_SOURCE_NAME = "---"

MenuEntry = tuple[str, Callable[[], None]]


class DisplayModel:
    """Derive everything a frame shows from a :class:`WidgetConfig`.

    Nothing displayed is cached: strings are translated and templates expanded
    on every call, so a locale switch shows up on the next paint.
    """

    def __init__(
        self,
        config: WidgetConfig,
        *,
        sources: SourceRegistry | None = None,
        localizer: Localizer | None = None,
        metrics: TextMetrics | None = None,
        number: int = 0,
    ) -> None:
        self.config = config
        self._sources = sources if sources is not None else SourceRegistry()
        self._localizer = localizer if localizer is not None else StringTable()
        self._metrics = metrics if metrics is not None else BitmapFontMetrics()
        self._layout = LayoutEngine()
        self._last_value = 0.0
        self.number = number

    # ------------------------------ source -----------------------------
    def source(self) -> Source | None:
        source = self._sources.resolve(self.config.source)
        return source if source_exists(source) else None

    def has_source(self) -> bool:
        return self.source() is not None

    def source_name(self) -> str:
        source = self.source()
        return source.name() if source is not None else MISSING_SOURCE_NAME

    def source_value(self) -> float:
        source = self.source()
        if source is None:
            return 0.0
        value = source.value()
        return float(value) if value is not None else 0.0

    def source_text(self) -> str:
        source = self.source()
        return source.display_text() if source is not None else ""

    @property
    def last_value(self) -> float:
        """The reading seen by the previous :meth:`wakeup`."""

        return self._last_value

    # ------------------------------ state ------------------------------
    def state(self) -> State:
        thresholds = self.config.thresholds
        return classify(self.source_value(), thresholds.down, thresholds.up)

    def state_style(self) -> StateStyle:
        return self.config.state_style(self.state())

    def state_title(self) -> str:
        return self.translate(self.state_style().title)

    def state_text(self) -> str:
        return self.state_style().text

    def state_background(self) -> Colour:
        return self.state_style().background

    def state_foreground(self) -> Colour:
        return self.state_style().foreground

    def translate(self, key: str) -> str:
        return self._localizer.translate(key)

    def template_context(self) -> TemplateContext:
        return TemplateContext(
            value=self.source_value(),
            text=self.source_text(),
            name=self.source_name(),
        )

    def format_text(self, template: str | None) -> str:
        return expand(template, self.template_context())

    def title_text(self) -> str:
        return self.format_text(self.config.title.text)

    def state_lines(self) -> list[str]:
        return [self.format_text(line) for line in split_lines(self.state_text())]

    # ----------------------------- entry points ------------------------------
    def wakeup(self) -> bool:
        """Record the current reading and return True when a repaint is due."""

        source = self.source()
        if source is None:
            return False
        value = source.value()
        if value is None or value == self._last_value:
            return False
        self._last_value = value
        logger.info(
            "[%d] value changed to %s, text = %s, state = %s",
            self.number,
            value,
            self.source_text(),
            self.state_title(),
        )
        return True

    def paint(self, width: float, height: float) -> PaintPlan:
        """Return the drawing commands for a ``width`` x ``height`` widget."""

        logger.debug("[%d] paint %sx%s", self.number, width, height)
        self._layout.begin_frame(width, height)
        plan = PaintPlan(width, height)

        if not self.has_source():
            self._paint_source_missing(plan)
            return plan

        state = ensure_state(self.state())
        self._paint_state(plan, state)
        return plan

    def threshold_bounds(self) -> tuple[float, float, int]:
        """Return ``(minimum, maximum, decimals)`` for the threshold inputs."""

        source = self.source()
        minimum = _optional_bound(source, "minimum")
        maximum = _optional_bound(source, "maximum")
        if minimum is None or maximum is None:
            return (-THRESHOLD_RANGE, THRESHOLD_RANGE, THRESHOLD_PRECISION)
        return (minimum, maximum, THRESHOLD_PRECISION)

    def menu(self) -> list[MenuEntry]:
        source = self.source()
        reset = getattr(source, "reset", None)
        if source is None or not callable(reset):
            return []
        category_fn = getattr(source, "category", None)
        try:
            category = SourceCategory(category_fn()) if callable(category_fn) else None
        except ValueError:
            category = None
        if category not in RESETTABLE_CATEGORIES:
            return []
        label = self.translate("SourceReset").replace("%s", source.name())
        return [(label, reset)]

    def snapshot(self) -> dict[str, object]:
        has_source = self.has_source()
        state = self.state()
        return {
            "source": {
                "bound": has_source,
                "name": self.source_name(),
                "value": self.source_value(),
                "text": self.source_text(),
            },
            "last_value": self._last_value,
            "state": state.name.lower() if has_source else None,
            "state_title": self.state_title() if has_source else self.translate("SourceMissed"),
            "title": self.title_text() if self.config.title.show else None,
            "lines": self.state_lines() if has_source else [self.translate("SourceMissed")],
            "background": list(self.state_background()) if has_source else list(BLACK),
            "foreground": list(self.state_foreground()) if has_source else list(RED),
            "debug_mode": self.config.debug_mode,
        }

    # ------------------------------ painting ---------------------------------
    def _fill_background(self, plan: PaintPlan, colour: Colour) -> None:
        x, y, width, height = self._layout.content_rect()
        plan.fill(x, y, width, height, colour)

    def _paint_title(self, plan: PaintPlan) -> None:
        title = self.config.title
        if not title.show:
            return
        if title.use_custom_colour:
            background, foreground = title.background, title.foreground
        else:
            background, foreground = self.state_background(), self.state_foreground()

        layout = self._layout
        line_height = self._metrics.line_height(TITLE_FONT)
        text_y = layout.position_line(VerticalAlign.TOP, line_height, title_height=0.0)
        band = layout.reserve_title(line_height)
        x, _, width, _ = layout.content_rect()
        plan.fill(x, band.y, width, band.height, background)
        plan.text(
            layout.anchor_x(HorizontalAlign.CENTERED),
            text_y,
            self.title_text(),
            TITLE_FONT,
            foreground,
        )

    def _paint_lines(self, plan: PaintPlan, lines: list[str], font: int, colour: Colour) -> None:
        layout = self._layout
        line_height = self._metrics.line_height(font)
        x = layout.anchor_x(HorizontalAlign.CENTERED)
        for line, shift in layout.stack_lines(lines, line_height):
            y = layout.position_line(VerticalAlign.CENTERED, line_height, shift)
            plan.text(x, y, line, font, colour)

    def _debug_lines(self, state: State) -> list[str]:
        source = self.source()
        assert source is not None
        value = self.source_value()
        return [
            f"{source.name()}: {format_number(value)} ({self.source_text()})",
            f"{describe_state_range(state, self.config.thresholds)} -> {self.state_title()}",
            f'"{self.format_text(self.state_text())}"',
        ]

    def _paint_state(self, plan: PaintPlan, state: State) -> None:
        style = self.config.state_style(state)
        self._fill_background(plan, style.background)
        self._paint_title(plan)
        if self.config.debug_mode:
            self._paint_lines(plan, self._debug_lines(state), DEBUG_FONT, style.foreground)
            return
        font = FONT_SIZES[self.config.font_size_index]
        self._paint_lines(plan, self.state_lines(), font, style.foreground)

    def _paint_source_missing(self, plan: PaintPlan) -> None:
        self._fill_background(plan, BLACK)
        self._paint_title(plan)
        logger.warning("[%d] source not defined", self.number)
        self._paint_lines(
            plan, split_lines(self.translate("SourceMissed")), MISSING_SOURCE_FONT, RED
        )


def _optional_bound(source: object | None, attribute: str) -> float | None:
    getter = getattr(source, attribute, None)
    if not callable(getter):
        return None
    value = getter()
    return float(value) if value is not None else None


__all__ = [
    "DisplayModel",
    "FONT_SIZES",
    "FONT_SIZE_CHOICES",
    "MISSING_SOURCE_NAME",
    "THRESHOLD_PRECISION",
    "THRESHOLD_RANGE",
]
