import logging

import pytest

from tri_state.i18n import StringTable
from tri_state.layout import VerticalAlign
from tri_state.model import FONT_SIZES, MISSING_SOURCE_NAME, DisplayModel
from tri_state.painter import DrawText, FillRect
from tri_state.schema import BLACK, RED, default_config
from tri_state.sources import SourceCategory, SourceRegistry, StaticSource
from tri_state.states import State, Thresholds


class _FixedMetrics:
    def line_height(self, font: int) -> int:
        return 10 * font

    def text_width(self, text: str, font: int) -> int:
        return len(text) * font


@pytest.fixture
def battery() -> StaticSource:
    return StaticSource("Battery", 60.0, unit="%", decimals=0, category=SourceCategory.TELEMETRY_SENSOR)


@pytest.fixture
def model(battery: StaticSource) -> DisplayModel:
    config = default_config()
    config.source = "Battery"
    return DisplayModel(
        config,
        sources=SourceRegistry([battery]),
        localizer=StringTable(),
        metrics=_FixedMetrics(),
    )


def test_state_and_title_scenario(model: DisplayModel) -> None:
    model.config.title.text = "_n: _v"
    assert model.state() is State.UP
    assert model.title_text() == "Battery: 60"
    assert model.state_title() == "Up"


def test_state_follows_source(model: DisplayModel, battery: StaticSource) -> None:
    battery.set_value(-100)
    assert model.state() is State.DOWN
    assert model.state_background() == (0, 128, 0)
    battery.set_value(0)
    assert model.state() is State.MIDDLE
    assert model.state_text() == "StateMiddle"


def test_missing_source_accessors() -> None:
    model = DisplayModel(default_config(), metrics=_FixedMetrics())
    assert model.has_source() is False
    assert model.source_name() == MISSING_SOURCE_NAME
    assert model.source_value() == 0.0
    assert model.source_text() == ""
    assert model.state() is State.MIDDLE
    assert model.wakeup() is False


def test_detached_source_counts_as_missing(model: DisplayModel, battery: StaticSource) -> None:
    battery.detach()
    assert model.has_source() is False


def test_wakeup_reports_changes_only(model: DisplayModel, battery: StaticSource) -> None:
    assert model.last_value == 0.0
    assert model.wakeup() is True
    assert model.last_value == 60.0
    assert model.wakeup() is False
    battery.set_value(61)
    assert model.wakeup() is True
    assert model.last_value == 61.0


def test_paint_state_plan(model: DisplayModel) -> None:
    model.config.state_style(State.UP).text = "High_b_v_t"
    plan = model.paint(200, 100)

    background = plan.commands[0]
    assert isinstance(background, FillRect)
    assert background.colour == (192, 0, 0)
    assert (background.x, background.y, background.width, background.height) == (1, 1, 198, 98)

    title_rect = plan.commands[1]
    assert isinstance(title_rect, FillRect)
    assert title_rect.colour == (40, 40, 40)

    texts = [command for command in plan.commands if isinstance(command, DrawText)]
    assert [text.text for text in texts] == ["Title", "High", "6060%"]
    title, first, second = texts
    assert title.y == 1 + 2
    assert title.colour == (176, 176, 176)
    font = FONT_SIZES[model.config.font_size_index]
    assert first.font == font
    assert second.y - first.y == pytest.approx(10 * font)
    assert first.x == 100
    assert first.colour == (255, 255, 255)


def test_paint_centres_single_line_below_title(model: DisplayModel) -> None:
    model.config.state_style(State.UP).text = "Only"
    plan = model.paint(200, 100)
    line = plan.commands[-1]
    assert isinstance(line, DrawText)
    title_height = 2 + 20 + 2
    box_top = title_height + 2 + 1
    box_height = 100 - 2 - 1 - box_top
    assert line.y == pytest.approx(box_top + box_height / 2 - 50 / 2)


def test_title_without_custom_colour_uses_state_colours(model: DisplayModel) -> None:
    model.config.title.use_custom_colour = False
    plan = model.paint(200, 100)
    assert plan.commands[1].colour == (192, 0, 0)
    title = next(command for command in plan.commands if isinstance(command, DrawText))
    assert title.colour == (255, 255, 255)


def test_hidden_title_leaves_body_unshifted(model: DisplayModel) -> None:
    model.config.title.show = False
    model.config.state_style(State.UP).text = "x"
    plan = model.paint(200, 100)
    assert len(plan.commands) == 2
    assert plan.commands[1].y == pytest.approx(model._layout.position_line(VerticalAlign.CENTERED, 50))


def test_debug_mode_paints_three_lines(model: DisplayModel) -> None:
    model.config.debug_mode = True
    model.config.thresholds = Thresholds(-50, 50)
    model.config.state_style(State.UP).text = "_n high"
    plan = model.paint(200, 100)
    assert plan.texts()[1:] == ["Battery: 60 (60%)", ">= 50 -> Up", '"Battery high"']
    debug_lines = [command for command in plan.commands if isinstance(command, DrawText)][1:]
    assert all(line.font == 2 for line in debug_lines)


def test_debug_lines_print_large_values_in_full() -> None:
    altitude = StaticSource("Alt", 1234567.0, decimals=1)
    config = default_config()
    config.source = "Alt"
    config.debug_mode = True
    config.thresholds = Thresholds(-50, 1000000)
    model = DisplayModel(config, sources=SourceRegistry([altitude]), metrics=_FixedMetrics())
    assert model.paint(200, 100).texts()[1:3] == ["Alt: 1234567 (1234567.0)", ">= 1000000 -> Up"]


def test_paint_source_missing(caplog: pytest.LogCaptureFixture) -> None:
    model = DisplayModel(default_config(), metrics=_FixedMetrics(), number=3)
    with caplog.at_level(logging.WARNING):
        plan = model.paint(120, 60)
    assert plan.commands[0].colour == BLACK
    assert plan.texts() == ["Title", "Source missing"]
    assert plan.commands[-1].colour == RED
    assert "[3] source not defined" in caplog.text


def test_locale_switch_is_seen_on_next_paint(model: DisplayModel) -> None:
    localizer = model._localizer
    assert model.state_title() == "Up"
    localizer.locale = "de"
    assert model.state_title() == "Oben"
    model.config.source = None
    assert model.paint(100, 60).texts()[-1] == "Quelle fehlt"


def test_threshold_bounds() -> None:
    sensor = StaticSource("Alt", minimum=0, maximum=500)
    config = default_config()
    model = DisplayModel(config, sources=SourceRegistry([sensor]))
    assert model.threshold_bounds() == (-1024.0, 1024.0, 2)
    config.source = "Alt"
    assert model.threshold_bounds() == (0.0, 500.0, 2)


def test_menu_offers_reset_for_resettable_sources(model: DisplayModel, battery: StaticSource) -> None:
    battery.set_value(12)
    entries = model.menu()
    assert [label for label, _ in entries] == ["Reset Battery"]
    entries[0][1]()
    assert battery.value() == 60.0

    switch = StaticSource("SA", category=SourceCategory.SWITCH)
    config = default_config()
    config.source = "SA"
    assert DisplayModel(config, sources=SourceRegistry([switch])).menu() == []


def test_menu_label_without_name_placeholder() -> None:
    timer = StaticSource("Timer1", 5.0, category=SourceCategory.TIMER)
    config = default_config()
    config.source = "Timer1"
    localizer = StringTable(tables={"en": {"SourceReset": "Reset"}})
    model = DisplayModel(config, sources=SourceRegistry([timer]), localizer=localizer)
    assert [label for label, _ in model.menu()] == ["Reset"]


def test_snapshot(model: DisplayModel) -> None:
    snapshot = model.snapshot()
    assert snapshot["state"] == "up"
    assert snapshot["source"]["name"] == "Battery"
    assert snapshot["lines"] == ["StateUp"]
    model.config.source = None
    missing = model.snapshot()
    assert missing["state"] is None
    assert missing["lines"] == ["Source missing"]
