import json
from pathlib import Path

import pytest

from tri_state.schema import SCHEMA_VERSION, default_config
from tri_state.states import State, Thresholds
from tri_state.store import JsonRecordStore, WidgetStore


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    store = WidgetStore(tmp_path / "widget.json")
    assert store.config == default_config()
    assert not (tmp_path / "widget.json").exists()


def test_thresholds_persist(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    store = WidgetStore(config_file)
    updated = store.set_thresholds({"down": -5, "up": 7.25})
    assert updated == Thresholds(-5, 7.25)
    reloaded = WidgetStore(config_file)
    assert reloaded.get_thresholds() == updated


def test_partial_threshold_update_keeps_other_value(tmp_path: Path) -> None:
    store = WidgetStore(tmp_path / "widget.json")
    assert store.set_thresholds({"up": 80}) == Thresholds(-50, 80)
    with pytest.raises(ValueError):
        store.set_thresholds({"down": "low"})


def test_title_and_state_styles_persist(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    store = WidgetStore(config_file)
    store.set_title({"text": "_n", "background": "#000010", "use_custom_colour": False})
    store.set_state_style(State.MIDDLE, {"text": "warn_b_1v", "foreground": [1, 1, 1]})
    reloaded = WidgetStore(config_file)
    title = reloaded.get_title()
    assert title.text == "_n"
    assert title.background == (0, 0, 16)
    assert title.use_custom_colour is False
    assert title.show is True
    middle = reloaded.get_state_style(State.MIDDLE)
    assert middle.text == "warn_b_1v"
    assert middle.foreground == (1, 1, 1)
    assert middle.title == "StateMiddle"


def test_invalid_values_rejected(tmp_path: Path) -> None:
    store = WidgetStore(tmp_path / "widget.json")
    with pytest.raises(ValueError):
        store.set_font_size_index(9)
    with pytest.raises(ValueError):
        store.set_state_style(State.UP, {"background": [1, 2]})
    with pytest.raises(ValueError):
        store.set_source("   ")
    assert store.get_font_size_index() == 5


def test_display_flags_and_source_persist(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    store = WidgetStore(config_file)
    store.set_font_size_index(2)
    store.set_debug_mode(True)
    store.set_source("Sw1")
    reloaded = WidgetStore(config_file)
    assert reloaded.get_font_size_index() == 2
    assert reloaded.get_debug_mode() is True
    assert reloaded.get_source() == "Sw1"
    reloaded.set_source(None)
    assert WidgetStore(config_file).get_source() is None


def test_file_format_is_ordered_pairs(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    WidgetStore(config_file).set_debug_mode(True)
    payload = json.loads(config_file.read_text())
    assert payload[0] == ["Version", SCHEMA_VERSION]
    assert payload[-1] == ["debugMode", True]


def test_reads_legacy_file(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    config_file.write_text(
        json.dumps(
            [
                ["Version", 10200],
                ["source", "Batt"],
                ["SourceShow", True],
                ["titleShow", True],
                ["titleText", "Pack"],
            ]
        )
    )
    store = WidgetStore(config_file)
    assert store.get_source() == "Batt"
    assert store.get_title().text == "_n: Pack"
    assert store.get_thresholds() == Thresholds(-50, 50)


def test_reload_updates_shared_config(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    store = WidgetStore(config_file)
    shared = store.config
    WidgetStore(config_file).set_thresholds({"down": 1, "up": 2})
    store.reload()
    assert shared is store.config
    assert shared.thresholds == Thresholds(1, 2)


def test_corrupt_file_raises_runtime_error(tmp_path: Path) -> None:
    config_file = tmp_path / "widget.json"
    config_file.write_text("{not json")
    with pytest.raises(RuntimeError):
        WidgetStore(config_file)
    config_file.write_text(json.dumps({"Version": 1}))
    with pytest.raises(RuntimeError):
        JsonRecordStore(config_file).load_record()
