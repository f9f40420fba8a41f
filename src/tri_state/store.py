"""File-backed persistence and field accessors for a widget configuration."""
from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Mapping

from .schema import (
    Record,
    StateStyle,
    TitleStyle,
    WidgetConfig,
    default_config,
    load,
    parse_colour,
    parse_flag,
    parse_font_size_index,
    parse_threshold,
    save,
)
from .states import State, Thresholds

logger = logging.getLogger(__name__)


class JsonRecordStore:
    """Keep a persisted record as a JSON array of ``[key, value]`` pairs."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load_record(self) -> Record:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(payload, list):
                raise ValueError("Widget record must contain a JSON array")
            record: Record = []
            for slot in payload:
                if not isinstance(slot, list) or len(slot) != 2 or not isinstance(slot[0], str):
                    raise ValueError("Widget record slots must be [key, value] pairs")
                record.append((slot[0], slot[1]))
            return record
        except (OSError, ValueError) as exc:
            raise RuntimeError(f"Failed to load configuration: {exc}") from exc

    def save_record(self, record: Record) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = [[key, value] for key, value in record]
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


class WidgetStore:
    """Own one widget configuration and persist every change.

    The getters and setters mirror the fields of the configuration form.
    """

    def __init__(
        self,
        config_path: Path | str,
        *,
        translate: Callable[[str], str] | None = None,
    ) -> None:
        self._records = JsonRecordStore(config_path)
        self._lock = Lock()
        self._defaults = default_config(translate)
        self._config = self._load()

    def _load(self) -> WidgetConfig:
        if not self._records.exists():
            logger.info("No widget configuration at %s, using defaults", self._records.path)
            return copy.deepcopy(self._defaults)
        record = self._records.load_record()
        return load(record, self._defaults)

    def _save(self) -> None:
        try:
            self._records.save_record(save(self._config))
        except OSError as exc:
            logger.exception("Failed to persist widget configuration to %s", self._records.path)
            raise RuntimeError(f"Failed to save configuration: {exc}") from exc

    @property
    def config(self) -> WidgetConfig:
        """The live configuration shared with the display model."""

        return self._config

    def reload(self) -> WidgetConfig:
        with self._lock:
            loaded = self._load()
            # update in place: display models keep a reference to the config
            for name in WidgetConfig.__slots__:
                setattr(self._config, name, getattr(loaded, name))
            return self._config

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return self._config.to_dict()

    def get_source(self) -> object | None:
        with self._lock:
            return self._config.source

    def set_source(self, ref: str | None) -> object | None:
        if ref is not None and (not isinstance(ref, str) or not ref.strip()):
            raise ValueError("Source reference must be a non-empty string")
        with self._lock:
            self._config.source = ref.strip() if ref is not None else None
            self._save()
            return self._config.source

    def get_thresholds(self) -> Thresholds:
        with self._lock:
            return self._config.thresholds

    def set_thresholds(self, data: Mapping[str, Any]) -> Thresholds:
        current = self._config.thresholds
        thresholds = Thresholds(
            parse_threshold(data.get("down"), default=current.down),
            parse_threshold(data.get("up"), default=current.up),
        )
        with self._lock:
            self._config.thresholds = thresholds
            self._save()
        return thresholds

    def get_title(self) -> TitleStyle:
        with self._lock:
            return self._config.title

    def set_title(self, data: Mapping[str, Any]) -> TitleStyle:
        current = self._config.title
        text = data.get("text")
        title = TitleStyle(
            show=parse_flag(data.get("show"), default=current.show),
            text=current.text if text is None else str(text),
            use_custom_colour=parse_flag(
                data.get("use_custom_colour"), default=current.use_custom_colour
            ),
            background=parse_colour(data.get("background"), default=current.background),
            foreground=parse_colour(data.get("foreground"), default=current.foreground),
        )
        with self._lock:
            self._config.title = title
            self._save()
        return title

    def get_state_style(self, state: State) -> StateStyle:
        with self._lock:
            return self._config.state_style(state)

    def set_state_style(self, state: State, data: Mapping[str, Any]) -> StateStyle:
        state = State(state)
        current = self._config.state_style(state)
        text = data.get("text")
        style = StateStyle(
            title=current.title,
            text=current.text if text is None else str(text),
            background=parse_colour(data.get("background"), default=current.background),
            foreground=parse_colour(data.get("foreground"), default=current.foreground),
        )
        with self._lock:
            states = list(self._config.states)
            states[state - 1] = style
            self._config.states = tuple(states)
            self._save()
        return style

    def get_font_size_index(self) -> int:
        with self._lock:
            return self._config.font_size_index

    def set_font_size_index(self, value: Any) -> int:
        index = parse_font_size_index(value, default=self._config.font_size_index)
        with self._lock:
            self._config.font_size_index = index
            self._save()
        return index

    def get_debug_mode(self) -> bool:
        with self._lock:
            return self._config.debug_mode

    def set_debug_mode(self, value: Any) -> bool:
        enabled = parse_flag(value, default=self._config.debug_mode)
        with self._lock:
            self._config.debug_mode = enabled
            self._save()
        return enabled


__all__ = ["JsonRecordStore", "WidgetStore"]
