"""Widget settings and their versioned persisted layout.

Settings are persisted as an ordered record of ``(key, value)`` slots. The
host storage is positional: values are read back in the order they were
written and the key only labels the slot. Every layout ever written is still
readable:

* 1.0.0 wrote no version; the first slot holds the source reference.
* 1.x wrote the version first and a ``SourceShow`` flag after the source.
  The flag is folded into the title as a ``"_n: "`` prefix.
* 2.x dropped ``SourceShow``.

Saving always writes the current layout.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Protocol, Sequence

from .states import State, Thresholds
from .version import SCHEMA_VERSION, version_to_number

logger = logging.getLogger(__name__)

Colour = tuple[int, int, int]
Record = list[tuple[str, Any]]

FONT_SIZE_MIN = 1
FONT_SIZE_MAX = 6
DEFAULT_FONT_SIZE_INDEX = 5

VERSION_1_0_0 = version_to_number("1.0.0")
VERSION_2_0_0 = version_to_number("2.0.0")

SOURCE_NAME_PREFIX = "_n: "

WHITE: Colour = (255, 255, 255)
BLACK: Colour = (0, 0, 0)
RED: Colour = (255, 0, 0)

DEFAULT_TITLE_BACKGROUND: Colour = (40, 40, 40)
DEFAULT_TITLE_FOREGROUND: Colour = (176, 176, 176)
DEFAULT_STATE_COLOURS: dict[State, tuple[Colour, Colour]] = {
    State.DOWN: ((0, 128, 0), WHITE),
    State.MIDDLE: ((192, 128, 0), WHITE),
    State.UP: ((192, 0, 0), WHITE),
}


def _identity(key: str) -> str:
    return key


@dataclass(slots=True)
class StateStyle:
    """Text and colours shown while the widget is in one state."""

    title: str
    text: str
    background: Colour
    foreground: Colour

    def to_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "text": self.text,
            "background": list(self.background),
            "foreground": list(self.foreground),
        }


@dataclass(slots=True)
class TitleStyle:
    show: bool = True
    text: str = "Title"
    use_custom_colour: bool = True
    background: Colour = DEFAULT_TITLE_BACKGROUND
    foreground: Colour = DEFAULT_TITLE_FOREGROUND

    def to_dict(self) -> dict[str, object]:
        return {
            "show": self.show,
            "text": self.text,
            "use_custom_colour": self.use_custom_colour,
            "background": list(self.background),
            "foreground": list(self.foreground),
        }


def _default_states(translate: Callable[[str], str]) -> tuple[StateStyle, ...]:
    styles = []
    for state in State:
        background, foreground = DEFAULT_STATE_COLOURS[state]
        styles.append(
            StateStyle(
                title=state.title_key,
                text=translate(state.title_key),
                background=background,
                foreground=foreground,
            )
        )
    return tuple(styles)


@dataclass(slots=True)
class WidgetConfig:
    """Everything a widget instance persists."""

    source: object | None = None
    title: TitleStyle = field(default_factory=TitleStyle)
    thresholds: Thresholds = field(default_factory=Thresholds)
    font_size_index: int = DEFAULT_FONT_SIZE_INDEX
    states: tuple[StateStyle, ...] = field(default_factory=lambda: _default_states(_identity))
    debug_mode: bool = False

    def state_style(self, state: State) -> StateStyle:
        return self.states[State(state) - 1]

    def to_dict(self) -> dict[str, object]:
        return {
            "source": source_reference(self.source),
            "title": self.title.to_dict(),
            "thresholds": self.thresholds.to_dict(),
            "font_size_index": self.font_size_index,
            "states": {state.name.lower(): self.state_style(state).to_dict() for state in State},
            "debug_mode": self.debug_mode,
        }


def default_config(translate: Callable[[str], str] | None = None) -> WidgetConfig:
    """Return the settings of a freshly created widget."""

    translate = translate or _identity
    return WidgetConfig(
        source=None,
        title=TitleStyle(text=translate("Title")),
        thresholds=Thresholds(-50.0, 50.0),
        font_size_index=DEFAULT_FONT_SIZE_INDEX,
        states=_default_states(translate),
        debug_mode=False,
    )


def source_reference(source: object | None) -> object | None:
    """Return the persistable reference for a bound source."""

    if source is None or isinstance(source, (str, int, float)):
        return source
    name = getattr(source, "name", None)
    if callable(name):
        return name()
    return str(source)


# ------------------------------ field parsing ------------------------------


def parse_flag(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if math.isnan(float(value)):
            raise ValueError("Flags must be boolean values")
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return default
        if text in {"true", "1", "yes", "on"}:
            return True
        if text in {"false", "0", "no", "off"}:
            return False
    raise ValueError("Flags must be boolean values")


def parse_colour(value: Any, *, default: Colour) -> Colour:
    """Accept ``(r, g, b)`` sequences, ``#rrggbb`` strings or packed integers."""

    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError("Colours must be RGB values")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError("Packed colours must be between 0 and 0xFFFFFF")
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Unsupported colour string: {value!r}")
        try:
            return parse_colour(int(text, 16), default=default)
        except ValueError as exc:
            raise ValueError(f"Unsupported colour string: {value!r}") from exc
    if isinstance(value, Sequence):
        items = list(value)
        if len(items) != 3:
            raise ValueError("Colours must contain three channels")
        try:
            channels = tuple(int(item) for item in items)
        except (TypeError, ValueError) as exc:
            raise ValueError("Colour channels must be integers") from exc
        if any(channel < 0 or channel > 255 for channel in channels):
            raise ValueError("Colour channels must be between 0 and 255")
        return channels  # type: ignore[return-value]
    raise ValueError("Unsupported colour value")


def parse_threshold(value: Any, *, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError("Thresholds must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("Thresholds must be numeric") from exc
    if not math.isfinite(number):
        raise ValueError("Thresholds must be finite values")
    return number


def parse_font_size_index(value: Any, *, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError("Font size index must be an integer")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("Font size index must be an integer") from exc
    if not number.is_integer():
        raise ValueError("Font size index must be an integer")
    index = int(number)
    if not FONT_SIZE_MIN <= index <= FONT_SIZE_MAX:
        raise ValueError(f"Font size index must be between {FONT_SIZE_MIN} and {FONT_SIZE_MAX}")
    return index


def parse_text(value: Any, *, default: str) -> str:
    if value is None:
        return default
    return str(value)


# ------------------------------ record layout ------------------------------


class PersistedField(str, Enum):
    VERSION = "Version"
    SOURCE = "source"
    SOURCE_SHOW = "SourceShow"
    TITLE_SHOW = "titleShow"
    TITLE_TEXT = "titleText"
    TITLE_BACKGROUND = "titleBgColor"
    TITLE_FOREGROUND = "titleTxColor"
    TITLE_COLOUR_USE = "titleColorUse"
    THRESHOLD_DOWN = "thresholdDown"
    THRESHOLD_UP = "thresholdUp"
    FONT_SIZE_INDEX = "fontSizeIndex"
    STATE_TEXT_1 = "StateText1"
    STATE_BACKGROUND_1 = "StateBgColor1"
    STATE_FOREGROUND_1 = "StateTxColor1"
    STATE_TEXT_2 = "StateText2"
    STATE_BACKGROUND_2 = "StateBgColor2"
    STATE_FOREGROUND_2 = "StateTxColor2"
    STATE_TEXT_3 = "StateText3"
    STATE_BACKGROUND_3 = "StateBgColor3"
    STATE_FOREGROUND_3 = "StateTxColor3"
    DEBUG_MODE = "debugMode"


STATE_FIELDS: dict[State, tuple[PersistedField, PersistedField, PersistedField]] = {
    State.DOWN: (
        PersistedField.STATE_TEXT_1,
        PersistedField.STATE_BACKGROUND_1,
        PersistedField.STATE_FOREGROUND_1,
    ),
    State.MIDDLE: (
        PersistedField.STATE_TEXT_2,
        PersistedField.STATE_BACKGROUND_2,
        PersistedField.STATE_FOREGROUND_2,
    ),
    State.UP: (
        PersistedField.STATE_TEXT_3,
        PersistedField.STATE_BACKGROUND_3,
        PersistedField.STATE_FOREGROUND_3,
    ),
}


class SchemaLayout(Enum):
    """The historical record layouts, selected by the stored version."""

    UNVERSIONED = "1.0.0"
    SOURCE_SHOW = "1.x"
    CURRENT = "2.x"

    @classmethod
    def for_version(cls, number: float) -> "SchemaLayout":
        if number == VERSION_1_0_0:
            return cls.UNVERSIONED
        if number < VERSION_2_0_0:
            return cls.SOURCE_SHOW
        return cls.CURRENT


class KeyValueStore(Protocol):
    """Ordered host storage: reads return slots in the order they were written."""

    def read(self, key: str) -> Any: ...

    def write(self, key: str, value: Any) -> None: ...


class RecordReader:
    """Sequential cursor over a persisted record."""

    def __init__(self, record: Iterable[Sequence[Any]]) -> None:
        self._slots = [tuple(slot) for slot in record]
        self._position = 0

    def read(self, key: str) -> Any:
        if self._position >= len(self._slots):
            return None
        slot = self._slots[self._position]
        self._position += 1
        if len(slot) < 2:
            return None
        slot_key, value = slot[0], slot[1]
        if slot_key != key:
            logger.debug("Slot %d labelled %r read as %r", self._position - 1, slot_key, key)
        return value

    @property
    def remaining(self) -> int:
        return len(self._slots) - self._position


class RecordWriter:
    def __init__(self) -> None:
        self.record: Record = []

    def write(self, key: str, value: Any) -> None:
        self.record.append((key, value))


def _is_version_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def write_config(config: WidgetConfig, store: KeyValueStore) -> None:
    """Write *config* to *store* in the current layout, version first."""

    logger.info("Storing schema version %d", SCHEMA_VERSION)
    store.write(PersistedField.VERSION.value, SCHEMA_VERSION)
    store.write(PersistedField.SOURCE.value, source_reference(config.source))

    title = config.title
    store.write(PersistedField.TITLE_SHOW.value, bool(title.show))
    store.write(PersistedField.TITLE_TEXT.value, title.text)
    store.write(PersistedField.TITLE_BACKGROUND.value, list(title.background))
    store.write(PersistedField.TITLE_FOREGROUND.value, list(title.foreground))
    store.write(PersistedField.TITLE_COLOUR_USE.value, bool(title.use_custom_colour))

    store.write(PersistedField.THRESHOLD_DOWN.value, float(config.thresholds.down))
    store.write(PersistedField.THRESHOLD_UP.value, float(config.thresholds.up))
    store.write(PersistedField.FONT_SIZE_INDEX.value, int(config.font_size_index))

    for state in State:
        style = config.state_style(state)
        text_field, background_field, foreground_field = STATE_FIELDS[state]
        store.write(text_field.value, style.text)
        store.write(background_field.value, list(style.background))
        store.write(foreground_field.value, list(style.foreground))

    store.write(PersistedField.DEBUG_MODE.value, bool(config.debug_mode))


def save(config: WidgetConfig) -> Record:
    """Return the persisted record for *config*."""

    writer = RecordWriter()
    write_config(config, writer)
    return writer.record


def _read_field(store: KeyValueStore, field_: PersistedField, parser, default):
    raw = store.read(field_.value)
    try:
        return parser(raw, default=default)
    except ValueError as exc:
        logger.warning("Ignoring stored %s value %r: %s", field_.value, raw, exc)
        return default


def read_config(store: KeyValueStore, defaults: WidgetConfig | None = None) -> WidgetConfig:
    """Read a configuration written by any schema version from *store*."""

    config = copy.deepcopy(defaults) if defaults is not None else default_config()

    first = store.read(PersistedField.VERSION.value)
    if _is_version_number(first):
        version = first
        logger.info("Found stored schema version %s", version)
    else:
        version = VERSION_1_0_0
        logger.info("No stored version, reading as 1.0.0 (%d)", VERSION_1_0_0)

    layout = SchemaLayout.for_version(version)
    if layout is SchemaLayout.UNVERSIONED:
        # the slot read as the version already holds the source
        config.source = first
    else:
        config.source = store.read(PersistedField.SOURCE.value)

    title_prefix = ""
    if layout is not SchemaLayout.CURRENT:
        show_source = store.read(PersistedField.SOURCE_SHOW.value)
        if show_source:
            title_prefix = SOURCE_NAME_PREFIX
        logger.info(
            "Schema %s: SourceShow=%r, title prefix %r", layout.value, show_source, title_prefix
        )

    title = config.title
    title.show = _read_field(store, PersistedField.TITLE_SHOW, parse_flag, title.show)
    title.text = _read_field(store, PersistedField.TITLE_TEXT, parse_text, title.text)
    title.background = _read_field(
        store, PersistedField.TITLE_BACKGROUND, parse_colour, title.background
    )
    title.foreground = _read_field(
        store, PersistedField.TITLE_FOREGROUND, parse_colour, title.foreground
    )
    title.use_custom_colour = _read_field(
        store, PersistedField.TITLE_COLOUR_USE, parse_flag, title.use_custom_colour
    )
    title.text = title_prefix + title.text

    down = _read_field(store, PersistedField.THRESHOLD_DOWN, parse_threshold, config.thresholds.down)
    up = _read_field(store, PersistedField.THRESHOLD_UP, parse_threshold, config.thresholds.up)
    config.thresholds = Thresholds(down, up)
    config.font_size_index = _read_field(
        store, PersistedField.FONT_SIZE_INDEX, parse_font_size_index, config.font_size_index
    )

    for state in State:
        style = config.state_style(state)
        text_field, background_field, foreground_field = STATE_FIELDS[state]
        style.text = _read_field(store, text_field, parse_text, style.text)
        style.background = _read_field(store, background_field, parse_colour, style.background)
        style.foreground = _read_field(store, foreground_field, parse_colour, style.foreground)

    config.debug_mode = _read_field(store, PersistedField.DEBUG_MODE, parse_flag, config.debug_mode)
    return config


def load(record: Iterable[Sequence[Any]], defaults: WidgetConfig | None = None) -> WidgetConfig:
    """Return the configuration stored in *record*, migrating older layouts."""

    return read_config(RecordReader(record), defaults)


__all__ = [
    "Colour",
    "DEFAULT_FONT_SIZE_INDEX",
    "FONT_SIZE_MAX",
    "FONT_SIZE_MIN",
    "KeyValueStore",
    "PersistedField",
    "Record",
    "RecordReader",
    "RecordWriter",
    "SOURCE_NAME_PREFIX",
    "SchemaLayout",
    "StateStyle",
    "TitleStyle",
    "WidgetConfig",
    "default_config",
    "load",
    "parse_colour",
    "parse_flag",
    "parse_font_size_index",
    "parse_threshold",
    "read_config",
    "save",
    "source_reference",
    "write_config",
]
