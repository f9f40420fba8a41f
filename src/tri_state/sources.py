"""Source collaborators supplying the reading a widget classifies."""

from __future__ import annotations

import logging
import math
from enum import Enum
from threading import Lock
from typing import Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class SourceCategory(str, Enum):
    SWITCH = "switch"
    TIMER = "timer"
    TELEMETRY_SENSOR = "telemetry_sensor"
    LUA = "lua"
    OTHER = "other"


# Categories whose value the host lets the user reset from the widget menu.
RESETTABLE_CATEGORIES = frozenset(
    {SourceCategory.TIMER, SourceCategory.TELEMETRY_SENSOR, SourceCategory.LUA}
)


@runtime_checkable
class Source(Protocol):
    """The minimal view of a host source used by the widget.

    Hosts may additionally provide ``minimum()``, ``maximum()``,
    ``category()`` and ``reset()``; they are looked up with ``getattr``.
    """

    def exists(self) -> bool: ...

    def value(self) -> float: ...

    def display_text(self) -> str: ...

    def name(self) -> str: ...


class StaticSource:
    """An in-memory source whose value is set by the caller."""

    def __init__(
        self,
        name: str,
        value: float = 0.0,
        *,
        unit: str = "",
        decimals: int = 1,
        minimum: float | None = None,
        maximum: float | None = None,
        category: SourceCategory = SourceCategory.OTHER,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Source name must be a non-empty string")
        self._name = name.strip()
        self._initial = float(value)
        self._value = float(value)
        self._unit = unit
        self._decimals = max(0, int(decimals))
        self._minimum = minimum
        self._maximum = maximum
        self._category = SourceCategory(category)
        self._present = True
        self._lock = Lock()

    def exists(self) -> bool:
        return self._present

    def value(self) -> float:
        with self._lock:
            return self._value

    def set_value(self, value: float) -> float:
        number = float(value)
        if not math.isfinite(number):
            raise ValueError("Source values must be finite")
        with self._lock:
            self._value = number
        return number

    def display_text(self) -> str:
        return f"{self.value():.{self._decimals}f}{self._unit}"

    def name(self) -> str:
        return self._name

    def category(self) -> SourceCategory:
        return self._category

    def minimum(self) -> float | None:
        return self._minimum

    def maximum(self) -> float | None:
        return self._maximum

    def reset(self) -> None:
        with self._lock:
            self._value = self._initial
        logger.info("Source %s reset to %s", self._name, self._initial)

    def detach(self) -> None:
        """Mark the source as gone, as the host does when hardware disappears."""

        self._present = False

    def to_dict(self) -> dict[str, object | None]:
        return {
            "name": self._name,
            "value": self.value(),
            "text": self.display_text(),
            "category": self._category.value,
            "minimum": self._minimum,
            "maximum": self._maximum,
            "exists": self._present,
        }


def source_exists(source: object | None) -> bool:
    """Return True when *source* is bound and reports itself as present."""

    if source is None:
        return False
    exists = getattr(source, "exists", None)
    if not callable(exists):
        return False
    return bool(exists())


class SourceRegistry:
    """Resolve the opaque source references stored in a widget configuration."""

    def __init__(self, sources: Iterable[Source] = ()) -> None:
        self._sources: dict[str, Source] = {}
        for source in sources:
            self.register(source)

    def register(self, source: Source) -> Source:
        self._sources[source.name()] = source
        return source

    def names(self) -> list[str]:
        return list(self._sources)

    def get(self, name: str) -> Source | None:
        return self._sources.get(name)

    def resolve(self, ref: object | None) -> Source | None:
        if ref is None:
            return None
        if isinstance(ref, Source):
            return ref
        if isinstance(ref, str):
            return self._sources.get(ref)
        return None

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __iter__(self):
        return iter(self._sources.values())


__all__ = [
    "RESETTABLE_CATEGORIES",
    "Source",
    "SourceCategory",
    "SourceRegistry",
    "StaticSource",
    "source_exists",
]
