"""Threshold classification of a reading into the three display states."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum


class State(IntEnum):
    """Ordered display states, DOWN < MIDDLE < UP."""

    DOWN = 1
    MIDDLE = 2
    UP = 3

    @property
    def title_key(self) -> str:
        return _STATE_TITLE_KEYS[self]


_STATE_TITLE_KEYS = {
    State.DOWN: "StateDown",
    State.MIDDLE: "StateMiddle",
    State.UP: "StateUp",
}


class InvalidStateError(AssertionError):
    """Raised when classification or painting ends up outside :class:`State`."""


def classify(value: float, threshold_down: float, threshold_up: float) -> State:
    """Classify *value* against the two thresholds.

    The lower threshold is checked first. When ``threshold_down >= threshold_up``
    the MIDDLE state can never be reached; the thresholds are used as given.
    """

    if value < threshold_down:
        return State.DOWN
    if value < threshold_up:
        return State.MIDDLE
    return State.UP


def ensure_state(value: object) -> State:
    """Return *value* as a :class:`State` or raise :class:`InvalidStateError`."""

    if isinstance(value, State):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStateError(f"Invalid widget state: {value!r}")
    try:
        return State(value)
    except ValueError as exc:
        raise InvalidStateError(f"Invalid widget state: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Thresholds:
    """The configurable pair of boundaries between DOWN, MIDDLE and UP."""

    down: float = -50.0
    up: float = 50.0

    def __post_init__(self) -> None:
        try:
            down = float(self.down)
            up = float(self.up)
        except (TypeError, ValueError) as exc:
            raise ValueError("Thresholds must be numeric") from exc
        if not math.isfinite(down) or not math.isfinite(up):
            raise ValueError("Thresholds must be finite values")
        object.__setattr__(self, "down", down)
        object.__setattr__(self, "up", up)

    def classify(self, value: float) -> State:
        return classify(value, self.down, self.up)

    def to_dict(self) -> dict[str, float]:
        return {"down": float(self.down), "up": float(self.up)}


DEFAULT_THRESHOLDS = Thresholds()


def format_number(value: float) -> str:
    """Format *value* without losing digits: integral values drop the ``.0``."""

    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def describe_state_range(state: State, thresholds: Thresholds) -> str:
    """Return the comparison that selects *state*, e.g. ``">= -50 & < 50"``."""

    state = ensure_state(state)
    if state is State.DOWN:
        return f"< {format_number(thresholds.down)}"
    if state is State.MIDDLE:
        return f">= {format_number(thresholds.down)} & < {format_number(thresholds.up)}"
    return f">= {format_number(thresholds.up)}"


__all__ = [
    "DEFAULT_THRESHOLDS",
    "InvalidStateError",
    "State",
    "Thresholds",
    "classify",
    "describe_state_range",
    "ensure_state",
    "format_number",
]
