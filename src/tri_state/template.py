"""Placeholder expansion for user-authored title and state texts.

Supported placeholders::

    _v     source value without decimals        -> "8"
    _<N>v  source value with N decimals (_3v)   -> "7.532"
    _t     source text as reported by the host  -> "7.5V"
    _n     source name                          -> "Battery"
    _b     line break (see :func:`split_lines`)
    __     literal underscore

The expander is a single left-to-right scan. Substituted values are never
scanned again, so a source name containing ``_v`` is emitted verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass

_MARK = "_"
_DIGITS = frozenset("0123456789")

PLACEHOLDERS: tuple[tuple[str, str], ...] = (
    ("PlaceholderName", "_n"),
    ("PlaceholderText", "_t"),
    ("PlaceholderValue", "_v"),
    ("PlaceholderFloat", "_<N>v"),
    ("PlaceholderBreak", "_b"),
    ("PlaceholderSpecial", "__"),
)


@dataclass(frozen=True, slots=True)
class TemplateContext:
    """Live values injected into templates."""

    value: float = 0.0
    text: str = ""
    name: str = ""


def format_value(value: float, decimals: int = 0) -> str:
    """Format *value* as fixed point with *decimals* places (``%.Nf``)."""

    return f"{float(value):.{int(decimals)}f}"


def expand(template: str | None, ctx: TemplateContext) -> str:
    """Return *template* with every known placeholder replaced from *ctx*."""

    if not template:
        return ""

    out: list[str] = []
    length = len(template)
    index = 0
    while index < length:
        char = template[index]
        if char != _MARK or index + 1 >= length:
            out.append(char)
            index += 1
            continue

        follower = template[index + 1]
        if follower == _MARK:
            out.append(_MARK)
            index += 2
        elif follower in _DIGITS:
            end = index + 1
            while end < length and template[end] in _DIGITS:
                end += 1
            if end < length and template[end] == "v":
                out.append(format_value(ctx.value, int(template[index + 1 : end])))
                index = end + 1
            else:
                # no closing "v": keep the underscore, the digits follow as text
                out.append(char)
                index += 1
        elif follower == "v":
            out.append(format_value(ctx.value))
            index += 2
        elif follower == "t":
            out.append(str(ctx.text))
            index += 2
        elif follower == "n":
            out.append(str(ctx.name))
            index += 2
        else:
            out.append(char)
            index += 1
    return "".join(out)


def split_lines(template: str | None) -> list[str]:
    """Split *template* into display lines on ``_b`` and newlines.

    Escaped underscores (``__``) are kept untouched so that ``__b`` stays a
    literal ``_b`` once the line is expanded.
    """

    if not template:
        return []

    lines: list[str] = []
    current: list[str] = []
    length = len(template)
    index = 0
    while index < length:
        char = template[index]
        if char == _MARK and index + 1 < length:
            follower = template[index + 1]
            if follower == _MARK:
                current.append(_MARK * 2)
                index += 2
                continue
            if follower == "b":
                lines.append("".join(current))
                current = []
                index += 2
                continue
        if char == "\n":
            lines.append("".join(current).rstrip("\r"))
            current = []
            index += 1
            continue
        current.append(char)
        index += 1
    lines.append("".join(current))
    return lines


__all__ = ["PLACEHOLDERS", "TemplateContext", "expand", "format_value", "split_lines"]
