"""Default display strings and the translation lookup used by widgets."""

from __future__ import annotations

from typing import Mapping, Protocol


class Localizer(Protocol):
    def translate(self, key: str) -> str: ...


ENGLISH: dict[str, str] = {
    "WidgetName": "3-State Display",
    "Title": "Title",
    "Text": "Text",
    "BackgroundColor": "Background color",
    "TextColor": "Text color",
    "StateDown": "Down",
    "StateMiddle": "Middle",
    "StateUp": "Up",
    "StateUnknown": "Unknown",
    "SourceMissed": "Source missing",
    "SourceReset": "Reset %s",
    "PlaceholderInfo": "Placeholders",
    "PlaceholderName": "Source name",
    "PlaceholderText": "Source text",
    "PlaceholderValue": "Value (integer)",
    "PlaceholderFloat": "Value with N decimals",
    "PlaceholderBreak": "Line break",
    "PlaceholderSpecial": "Underscore",
}

GERMAN: dict[str, str] = {
    "WidgetName": "3-Status-Anzeige",
    "Title": "Titel",
    "Text": "Text",
    "BackgroundColor": "Hintergrundfarbe",
    "TextColor": "Textfarbe",
    "StateDown": "Unten",
    "StateMiddle": "Mitte",
    "StateUp": "Oben",
    "StateUnknown": "Unbekannt",
    "SourceMissed": "Quelle fehlt",
    "SourceReset": "%s zurücksetzen",
}

TABLES: dict[str, Mapping[str, str]] = {"en": ENGLISH, "de": GERMAN}


class StringTable:
    """Look up strings for the active locale; unknown keys fall back to English."""

    def __init__(self, locale: str = "en", tables: Mapping[str, Mapping[str, str]] = TABLES) -> None:
        self._tables = tables
        self.locale = locale

    @property
    def locale(self) -> str:
        return self._locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._locale = value if value in self._tables else "en"

    def translate(self, key: str) -> str:
        table = self._tables.get(self._locale, {})
        if key in table:
            return table[key]
        return self._tables.get("en", {}).get(key, key)


__all__ = ["ENGLISH", "GERMAN", "Localizer", "StringTable", "TABLES"]
