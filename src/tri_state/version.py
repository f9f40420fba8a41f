"""Version information shared by the widget and its persisted schema."""

from __future__ import annotations

APP_VERSION = "2.0.1"


def version_to_number(version: str) -> int:
    """Return *version* (``major.minor.patch``) as ``major*10000+minor*100+patch``."""

    parts = str(version).strip().split(".")
    if not parts or len(parts) > 3:
        raise ValueError(f"Invalid version string: {version!r}")
    try:
        numbers = [int(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"Invalid version string: {version!r}") from exc
    while len(numbers) < 3:
        numbers.append(0)
    major, minor, patch = numbers
    if minor > 99 or patch > 99 or min(numbers) < 0:
        raise ValueError(f"Version components out of range: {version!r}")
    return major * 10000 + minor * 100 + patch


SCHEMA_VERSION = version_to_number(APP_VERSION)


__all__ = ["APP_VERSION", "SCHEMA_VERSION", "version_to_number"]
