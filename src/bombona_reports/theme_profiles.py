"""Theme profile schema and resolver."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from reportlab.lib import colors

from .config import Theme

# Profile fields that hold fonts; every other field is a color.
_FONT_FIELDS = frozenset({"font_regular", "font_bold", "font_icon"})


@dataclass(frozen=True)
class ThemeProfile:
    """Serializable palette and fonts.

    Each field maps to the upper-case attribute of the same name on the
    runtime theme class, e.g. ``primary_light`` -> ``Theme.PRIMARY_LIGHT``.
    """

    primary: str = "#4CAF50"
    primary_dark: str = "#388E3C"
    primary_light: str = "#81C784"
    primary_ultra_light: str = "#C8E6C9"
    accent: str = "#43A047"
    highlight: str = "#FFC107"
    white: str = "#FFFFFF"
    shadow: str = "#000000"
    background: str = "#FAFAFA"
    background_card: str = "#FFFFFF"
    text_primary: str = "#212121"
    text_secondary: str = "#616161"
    text_muted: str = "#9E9E9E"
    border: str = "#E0E0E0"
    border_light: str = "#EEEEEE"
    success: str = "#4CAF50"
    warning: str = "#FF9800"
    error: str = "#F44336"
    info: str = "#2196F3"
    inactive: str = "#BDBDBD"
    font_regular: str = Theme.FONT_REGULAR
    font_bold: str = Theme.FONT_BOLD
    font_icon: str = Theme.FONT_ICON

    @classmethod
    def keys(cls) -> frozenset[str]:
        return frozenset(item.name for item in fields(cls))

    def with_overrides(self, overrides: Mapping[str, Any]) -> ThemeProfile:
        """Return a copy with `overrides` applied.

        Every override is converted up front, so a bad value is reported
        against its key before any report is drawn.
        """
        unknown = sorted(set(overrides) - self.keys())
        if unknown:
            msg = f"unknown theme key(s): {', '.join(unknown)}."
            raise ValueError(msg)
        for key, raw_value in overrides.items():
            theme_value(key, raw_value)
        return replace(self, **overrides)

    def to_theme_class(self) -> type:
        """Return a runtime Theme-like class with parsed color objects."""
        attributes = {
            item.name.upper(): theme_value(item.name, getattr(self, item.name))
            for item in fields(self)
        }
        return type("Theme", (), attributes)


THEME_PROFILES: dict[str, ThemeProfile] = {
    "default": ThemeProfile(),
    "corporate-blue": ThemeProfile(
        primary="#3B82F6",
        primary_dark="#1D4ED8",
        primary_light="#93C5FD",
        primary_ultra_light="#DBEAFE",
        accent="#8B5CF6",
        highlight="#F59E0B",
        background="#F9FAFB",
        text_primary="#1F2937",
        success="#10B981",
        warning="#F59E0B",
        error="#EF4444",
    ),
}


def theme_value(key: str, raw_value: Any) -> Any:
    """Convert one profile value: font names pass through, colors are parsed."""
    kind = "font name" if key in _FONT_FIELDS else "color"
    if not isinstance(raw_value, str) or not raw_value.strip():
        msg = f"theme key '{key}' must be a non-empty {kind} string."
        raise ValueError(msg)
    if key in _FONT_FIELDS:
        return raw_value
    try:
        return colors.HexColor(raw_value) if raw_value.startswith("#") else colors.toColor(raw_value)
    except Exception as exc:  # noqa: BLE001
        msg = f"invalid color value '{raw_value}' for theme key '{key}'."
        raise ValueError(msg) from exc


def read_theme_overrides(path: Path) -> dict[str, Any]:
    """Load a JSON object of theme overrides from `path`."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        msg = f"theme file '{path}' does not exist."
        raise ValueError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"theme file '{path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc
    if not isinstance(payload, dict):
        msg = f"theme file '{path}' must contain a JSON object."
        raise ValueError(msg)
    return payload


def resolve_theme(
    *,
    profile: str = "default",
    theme_file: str | Path | None = None,
) -> type:
    """Resolve one built-in profile plus optional file overrides into a theme class."""
    try:
        base = THEME_PROFILES[profile]
    except KeyError:
        msg = f"unknown theme profile '{profile}'. Valid profiles: {', '.join(sorted(THEME_PROFILES))}."
        raise ValueError(msg) from None
    if theme_file is not None:
        base = base.with_overrides(read_theme_overrides(Path(theme_file)))
    return base.to_theme_class()
