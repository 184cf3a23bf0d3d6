"""Theme management for savectl CLI.

The ``theme`` setting selects one of the bundled palettes ("dark" or
"light"). A user TOML file can override individual colors of either palette.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from savectl.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

DEFAULT_THEME = "dark"


class ThemeColors(BaseModel):
    """Color configuration for savectl CLI.

    All colors must be valid hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Backup table
    item: str = "#69B9A1"
    snapshot: str = "#0e8ac8"
    size: str = "#0ec1c8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are valid hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        color_part = color[1:]
        if len(color_part) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(color_part, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


PALETTES: dict[str, ThemeColors] = {
    "dark": ThemeColors(),
    "light": ThemeColors(
        text="#1e272e",
        muted="#636e72",
        header="#226666",
        border="#b2bec3",
        success="#027a4b",
        warning="#b7791f",
        error="#c0392b",
        info="#0b7f85",
        item="#226666",
        snapshot="#0e5c8a",
        size="#0b7f85",
    ),
}


def _load_toml_colors(path: Path, name: str) -> dict[str, str] | None:
    """Load the override section for one palette from a TOML file.

    The file may contain a shared ``[colors]`` table and per-palette
    ``[colors.dark]`` / ``[colors.light]`` tables; the latter win.

    Args:
        path: Path to the TOML file.
        name: Palette name.

    Returns:
        Dictionary of color name to hex value, or None if loading failed.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse TOML file %s: %s", path, e)
        return None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None

    section = cast(dict[str, object], colors_raw)
    result: dict[str, str] = {k: v for k, v in section.items() if isinstance(v, str)}
    palette_raw = section.get(name)
    if isinstance(palette_raw, dict):
        for key, value in cast(dict[str, object], palette_raw).items():
            if isinstance(value, str):
                result[key] = value
    return result


def load_theme(name: str = DEFAULT_THEME, user_path: Path | None = None) -> ThemeColors:
    """Load a palette with user override support.

    Unknown palette names fall back to the default palette.

    Args:
        name: Palette name ("dark" or "light").
        user_path: Override file (default: <config dir>/theme.toml).

    Returns:
        ThemeColors instance with merged configuration.
    """
    base = PALETTES.get(name)
    if base is None:
        logger.warning("Unknown theme '%s', using '%s'", name, DEFAULT_THEME)
        base = PALETTES[DEFAULT_THEME]

    user_colors = _load_toml_colors(user_path or get_user_theme_path(), name)
    if not user_colors:
        return base

    try:
        return ThemeColors(**{**base.model_dump(), **user_colors})
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return base


def get_rich_theme(colors: ThemeColors) -> Theme:
    """Convert ThemeColors to a Rich Theme.

    Args:
        colors: ThemeColors instance to convert.

    Returns:
        Rich Theme instance configured with the color scheme.
    """
    styles: dict[str, str] = {
        "text": colors.text,
        "muted": colors.muted,
        "header": colors.header,
        "border": colors.border,
        "success": colors.success,
        "warning": colors.warning,
        "error": f"bold {colors.error}",
        "info": colors.info,
        "item": f"bold {colors.item}",
        "snapshot": colors.snapshot,
        "size": colors.size,
        "bold_header": f"bold {colors.header}",
        "dim": colors.muted,
    }
    return Theme(styles)


_cached_themes: dict[str, Theme] = {}


def get_theme(name: str = DEFAULT_THEME) -> Theme:
    """Get the Rich theme for a palette, loading and caching it if necessary.

    Returns:
        Cached Rich Theme instance.
    """
    if name not in _cached_themes:
        _cached_themes[name] = get_rich_theme(load_theme(name))
    return _cached_themes[name]


def reload_theme(name: str = DEFAULT_THEME) -> Theme:
    """Force reload a palette from the override file.

    Returns:
        Newly loaded Rich Theme instance.
    """
    _cached_themes.pop(name, None)
    return get_theme(name)
