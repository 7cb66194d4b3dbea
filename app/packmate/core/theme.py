"""Theme management for the packmate CLI.

Colors come from the bundled data/theme.toml, optionally overridden per
color by theme.toml in the packmate config directory.
"""

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from packmate.core.paths import get_config_dir

logger = logging.getLogger(__name__)

THEME_FILE = "theme.toml"


class ThemeColors(BaseModel):
    """Color configuration for the packmate CLI.

    All colors must be hex codes (#RRGGBB or #RGB).
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

    # Verification status
    verified: str = "#03b971"
    failed: str = "#f53263"
    pending: str = "#b2bec3"
    unverifiable: str = "#0e8ac8"
    flagged: str = "#faf870"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        digits = color[1:]
        if not color.startswith("#") or len(digits) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(digits, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def get_user_theme_path() -> Path:
    """Get the user theme path (~/.config/packmate/theme.toml)."""
    return get_config_dir() / THEME_FILE


def _read_colors(text: str, source: str) -> dict[str, str]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme %s: %s", source, e)
        return {}
    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Invalid 'colors' section in %s", source)
        return {}
    return {k: v for k, v in colors.items() if isinstance(v, str)}


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load theme colors, merging user overrides over the bundled theme.

    Args:
        user_path: Override file. Defaults to get_user_theme_path().

    Returns:
        Validated colors. Falls back to the built-in defaults if the merged
        colors do not validate.
    """
    bundled = resources.files("packmate.data").joinpath(THEME_FILE).read_text(encoding="utf-8")
    colors = _read_colors(bundled, "bundled theme")

    user_path = user_path or get_user_theme_path()
    try:
        user_text = user_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        user_text = None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", user_path, e)
        user_text = None
    if user_text is not None:
        logger.debug("Loaded user theme overrides from %s", user_path)
        colors.update(_read_colors(user_text, str(user_path)))

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Convert ThemeColors to a Rich Theme."""
    if colors is None:
        colors = load_theme()

    styles: dict[str, str] = dict(colors.model_dump())
    styles.update(
        {
            "error": f"bold {colors.error}",
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
            "app.name": f"bold {colors.text}",
            "status.verified": colors.verified,
            "status.failed": f"bold {colors.failed}",
            "status.pending": colors.pending,
            "status.unverifiable": colors.unverifiable,
        }
    )
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, loading and caching it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
