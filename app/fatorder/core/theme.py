"""Console colors for fatorder.

The bundled ``data/theme.toml`` provides every color; a user file at
``~/.config/fatorder/theme.toml`` may override any subset of them. Risk
tiers get their own styles so the plan table shows at a glance how
dangerous a run is.
"""

import logging
import tomllib
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from fatorder.core.paths import get_config_dir
from fatorder.models.volume import RiskTier

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Style name used to render each risk tier
RISK_TIER_STYLES: dict[RiskTier, str] = {
    RiskTier.SAFE_REMOVABLE: "risk_safe",
    RiskTier.UNEXPECTED_FILESYSTEM: "risk_elevated",
    RiskTier.FIXED_NON_SYSTEM: "risk_elevated",
    RiskTier.SYSTEM_LIKE: "risk_critical",
    RiskTier.DISALLOWED: "risk_critical",
}


class ThemeColors(BaseModel):
    """Hex colors (#RGB or #RRGGBB) for every console style."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    risk_safe: str = "#03b971"
    risk_elevated: str = "#faf870"
    risk_critical: str = "#d44ebc"

    progress_bar: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        digits = color[1:]
        if len(digits) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        if not set(digits) <= _HEX_DIGITS:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg)
        return color


def get_user_theme_path() -> Path:
    """Path of the optional user override file."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped in ``fatorder.data``."""
    return resources.files("fatorder.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the string entries of the ``[colors]`` table of a TOML file.

    Returns:
        Color name to value, or None if the file is missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    table = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {key: value for key, value in table.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge the user overrides over the bundled colors.

    An invalid merged result falls back to the built-in defaults.
    """
    colors = _load_toml_colors(Path(get_bundled_theme_path()))
    if colors is None:
        logger.error("Bundled theme is missing; the installation may be broken")
        colors = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying theme overrides from %s", user_path)
        colors.update(overrides)

    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme the consoles are created with."""
    c = colors or load_theme()
    return Theme(
        {
            "text": c.text,
            "muted": c.muted,
            "dim": c.muted,
            "header": c.header,
            "bold_header": f"bold {c.header}",
            "border": c.border,
            "success": c.success,
            "warning": c.warning,
            "error": f"bold {c.error}",
            "info": c.info,
            "risk_safe": c.risk_safe,
            "risk_elevated": f"bold {c.risk_elevated}",
            "risk_critical": f"bold {c.risk_critical}",
            "bar.complete": c.progress_bar,
            "bar.finished": c.success,
        }
    )


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Rich theme, loaded once per process."""
    return get_rich_theme()


def reload_theme() -> Theme:
    """Drop the cached theme and load it again."""
    get_theme.cache_clear()
    return get_theme()


def risk_style(tier: RiskTier) -> str:
    """Name of the style a risk tier is rendered with."""
    return RISK_TIER_STYLES[tier]
