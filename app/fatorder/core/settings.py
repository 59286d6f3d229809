"""Sort settings and per-run configuration.

Persistent defaults live in ~/.config/fatorder/config.toml and are
modelled by :class:`SorterSettings`. A single run is described by a
frozen :class:`RunConfig`, built once from the settings plus command
line overrides and handed to the pipeline.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fatorder.core.paths import ensure_config_dir, get_default_staging_root, get_settings_path
from fatorder.models.volume import SortScope

logger = logging.getLogger(__name__)


class SorterSettings(BaseModel):
    """Persistent defaults for ``fatorder sort``.

    Attributes:
        staging_root: Directory under which the staging mirror is created.
        scope: Default sort scope.
        require_confirmation: Ask for the final "Y" before the backup starts.
        verify_before_wipe: Compare the staged mirror with the target before wiping.
    """

    model_config = ConfigDict(extra="forbid")

    staging_root: Annotated[
        Path,
        Field(
            default_factory=get_default_staging_root,
            description="Directory under which the staging mirror is created",
        ),
    ]
    scope: Annotated[
        SortScope,
        Field(description="Depth at which alphabetical order is enforced"),
    ] = SortScope.ALL
    require_confirmation: Annotated[
        bool,
        Field(description="Ask for a final go-ahead before the backup starts"),
    ] = True
    verify_before_wipe: Annotated[
        bool,
        Field(description="Verify the staged mirror before wiping the target"),
    ] = True


class RunConfig(BaseModel):
    """Immutable configuration of one pipeline run.

    Attributes:
        target: Root of the volume being sorted.
        staging_root: Directory under which the staging mirror is created.
        scope: Sort scope selecting the restore strategy.
        require_confirmation: Ask for the final "Y" before the backup starts.
        verify_before_wipe: Compare the staged mirror with the target before wiping.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: Path
    staging_root: Path
    scope: SortScope = SortScope.ALL
    require_confirmation: bool = True
    verify_before_wipe: bool = True

    @classmethod
    def from_settings(
        cls,
        settings: SorterSettings,
        target: Path,
        *,
        staging_root: Path | None = None,
        scope: SortScope | None = None,
        require_confirmation: bool | None = None,
        verify_before_wipe: bool | None = None,
    ) -> "RunConfig":
        """Merge settings with explicit overrides.

        Args:
            settings: Loaded settings (defaults).
            target: Target path of the run.
            staging_root: Override for the staging root.
            scope: Override for the sort scope.
            require_confirmation: Override for the final confirmation flag.
            verify_before_wipe: Override for the verification flag.

        Returns:
            RunConfig for a single run.
        """
        return cls(
            target=target,
            staging_root=staging_root if staging_root is not None else settings.staging_root,
            scope=scope if scope is not None else settings.scope,
            require_confirmation=(
                require_confirmation
                if require_confirmation is not None
                else settings.require_confirmation
            ),
            verify_before_wipe=(
                verify_before_wipe
                if verify_before_wipe is not None
                else settings.verify_before_wipe
            ),
        )


class ConfigError(Exception):
    """Base exception for settings errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the settings file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> SorterSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default settings path.

    Returns:
        Validated SorterSettings object.

    Raises:
        ConfigNotFoundError: If the settings file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise ConfigNotFoundError(f"Settings file not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings: {e}") from e

    try:
        return SorterSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid settings content: {e}") from e


def load_settings_or_default(path: Path | None = None) -> SorterSettings:
    """Load settings, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_settings(path)
    except ConfigNotFoundError:
        logger.debug("No settings file, using defaults")
        return SorterSettings()


def save_settings(settings: SorterSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The SorterSettings object to save.
        path: Path to save the settings. If None, uses the default settings path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    try:
        if path is None:
            settings_path = ensure_config_dir() / get_settings_path().name
        else:
            settings_path = path
            settings_path.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, RuntimeError) as e:
        raise ConfigError(f"Failed to write settings: {e}") from e

    data = settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write settings: {e}") from e

    return settings_path


def settings_to_dict(settings: SorterSettings) -> dict[str, object]:
    """Convert SorterSettings to a dictionary for TOML serialization."""
    return {
        "staging_root": str(settings.staging_root),
        "scope": settings.scope.value,
        "require_confirmation": settings.require_confirmation,
        "verify_before_wipe": settings.verify_before_wipe,
    }
