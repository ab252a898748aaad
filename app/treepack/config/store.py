"""Configuration file I/O operations.

This module provides functions for loading and saving config.toml with
validation through the Pydantic models in treepack.config.models.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from treepack.config.models import SelectionProfile, TreepackConfig
from treepack.core.paths import ensure_config_dir, get_config_path


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when configuration content is invalid."""


class ProfileNotFoundError(ConfigError):
    """Raised when a named profile does not exist."""


def default_config() -> TreepackConfig:
    """Return a configuration populated with defaults and no profiles."""
    return TreepackConfig()


def config_exists(path: Path | None = None) -> bool:
    """Check if a configuration file exists.

    Args:
        path: Path to check. If None, uses the default config path.

    Returns:
        True if the file exists.
    """
    return (path or get_config_path()).exists()


def load_config(path: Path | None = None) -> TreepackConfig:
    """Load and validate a configuration file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated TreepackConfig.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return TreepackConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> TreepackConfig:
    """Load the configuration, falling back to defaults if none exists.

    Raises:
        ConfigParseError: If an existing file has invalid TOML syntax.
        ConfigValidationError: If an existing file has invalid content.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return default_config()


def get_profile(config: TreepackConfig, name: str) -> SelectionProfile:
    """Look up a named profile.

    Raises:
        ProfileNotFoundError: If no profile with that name exists.
    """
    try:
        return config.profiles[name]
    except KeyError:
        available = ", ".join(sorted(config.profiles)) or "none"
        msg = f"Profile '{name}' not found (available: {available})"
        raise ProfileNotFoundError(msg) from None


def save_config(config: TreepackConfig, path: Path | None = None) -> Path:
    """Save a configuration to a TOML file.

    The file is written atomically through a temporary file in the same
    directory followed by os.replace(). The temporary file is removed on
    failure.

    Args:
        config: Configuration to save.
        path: Destination. If None, uses the default config path.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    if path is None:
        try:
            ensure_config_dir()
        except RuntimeError as e:
            raise ConfigError(str(e)) from e
    config_path = path or get_config_path()
    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: TreepackConfig) -> dict[str, Any]:
    """Convert a config to a TOML-serializable dictionary.

    TOML has no null, so unset optional values are omitted.
    """
    return config.model_dump(mode="json", exclude_none=True)
