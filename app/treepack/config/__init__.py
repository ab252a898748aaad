"""Configuration models and file I/O for treepack."""

from treepack.config.models import SelectionDefaults, SelectionProfile, TreepackConfig
from treepack.config.store import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    ProfileNotFoundError,
    config_exists,
    default_config,
    get_profile,
    load_config,
    load_config_or_default,
    save_config,
)

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "ProfileNotFoundError",
    "SelectionDefaults",
    "SelectionProfile",
    "TreepackConfig",
    "config_exists",
    "default_config",
    "get_profile",
    "load_config",
    "load_config_or_default",
    "save_config",
]
