"""Path normalization and XDG-compliant path management for treepack.

This module provides the canonicalization helpers used by every selection
component (separator normalization, slash trimming, relative POSIX paths)
and the standardized configuration location.

XDG defaults:
- Config: ~/.config/treepack/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "treepack"


def normalize_separators(path: str) -> str:
    """Convert backslash separators to forward slashes.

    Args:
        path: Path string in any separator convention.

    Returns:
        The same path using ``/`` exclusively.
    """
    return path.replace("\\", "/")


def trim_slashes(path: str, *, keep_trailing: bool = False) -> str:
    """Collapse redundant slashes and strip leading ``./`` and ``/``.

    Repeated separators (``a//b``) are collapsed to one. A single trailing
    slash is kept only when ``keep_trailing`` is set and the input had one.

    Args:
        path: Path string to clean.
        keep_trailing: Preserve one trailing ``/`` if present in the input.

    Returns:
        Canonical relative path string (possibly empty).
    """
    normalized = normalize_separators(path)
    had_trailing = normalized.endswith("/")

    parts = [part for part in normalized.split("/") if part]
    while parts and parts[0] == ".":
        parts.pop(0)

    result = "/".join(parts)
    if result and keep_trailing and had_trailing:
        result += "/"
    return result


def relative_posix(path: Path, root: Path, *, is_dir: bool) -> str:
    """Build the relative path of ``path`` below ``root``.

    Directory paths carry a trailing ``/``; file paths never do. Names are
    passed through unchanged (no transcoding).

    Args:
        path: Absolute or root-anchored filesystem path.
        root: Traversal root.
        is_dir: Whether the entry is a directory.

    Returns:
        ``/``-separated relative path.
    """
    relative = path.relative_to(root).as_posix()
    return f"{relative}/" if is_dir else relative


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/treepack/ (or XDG_CONFIG_HOME/treepack/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/treepack/config.toml.
    """
    return get_config_dir() / "config.toml"


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
