"""Local-name construction for container entries.

Maps an entry's relative path to the name it is stored under inside a
container by prepending an optional prefix.
"""

from treepack.core.paths import trim_slashes

# Prefix values meaning "store at the container root"
_ROOT_PREFIXES = frozenset({"", "/", "."})


def normalize_prefix(prefix: str | None) -> str:
    """Canonicalize a local-path prefix.

    Separators are normalized, leading and duplicate slashes removed, and
    exactly one trailing slash appended. ``""``, ``"/"`` and ``"."`` mean
    no prefix.

    Args:
        prefix: Raw prefix as supplied by the caller.

    Returns:
        Empty string, or the prefix ending in a single ``/``.
    """
    if prefix is None or prefix in _ROOT_PREFIXES:
        return ""
    trimmed = trim_slashes(prefix)
    return f"{trimmed}/" if trimmed else ""


def map_local_name(prefix: str | None, relative_path: str) -> str:
    """Combine a prefix and a relative path into a container entry name.

    Directory paths keep their trailing ``/``. Names are passed through
    byte-for-byte; no transcoding is performed.

    Args:
        prefix: Local-path prefix (normalized internally).
        relative_path: Entry path relative to the traversal root.

    Returns:
        Final local name.
    """
    return normalize_prefix(prefix) + relative_path


class LocalPathMapper:
    """Maps relative paths under a fixed, pre-normalized prefix.

    Args:
        prefix: Local-path prefix applied to every mapped entry.
    """

    def __init__(self, prefix: str | None = "") -> None:
        self._prefix = normalize_prefix(prefix)

    @property
    def prefix(self) -> str:
        """Normalized prefix (empty or ending in ``/``)."""
        return self._prefix

    def map(self, relative_path: str) -> str:
        """Return the local name for ``relative_path``."""
        return self._prefix + relative_path
