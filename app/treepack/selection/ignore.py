"""Exact-path ignore filtering with subtree pruning.

IgnoreFilter decorates any EntrySource and drops entries whose relative
path is listed in an ignore set. Ignoring a directory also drops every
entry nested beneath it.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from treepack.core.paths import trim_slashes
from treepack.selection.models import FileSystemEntry
from treepack.selection.walker import EntrySource, PrunePredicate

logger = logging.getLogger(__name__)


def normalize_ignore_set(ignore: Iterable[str]) -> frozenset[str]:
    """Canonicalize ignore strings.

    Separators are normalized and leading ``./`` or ``/`` removed. A
    trailing ``/`` is preserved so it can still restrict a match to
    directories. Empty strings are dropped.

    Args:
        ignore: Raw relative paths to ignore.

    Returns:
        Frozen set of normalized relative paths.
    """
    normalized = (trim_slashes(item, keep_trailing=True) for item in ignore)
    return frozenset(item for item in normalized if item)


class IgnoreFilter(EntrySource):
    """Suppresses ignored entries and the subtrees of ignored directories.

    Matching is exact string equality against the full relative path; it
    is neither a glob nor a regex. A directory matches an ignore string
    with or without its trailing ``/``. A file only matches an ignore
    string without one.

    Args:
        source: Entry source to filter (a walker or another filter).
        ignore: Relative paths to suppress.
    """

    def __init__(self, source: EntrySource, ignore: Iterable[str]) -> None:
        self._source = source
        self._ignore = normalize_ignore_set(ignore)

    @property
    def root(self) -> Path:
        return self._source.root

    @property
    def recursive(self) -> bool:
        return self._source.recursive

    @property
    def ignore(self) -> frozenset[str]:
        """Normalized ignore set."""
        return self._ignore

    def entries(self, prune: PrunePredicate | None = None) -> Iterator[FileSystemEntry]:
        pruned: set[str] = set()

        def skip_subtree(entry: FileSystemEntry) -> bool:
            return self._is_ignored(entry) or (prune is not None and prune(entry))

        # Sources that still list a pruned directory are filtered through `pruned`
        for entry in self._source.entries(skip_subtree):
            if pruned and self._under_pruned(entry.relative_path, pruned):
                continue

            if self._is_ignored(entry):
                logger.debug("Ignoring %s", entry.relative_path)
                if entry.is_directory:
                    pruned.add(entry.relative_path)
                continue

            yield entry

    def _is_ignored(self, entry: FileSystemEntry) -> bool:
        if entry.relative_path in self._ignore:
            return True
        return entry.is_directory and entry.relative_path.rstrip("/") in self._ignore

    @staticmethod
    def _under_pruned(relative_path: str, pruned: set[str]) -> bool:
        """Check whether any ancestor directory of the path was pruned."""
        segments = relative_path.rstrip("/").split("/")[:-1]
        prefix = ""
        for segment in segments:
            prefix += segment + "/"
            if prefix in pruned:
                return True
        return False
