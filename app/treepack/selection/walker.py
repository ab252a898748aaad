"""Directory walkers producing lazy entry sequences.

This module defines the EntrySource interface that every entry producer
implements, and the DirectoryWalker that traverses a directory either
flat (direct children only) or recursively (every descendant).
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from pathlib import Path

from treepack.core.paths import relative_posix
from treepack.selection.errors import SourceReadError
from treepack.selection.models import ErrorPolicy, FileSystemEntry

logger = logging.getLogger(__name__)

# Returns True for directories whose contents must not be listed
PrunePredicate = Callable[[FileSystemEntry], bool]


class EntrySource(ABC):
    """Abstract base class for anything that yields filesystem entries.

    Walkers and filters both implement this interface so the selection
    pipeline can accept either interchangeably.

    Example:
        >>> source = DirectoryWalker(Path("project"), recursive=True)
        >>> for entry in source:
        ...     print(entry.relative_path)
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        """Return the traversal root all relative paths are anchored at."""

    @property
    @abstractmethod
    def recursive(self) -> bool:
        """Return True if entries below depth 1 are produced."""

    @abstractmethod
    def entries(self, prune: PrunePredicate | None = None) -> Iterator[FileSystemEntry]:
        """Yield entries in a stable order, each exactly once.

        Args:
            prune: Optional predicate over directory entries. A pruned
                directory is still yielded, but nothing below it is read.

        Yields:
            FileSystemEntry for every entry produced by this source.

        Raises:
            SourceReadError: If the root or a directory cannot be read.
        """

    def __iter__(self) -> Iterator[FileSystemEntry]:
        return self.entries()


class DirectoryWalker(EntrySource):
    """Walks a directory tree in flat or recursive mode.

    Entries are produced depth-first in name order. A directory entry is
    always yielded before its descendants. Hidden entries (names starting
    with ``.``) are included. The root itself is never yielded.

    Args:
        root: Directory to walk.
        recursive: If True, descend into every subdirectory.
        follow_symlinks: If True, descend into symlinked directories. There
            is no cycle detection, so only enable this for trusted trees.
        on_error: What to do when a subdirectory cannot be listed or an
            entry cannot be inspected.
    """

    def __init__(
        self,
        root: Path,
        recursive: bool = False,
        *,
        follow_symlinks: bool = False,
        on_error: ErrorPolicy = ErrorPolicy.FAIL,
    ) -> None:
        self._root = Path(root)
        self._recursive = recursive
        self._follow_symlinks = follow_symlinks
        self._on_error = on_error

    @property
    def root(self) -> Path:
        return self._root

    @property
    def recursive(self) -> bool:
        return self._recursive

    def entries(self, prune: PrunePredicate | None = None) -> Iterator[FileSystemEntry]:
        """Yield entries below the root.

        The root is validated before the first entry is produced, so a
        missing root fails on the first ``next()`` call.

        Args:
            prune: Optional predicate; directories it accepts are still
                yielded but never listed.

        Yields:
            FileSystemEntry for every file and directory below the root.

        Raises:
            SourceReadError: If the root is missing, is not a directory, or
                a directory or entry cannot be read under ErrorPolicy.FAIL.
        """
        root = self._root
        if not root.exists():
            msg = f"Root directory not found: {root}"
            raise SourceReadError(msg)
        if not root.is_dir():
            msg = f"Root is not a directory: {root}"
            raise SourceReadError(msg)

        # Listing failures on the root always propagate, regardless of policy
        pending: list[Iterator[Path]] = [iter(self._list(root, strict=True))]
        while pending:
            child = next(pending[-1], None)
            if child is None:
                pending.pop()
                continue

            entry = self._entry(child)
            if entry is None:
                continue
            yield entry

            if self._descends(entry, prune):
                pending.append(iter(self._list(child)))

    def _entry(self, child: Path) -> FileSystemEntry | None:
        try:
            is_dir = child.is_dir()
        except OSError as e:
            self._handle_error(child, e, "Cannot stat", "Skipping unreadable entry")
            return None
        return FileSystemEntry(
            relative_path=relative_posix(child, self._root, is_dir=is_dir),
            is_directory=is_dir,
            path=child,
        )

    def _descends(self, entry: FileSystemEntry, prune: PrunePredicate | None) -> bool:
        if not (entry.is_directory and self._recursive):
            return False
        if prune is not None and prune(entry):
            logger.debug("Pruned %s", entry.relative_path)
            return False
        try:
            is_link = entry.path.is_symlink()
        except OSError as e:
            self._handle_error(entry.path, e, "Cannot stat", "Skipping unreadable entry")
            return False
        if is_link and not self._follow_symlinks:
            logger.debug("Not descending into symlinked directory: %s", entry.path)
            return False
        return True

    def _list(self, directory: Path, *, strict: bool = False) -> list[Path]:
        """List a directory's children sorted by name.

        Args:
            directory: Directory to list.
            strict: Raise regardless of the configured error policy.

        Returns:
            Sorted child paths (empty if skipped under ErrorPolicy.SKIP).

        Raises:
            SourceReadError: If listing fails and errors are not skipped.
        """
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            if strict:
                msg = f"Cannot read directory {directory}: {e}"
                raise SourceReadError(msg) from e
            self._handle_error(
                directory, e, "Cannot read directory", "Skipping unreadable directory"
            )
            return []

    def _handle_error(self, path: Path, error: OSError, failure: str, skipped: str) -> None:
        """Raise or log an I/O failure according to the error policy.

        Raises:
            SourceReadError: Under ErrorPolicy.FAIL.
        """
        if self._on_error == ErrorPolicy.FAIL:
            msg = f"{failure} {path}: {error}"
            raise SourceReadError(msg) from error
        logger.warning("%s: %s (%s)", skipped, path, error)


def walk(
    root: Path,
    recursive: bool = False,
    *,
    follow_symlinks: bool = False,
    on_error: ErrorPolicy = ErrorPolicy.FAIL,
) -> Iterator[FileSystemEntry]:
    """Yield the entries below ``root``.

    Convenience wrapper around DirectoryWalker for one-shot iteration.

    Args:
        root: Directory to walk.
        recursive: If True, yield every descendant instead of direct children.
        follow_symlinks: If True, descend into symlinked directories.
        on_error: Policy for unreadable subdirectories.

    Returns:
        Lazy iterator of FileSystemEntry.
    """
    walker = DirectoryWalker(
        root,
        recursive,
        follow_symlinks=follow_symlinks,
        on_error=on_error,
    )
    return walker.entries()
