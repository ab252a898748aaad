"""In-memory archive container.

MemoryArchive is a dict-backed sink holding selected entries by local
name. It exposes the selection entry-points directly and supports the
index-assignment shorthand ``archive[prefix] = source``.
"""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from treepack.archive.zip import ZipArchiveSink
from treepack.selection.models import DirectoryPolicy, ErrorPolicy
from treepack.selection.pipeline import AddSummary, SelectionPipeline
from treepack.selection.sink import Sink
from treepack.selection.walker import EntrySource

logger = logging.getLogger(__name__)


class MemoryArchive(Sink):
    """Container holding file contents and directory placeholders in memory.

    Adding an entry under a name that already exists replaces it.

    Args:
        follow_symlinks: Walker policy for the convenience entry-points.
        on_error: Read-error policy for the convenience entry-points.
        directories: Directory placeholder policy for the convenience entry-points.

    Example:
        >>> archive = MemoryArchive()
        >>> archive.add_dir_recursive("project", "src")
        >>> "src/readme.txt" in archive
        True
    """

    def __init__(
        self,
        *,
        follow_symlinks: bool = False,
        on_error: ErrorPolicy = ErrorPolicy.FAIL,
        directories: DirectoryPolicy = DirectoryPolicy.ALL,
    ) -> None:
        self._entries: dict[str, bytes | None] = {}
        self._pipeline = SelectionPipeline(
            self,
            follow_symlinks=follow_symlinks,
            on_error=on_error,
            directories=directories,
        )

    @property
    def pipeline(self) -> SelectionPipeline:
        """Selection pipeline writing into this archive."""
        return self._pipeline

    # === Sink interface ===

    def add_file(self, local_name: str, content: bytes) -> None:
        if local_name in self._entries:
            logger.debug("Replacing existing entry: %s", local_name)
        self._entries[local_name] = content

    def add_empty_directory(self, local_name: str) -> None:
        if local_name in self._entries:
            logger.debug("Replacing existing entry: %s", local_name)
        self._entries[local_name] = None

    # === Selection shortcuts ===

    def add_dir(self, root: Path | str, local_path: str = "") -> AddSummary:
        return self._pipeline.add_dir(root, local_path)

    def add_dir_recursive(self, root: Path | str, local_path: str = "") -> AddSummary:
        return self._pipeline.add_dir_recursive(root, local_path)

    def add_files_from_iterator(self, source: EntrySource, local_path: str = "") -> AddSummary:
        return self._pipeline.add_files_from_iterator(source, local_path)

    def add_files_from_glob(
        self, root: Path | str, pattern: str, local_path: str = ""
    ) -> AddSummary:
        return self._pipeline.add_files_from_glob(root, pattern, local_path)

    def add_files_from_glob_recursive(
        self, root: Path | str, pattern: str, local_path: str = ""
    ) -> AddSummary:
        return self._pipeline.add_files_from_glob_recursive(root, pattern, local_path)

    def add_files_from_regex(
        self, root: Path | str, pattern: str | re.Pattern[str], local_path: str = ""
    ) -> AddSummary:
        return self._pipeline.add_files_from_regex(root, pattern, local_path)

    def add_files_from_regex_recursive(
        self, root: Path | str, pattern: str | re.Pattern[str], local_path: str = ""
    ) -> AddSummary:
        return self._pipeline.add_files_from_regex_recursive(root, pattern, local_path)

    # === Container protocol ===

    def __setitem__(self, local_path: str, source: EntrySource) -> None:
        """Shorthand for ``add_files_from_iterator(source, local_path)``."""
        if not isinstance(source, EntrySource):
            msg = f"Expected an EntrySource, got {type(source).__name__}"
            raise TypeError(msg)
        self._pipeline.add_files_from_iterator(source, local_path)

    def __getitem__(self, local_name: str) -> bytes | None:
        """Return file bytes, or None for a directory placeholder.

        Raises:
            KeyError: If no entry exists under ``local_name``.
        """
        return self._entries[local_name]

    def __contains__(self, local_name: object) -> bool:
        return local_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def names(self) -> list[str]:
        """Return all local names in insertion order."""
        return list(self._entries)

    def is_directory(self, local_name: str) -> bool:
        """Check whether ``local_name`` is a directory placeholder."""
        return local_name.endswith("/") and self._entries.get(local_name, b"") is None

    def save_as_zip(self, path: Path) -> Path:
        """Write every entry to a zip file.

        Args:
            path: Destination ``.zip`` path.

        Returns:
            Path the archive was written to.

        Raises:
            ArchiveError: If the file cannot be written.
        """
        with ZipArchiveSink(path) as sink:
            for name, content in self._entries.items():
                if content is None:
                    sink.add_empty_directory(name)
                else:
                    sink.add_file(name, content)
        return path
