"""Selection pipeline composing walkers, filters, matchers and mapping.

SelectionPipeline exposes the public selection entry-points. Every call
runs Walker -> (IgnoreFilter) -> (PathMatcher) -> LocalPathMapper and
hands one AddRequest per surviving entry to the sink. Calls share no
state and may be repeated freely.
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from treepack.selection.errors import SourceReadError
from treepack.selection.mapper import LocalPathMapper
from treepack.selection.models import (
    AddRequest,
    DirectoryPolicy,
    ErrorPolicy,
    FileSystemEntry,
)
from treepack.selection.patterns import PathMatcher, compile_glob, compile_regex
from treepack.selection.sink import Sink
from treepack.selection.walker import DirectoryWalker, EntrySource

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AddSummary:
    """Outcome of one selection call.

    Attributes:
        files: Number of files handed to the sink.
        directories: Number of empty-directory placeholders handed to the sink.
        total_bytes: Sum of file content sizes.
        local_names: Local names in emission order.
    """

    files: int = 0
    directories: int = 0
    total_bytes: int = 0
    local_names: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Total number of add requests emitted."""
        return self.files + self.directories

    def record(self, request: AddRequest) -> None:
        """Account for an emitted request."""
        if request.is_directory:
            self.directories += 1
        else:
            self.files += 1
            self.total_bytes += len(request.content or b"")
        self.local_names.append(request.local_name)


class SelectionPipeline:
    """Selects entries from a directory tree into a sink.

    Args:
        sink: Destination receiving add requests.
        follow_symlinks: Descend into symlinked directories when walking.
        on_error: Policy for unreadable directories and files.
        directories: Which directory entries become placeholders.
    """

    def __init__(
        self,
        sink: Sink,
        *,
        follow_symlinks: bool = False,
        on_error: ErrorPolicy = ErrorPolicy.FAIL,
        directories: DirectoryPolicy = DirectoryPolicy.ALL,
    ) -> None:
        self._sink = sink
        self._follow_symlinks = follow_symlinks
        self._on_error = on_error
        self._directories = directories

    @property
    def sink(self) -> Sink:
        return self._sink

    def walker(self, root: Path | str, recursive: bool = False) -> DirectoryWalker:
        """Create a walker configured with this pipeline's policies."""
        return DirectoryWalker(
            Path(root),
            recursive,
            follow_symlinks=self._follow_symlinks,
            on_error=self._on_error,
        )

    # === Entry-points ===

    def add_dir(self, root: Path | str, local_path: str = "") -> AddSummary:
        """Add the direct children of ``root`` (files and subdirectories)."""
        return self.add_files_from_iterator(self.walker(root), local_path)

    def add_dir_recursive(self, root: Path | str, local_path: str = "") -> AddSummary:
        """Add every file and directory below ``root``."""
        return self.add_files_from_iterator(self.walker(root, recursive=True), local_path)

    def add_files_from_iterator(
        self,
        source: EntrySource,
        local_path: str = "",
        *,
        matcher: PathMatcher | None = None,
    ) -> AddSummary:
        """Add every entry produced by ``source``.

        The source decides the depth: a flat walker yields direct children,
        a recursive walker yields everything, and an IgnoreFilter prunes
        whatever it wraps.

        Args:
            source: Walker or filter producing entries.
            local_path: Prefix for the local names.
            matcher: Optional compiled pattern restricting selected files.

        Returns:
            Summary of the emitted requests.
        """
        return self._emit(self.select(source, local_path, matcher))

    def add_files_from_glob(
        self,
        root: Path | str,
        pattern: str,
        local_path: str = "",
    ) -> AddSummary:
        """Add direct-child files of ``root`` whose relative path matches a glob."""
        return self._add_matching(root, compile_glob(pattern), local_path, recursive=False)

    def add_files_from_glob_recursive(
        self,
        root: Path | str,
        pattern: str,
        local_path: str = "",
    ) -> AddSummary:
        """Add files at any depth whose relative path matches a glob."""
        return self._add_matching(root, compile_glob(pattern), local_path, recursive=True)

    def add_files_from_regex(
        self,
        root: Path | str,
        pattern: str | re.Pattern[str],
        local_path: str = "",
    ) -> AddSummary:
        """Add direct-child files of ``root`` whose relative path contains a regex match."""
        return self._add_matching(root, compile_regex(pattern), local_path, recursive=False)

    def add_files_from_regex_recursive(
        self,
        root: Path | str,
        pattern: str | re.Pattern[str],
        local_path: str = "",
    ) -> AddSummary:
        """Add files at any depth whose relative path contains a regex match."""
        return self._add_matching(root, compile_regex(pattern), local_path, recursive=True)

    # === Request stream ===

    def select(
        self,
        source: EntrySource,
        local_path: str = "",
        matcher: PathMatcher | None = None,
    ) -> Iterator[AddRequest]:
        """Lazily produce add requests without touching the sink.

        When a matcher is given, only files whose relative path matches it
        are produced; directory entries are never matched by a pattern.

        Args:
            source: Walker or filter producing entries.
            local_path: Prefix for the local names.
            matcher: Optional compiled pattern.

        Yields:
            AddRequest for each selected entry.

        Raises:
            SourceReadError: If an entry cannot be read under ErrorPolicy.FAIL.
        """
        mapper = LocalPathMapper(local_path)

        for entry in source.entries():
            if matcher is not None and (entry.is_directory or not matcher(entry.relative_path)):
                continue

            local_name = mapper.map(entry.relative_path)
            if entry.is_directory:
                if self._registers_directory(entry):
                    yield AddRequest(local_name=local_name, is_directory=True)
                continue

            content = self._read(entry)
            if content is not None:
                yield AddRequest(local_name=local_name, is_directory=False, content=content)

    # === Private helpers ===

    def _add_matching(
        self,
        root: Path | str,
        matcher: PathMatcher,
        local_path: str,
        *,
        recursive: bool,
    ) -> AddSummary:
        # Flat entry-points never look below depth 1, whatever the pattern says
        return self.add_files_from_iterator(
            self.walker(root, recursive), local_path, matcher=matcher
        )

    def _emit(self, requests: Iterator[AddRequest]) -> AddSummary:
        summary = AddSummary()
        for request in requests:
            logger.debug("Adding %s", request.local_name)
            if request.is_directory:
                self._sink.add_empty_directory(request.local_name)
            else:
                self._sink.add_file(request.local_name, request.content or b"")
            summary.record(request)
        return summary

    def _registers_directory(self, entry: FileSystemEntry) -> bool:
        if self._directories == DirectoryPolicy.ALL:
            return True
        try:
            return next(entry.path.iterdir(), None) is None
        except OSError as e:
            self._handle_read_error(entry, e)
            return False

    def _read(self, entry: FileSystemEntry) -> bytes | None:
        try:
            return entry.path.read_bytes()
        except OSError as e:
            self._handle_read_error(entry, e)
            return None

    def _handle_read_error(self, entry: FileSystemEntry, error: OSError) -> None:
        """Raise or log a read failure according to the error policy.

        Raises:
            SourceReadError: Under ErrorPolicy.FAIL.
        """
        if self._on_error == ErrorPolicy.FAIL:
            msg = f"Cannot read {entry.path}: {error}"
            raise SourceReadError(msg) from error
        logger.warning("Skipping unreadable entry: %s (%s)", entry.relative_path, error)
