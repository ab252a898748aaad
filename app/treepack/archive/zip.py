"""Zip file sink.

Streams selected entries straight into a ``.zip`` file using the
standard library ``zipfile`` module. Names are stored as given; non-ASCII
names are flagged as UTF-8 by ``zipfile`` itself.
"""

import logging
import zipfile
from pathlib import Path
from types import TracebackType

from treepack.selection.sink import Sink

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when an archive cannot be written."""


class DuplicateEntryError(ArchiveError):
    """Raised when a local name is added twice to a streaming archive."""


class ZipArchiveSink(Sink):
    """Writes entries to a zip file as they arrive.

    Unlike MemoryArchive, a streaming zip cannot replace an entry once
    written, so colliding local names are rejected.

    Args:
        path: Destination ``.zip`` path (parent directories are created).
        compression: zipfile compression constant.
    """

    def __init__(self, path: Path, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self._path = Path(path)
        self._compression = compression
        self._zip: zipfile.ZipFile | None = None
        self._names: set[str] = set()

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        """Create the zip file for writing.

        Raises:
            ArchiveError: If the file cannot be created.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._zip = zipfile.ZipFile(self._path, "w", compression=self._compression)
        except OSError as e:
            msg = f"Failed to create archive {self._path}: {e}"
            raise ArchiveError(msg) from e

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None
            logger.debug("Wrote %d entries to %s", len(self._names), self._path)

    def __enter__(self) -> "ZipArchiveSink":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def add_file(self, local_name: str, content: bytes) -> None:
        archive = self._claim(local_name)
        archive.writestr(local_name, content)

    def add_empty_directory(self, local_name: str) -> None:
        archive = self._claim(local_name)
        archive.mkdir(local_name)

    def _claim(self, local_name: str) -> zipfile.ZipFile:
        if self._zip is None:
            msg = f"Archive is not open: {self._path}"
            raise ArchiveError(msg)
        if local_name in self._names:
            msg = f"Duplicate entry in archive: {local_name}"
            raise DuplicateEntryError(msg)
        self._names.add(local_name)
        return self._zip
