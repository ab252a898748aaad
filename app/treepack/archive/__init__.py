"""Archive sinks receiving selected entries.

This package provides the Sink interface consumed by the selection
pipeline, an in-memory container, and a streaming zip writer.
"""

from treepack.selection.sink import Sink
from treepack.archive.memory import MemoryArchive
from treepack.archive.zip import ArchiveError, DuplicateEntryError, ZipArchiveSink

__all__ = [
    "ArchiveError",
    "DuplicateEntryError",
    "MemoryArchive",
    "Sink",
    "ZipArchiveSink",
]
