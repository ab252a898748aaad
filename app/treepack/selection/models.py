"""Selection domain models.

This module defines the data structures flowing through a selection
pipeline: entries produced by walkers, the add requests handed to a sink,
and the enums that parameterize pattern matching and policies.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class PatternKind(str, Enum):
    """Kind of pattern used to select entries.

    Attributes:
        GLOB: Shell-style glob with ``*``, ``**`` and ``{a,b}`` support.
        REGEX: Python regular expression with search semantics.
    """

    GLOB = "glob"
    REGEX = "regex"


class DirectoryPolicy(str, Enum):
    """Which directory entries become empty-directory placeholders.

    Attributes:
        ALL: Every selected directory is registered.
        EMPTY_ONLY: Only directories with no children on disk are registered.
    """

    ALL = "all"
    EMPTY_ONLY = "empty"


class ErrorPolicy(str, Enum):
    """How unreadable directories and files are handled during a selection.

    Attributes:
        FAIL: Abort the selection with SourceReadError.
        SKIP: Log a warning and continue with the next entry.
    """

    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class FileSystemEntry:
    """An entry discovered below a traversal root.

    Attributes:
        relative_path: ``/``-separated path relative to the root, with a
            trailing ``/`` for directories and no leading slash.
        is_directory: Whether the entry is a directory.
        path: Filesystem location of the entry (used to read contents).
    """

    relative_path: str
    is_directory: bool
    path: Path = field(compare=False)

    def __post_init__(self) -> None:
        """Validate entry invariants after initialization."""
        if not self.relative_path or self.relative_path == "/":
            msg = "Relative path cannot be empty"
            raise ValueError(msg)
        if self.relative_path.startswith("/"):
            msg = f"Relative path must not start with '/': {self.relative_path}"
            raise ValueError(msg)
        if self.is_directory != self.relative_path.endswith("/"):
            msg = f"Trailing '/' must mark directories only: {self.relative_path}"
            raise ValueError(msg)

    @property
    def name(self) -> str:
        """Final path segment without the trailing slash."""
        return self.relative_path.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True, slots=True)
class AddRequest:
    """A request to store one entry in a container.

    Directory requests carry no content; file requests carry the bytes
    read from the source.

    Attributes:
        local_name: Final name inside the container.
        is_directory: Whether this registers an empty directory placeholder.
        content: File bytes, or None for directories.
    """

    local_name: str
    is_directory: bool
    content: bytes | None = None

    def __post_init__(self) -> None:
        """Validate that content presence matches the entry kind."""
        if self.is_directory and self.content is not None:
            msg = f"Directory request cannot carry content: {self.local_name}"
            raise ValueError(msg)
        if not self.is_directory and self.content is None:
            msg = f"File request requires content: {self.local_name}"
            raise ValueError(msg)
