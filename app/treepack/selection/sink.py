"""Abstract base class for selection sinks.

This module defines the Sink interface the selection pipeline writes
to. Concrete sinks decide how entries are stored and how colliding
local names are handled.
"""

from abc import ABC, abstractmethod


class Sink(ABC):
    """Abstract base class for everything that stores selected entries.

    Example:
        >>> sink = MemoryArchive()
        >>> sink.add_file("docs/readme.txt", b"hello")
        >>> sink.add_empty_directory("docs/empty/")
    """

    @abstractmethod
    def add_file(self, local_name: str, content: bytes) -> None:
        """Store a file under ``local_name``.

        Args:
            local_name: Container entry name (no trailing slash).
            content: File bytes.
        """

    @abstractmethod
    def add_empty_directory(self, local_name: str) -> None:
        """Register an empty directory placeholder.

        Args:
            local_name: Container entry name ending in ``/``.
        """
