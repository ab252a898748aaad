"""Exceptions raised by the selection engine."""


class SelectionError(Exception):
    """Base exception for selection errors."""


class SourceReadError(SelectionError, OSError):
    """Raised when a root, directory, or file cannot be read."""


class PatternError(SelectionError, ValueError):
    """Raised when a glob or regular expression is malformed."""
