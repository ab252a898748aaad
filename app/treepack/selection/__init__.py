"""Entry selection engine.

This package walks directory trees, filters entries by ignore sets and
glob or regex patterns, maps them to local names, and hands the result
to a sink.
"""

from treepack.selection.errors import PatternError, SelectionError, SourceReadError
from treepack.selection.ignore import IgnoreFilter
from treepack.selection.mapper import LocalPathMapper, map_local_name, normalize_prefix
from treepack.selection.models import (
    AddRequest,
    DirectoryPolicy,
    ErrorPolicy,
    FileSystemEntry,
    PatternKind,
)
from treepack.selection.patterns import PathMatcher, compile_glob, compile_pattern, compile_regex
from treepack.selection.pipeline import AddSummary, SelectionPipeline
from treepack.selection.sink import Sink
from treepack.selection.walker import DirectoryWalker, EntrySource, PrunePredicate, walk

__all__ = [
    "AddRequest",
    "AddSummary",
    "DirectoryPolicy",
    "DirectoryWalker",
    "EntrySource",
    "ErrorPolicy",
    "FileSystemEntry",
    "IgnoreFilter",
    "LocalPathMapper",
    "PathMatcher",
    "PatternError",
    "PatternKind",
    "PrunePredicate",
    "SelectionError",
    "SelectionPipeline",
    "Sink",
    "SourceReadError",
    "compile_glob",
    "compile_pattern",
    "compile_regex",
    "map_local_name",
    "normalize_prefix",
    "walk",
]
