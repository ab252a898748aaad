"""Tests for SelectionPipeline entry-points against the reference tree."""

from pathlib import Path
from unittest.mock import patch

import pytest
from treepack.archive.memory import MemoryArchive
from treepack.selection.errors import PatternError, SourceReadError
from treepack.selection.ignore import IgnoreFilter
from treepack.selection.models import DirectoryPolicy, ErrorPolicy
from treepack.selection.patterns import compile_glob
from treepack.selection.pipeline import SelectionPipeline
from treepack.selection.walker import DirectoryWalker

DEPTH_ONE = {
    ".hidden",
    "text file.txt",
    "Текстовый документ.txt",
    "empty dir/",
    "empty dir2/",
    "catalog/",
    "category/",
}

TEXT_AND_IMAGES = {
    "text file.txt",
    "Текстовый документ.txt",
    "category/list.txt",
    "category/Pictures/128x160/Car/01.jpg",
    "category/Pictures/128x160/Car/02.jpg",
    "category/Pictures/240x320/Car/01.jpg",
    "category/Pictures/240x320/Car/02.jpg",
}


def _local(names: set[str], prefix: str) -> set[str]:
    return {f"{prefix}/{name}" for name in names} if prefix else set(names)


def _assert_contents(
    archive: MemoryArchive,
    expected: set[str],
    reference_files: dict[str, bytes],
    prefix: str = "",
) -> None:
    """Assert the archive holds exactly ``expected`` with matching contents."""
    assert set(archive.names()) == _local(expected, prefix)
    for name in expected:
        local_name = f"{prefix}/{name}" if prefix else name
        if name.endswith("/"):
            assert archive[local_name] is None
        else:
            assert archive[local_name] == reference_files[name]


class TestAddDir:
    """Tests for flat directory selection."""

    @pytest.mark.parametrize("prefix", ["to/path", ""])
    def test_add_dir(self, tree: Path, reference_files: dict[str, bytes], prefix: str) -> None:
        """Only depth-1 entries are added, under the prefix."""
        archive = MemoryArchive()
        summary = archive.add_dir(tree, prefix)

        _assert_contents(archive, DEPTH_ONE, reference_files, prefix)
        assert summary.files == 3
        assert summary.directories == 4

    def test_add_dir_empty_dirs_only(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """EMPTY_ONLY registers only directories with nothing inside."""
        archive = MemoryArchive(directories=DirectoryPolicy.EMPTY_ONLY)
        archive.add_dir(tree)

        expected = {".hidden", "text file.txt", "Текстовый документ.txt", "empty dir/"}
        _assert_contents(archive, expected, reference_files)


class TestAddDirRecursive:
    """Tests for recursive directory selection."""

    @pytest.mark.parametrize("prefix", ["to/path", ""])
    def test_add_dir_recursive(
        self,
        tree: Path,
        reference_files: dict[str, bytes],
        reference_directories: frozenset[str],
        prefix: str,
    ) -> None:
        """Every file and directory at every depth is added."""
        archive = MemoryArchive()
        archive.add_dir_recursive(tree, prefix)

        expected = set(reference_files) | reference_directories
        _assert_contents(archive, expected, reference_files, prefix)

    def test_add_dir_recursive_empty_dirs_only(
        self, tree: Path, reference_files: dict[str, bytes]
    ) -> None:
        """EMPTY_ONLY keeps files plus the empty leaf directories."""
        archive = MemoryArchive(directories=DirectoryPolicy.EMPTY_ONLY)
        archive.add_dir_recursive(tree)

        expected = set(reference_files) | {
            "empty dir/",
            "empty dir2/ещё пустой каталог/",
            "catalog/Empty Dir/",
        }
        _assert_contents(archive, expected, reference_files)

    def test_empty_prefix_reproduces_walker_paths(self, tree: Path) -> None:
        """With no prefix, local names equal the walker's relative paths."""
        archive = MemoryArchive()
        archive.add_dir_recursive(tree, "")

        walked = [entry.relative_path for entry in DirectoryWalker(tree, recursive=True)]
        assert archive.names() == walked


class TestAddFilesFromIterator:
    """Tests for adding from an arbitrary entry source."""

    def test_flat_walker(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """A flat walker adds depth-1 entries."""
        archive = MemoryArchive()
        archive.add_files_from_iterator(DirectoryWalker(tree), "to/project")

        _assert_contents(archive, DEPTH_ONE, reference_files, "to/project")

    def test_recursive_walker(
        self,
        tree: Path,
        reference_files: dict[str, bytes],
        reference_directories: frozenset[str],
    ) -> None:
        """A recursive walker adds the whole tree."""
        archive = MemoryArchive()
        archive.add_files_from_iterator(DirectoryWalker(tree, recursive=True), "to/project")

        expected = set(reference_files) | reference_directories
        _assert_contents(archive, expected, reference_files, "to/project")

    def test_flat_ignore_filter(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """Ignored flat entries never reach the sink."""
        source = IgnoreFilter(DirectoryWalker(tree), ["Текстовый документ.txt", "empty dir/"])
        archive = MemoryArchive()
        archive.add_files_from_iterator(source, "to/project")

        expected = DEPTH_ONE - {"Текстовый документ.txt", "empty dir/"}
        _assert_contents(archive, expected, reference_files, "to/project")

    def test_recursive_ignore_filter(
        self, tree: Path, reference_files: dict[str, bytes]
    ) -> None:
        """Ignored directories are pruned with their subtrees."""
        ignore = [
            ".hidden",
            "empty dir2/ещё пустой каталог/",
            "category/list.txt",
            "category/Pictures/240x320",
        ]
        source = IgnoreFilter(DirectoryWalker(tree, recursive=True), ignore)
        archive = MemoryArchive(directories=DirectoryPolicy.EMPTY_ONLY)
        archive.add_files_from_iterator(source, "to/project")

        expected = {
            "text file.txt",
            "Текстовый документ.txt",
            "empty dir/",
            "catalog/New File",
            "catalog/New File 2",
            "catalog/Empty Dir/",
            "category/Pictures/128x160/Car/01.jpg",
            "category/Pictures/128x160/Car/02.jpg",
        }
        _assert_contents(archive, expected, reference_files, "to/project")

    def test_iterator_with_matcher(self, tree: Path) -> None:
        """A matcher combined with an ignore filter applies both."""
        source = IgnoreFilter(DirectoryWalker(tree, recursive=True), ["category/Pictures"])
        archive = MemoryArchive()
        archive.add_files_from_iterator(source, matcher=compile_glob("**.txt"))

        assert set(archive.names()) == {
            "text file.txt",
            "Текстовый документ.txt",
            "category/list.txt",
        }

    def test_index_assignment_shorthand(
        self,
        tree: Path,
        reference_files: dict[str, bytes],
        reference_directories: frozenset[str],
    ) -> None:
        """archive[prefix] = source behaves like add_files_from_iterator."""
        archive = MemoryArchive()
        archive["path/to"] = DirectoryWalker(tree, recursive=True)

        expected = set(reference_files) | reference_directories
        _assert_contents(archive, expected, reference_files, "path/to")

    def test_index_assignment_rejects_non_sources(self) -> None:
        """Assigning something that is not an EntrySource fails."""
        archive = MemoryArchive()
        with pytest.raises(TypeError):
            archive["x"] = ["a.txt"]  # type: ignore[assignment]


class TestGlobSelection:
    """Tests for glob entry-points."""

    def test_flat_glob(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """Flat glob only matches depth-1 files, even with '**'."""
        archive = MemoryArchive()
        archive.add_files_from_glob(tree, "**.{txt,jpg}", "/")

        _assert_contents(archive, {"text file.txt", "Текстовый документ.txt"}, reference_files)

    def test_recursive_glob(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """Recursive glob matches at any depth."""
        archive = MemoryArchive()
        archive.add_files_from_glob_recursive(tree, "**.{txt,jpg}", "/")

        _assert_contents(archive, TEXT_AND_IMAGES, reference_files)

    def test_glob_never_selects_directories(self, tree: Path) -> None:
        """Directories are excluded even when the glob would match them."""
        archive = MemoryArchive()
        archive.add_files_from_glob_recursive(tree, "**")

        assert not any(name.endswith("/") for name in archive.names())

    def test_malformed_glob_fails_before_traversal(self, tmp_path: Path) -> None:
        """A bad glob raises PatternError even if the root does not exist."""
        archive = MemoryArchive()
        with pytest.raises(PatternError):
            archive.add_files_from_glob(tmp_path / "missing", "{txt")
        assert len(archive) == 0


class TestRegexSelection:
    """Tests for regex entry-points."""

    def test_flat_regex(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """Flat regex matches depth-1 files only."""
        archive = MemoryArchive()
        archive.add_files_from_regex(tree, r"(?i)\.(txt|jpe?g)$", "path")

        expected = {"text file.txt", "Текстовый документ.txt"}
        _assert_contents(archive, expected, reference_files, "path")

    def test_recursive_regex(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """Recursive regex matches at any depth."""
        archive = MemoryArchive()
        archive.add_files_from_regex_recursive(tree, r"(?i)\.(txt|jpe?g)$", "/")

        _assert_contents(archive, TEXT_AND_IMAGES, reference_files)

    def test_regex_searches_whole_relative_path(self, tree: Path) -> None:
        """Regex can select on directory components of the path."""
        archive = MemoryArchive()
        archive.add_files_from_regex_recursive(tree, r"240x320/")

        assert set(archive.names()) == {
            "category/Pictures/240x320/Car/01.jpg",
            "category/Pictures/240x320/Car/02.jpg",
        }

    def test_malformed_regex_fails_before_traversal(self, tree: Path) -> None:
        """A bad regex raises PatternError with no side effects."""
        archive = MemoryArchive()
        with pytest.raises(PatternError):
            archive.add_files_from_regex_recursive(tree, "(unclosed")
        assert len(archive) == 0


class TestSummaryAndSelect:
    """Tests for AddSummary and the lazy request stream."""

    def test_summary_counts(self, tree: Path, reference_files: dict[str, bytes]) -> None:
        """The summary reports files, directories and byte totals."""
        archive = MemoryArchive()
        summary = archive.add_files_from_glob_recursive(tree, "**.txt")

        assert summary.files == 3
        assert summary.directories == 0
        assert summary.count == 3
        assert summary.total_bytes == sum(
            len(reference_files[name])
            for name in ("text file.txt", "Текстовый документ.txt", "category/list.txt")
        )
        assert summary.local_names == archive.names()

    def test_select_does_not_touch_sink(self, tree: Path) -> None:
        """select() yields requests without writing to the sink."""
        archive = MemoryArchive()
        requests = list(archive.pipeline.select(DirectoryWalker(tree), "p"))

        assert len(archive) == 0
        assert {r.local_name for r in requests} == {f"p/{name}" for name in DEPTH_ONE}
        assert all(r.content is None for r in requests if r.is_directory)

    def test_repeated_calls_overwrite_in_sink(self, tree: Path) -> None:
        """Adding the same selection twice leaves one entry per name."""
        archive = MemoryArchive()
        archive.add_dir(tree)
        archive.add_dir(tree)

        assert len(archive) == len(DEPTH_ONE)


class TestReadErrors:
    """Tests for file read failures."""

    def test_unreadable_file_aborts(self, tree: Path) -> None:
        """A read failure raises SourceReadError and stops the call."""
        archive = MemoryArchive()
        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(SourceReadError, match="Cannot read"):
                archive.add_dir(tree)

    def test_unreadable_file_skipped_with_warning(
        self, tree: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Under SKIP, unreadable files are left out and logged."""
        archive = MemoryArchive(on_error=ErrorPolicy.SKIP)
        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            summary = archive.add_dir(tree)

        assert summary.files == 0
        assert summary.directories == 4
        assert "Skipping unreadable entry" in caplog.text

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        """A missing root surfaces as SourceReadError."""
        pipeline = SelectionPipeline(MemoryArchive())
        with pytest.raises(SourceReadError):
            pipeline.add_dir_recursive(tmp_path / "missing")
