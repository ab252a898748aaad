"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Mapping
from pathlib import Path

import pytest

# Relative path -> file content, or None for a directory
REFERENCE_TREE: Mapping[str, str | None] = {
    ".hidden": "Hidden file",
    "text file.txt": "Text file",
    "Текстовый документ.txt": "Текстовый документ",
    "empty dir/": None,
    "empty dir2/ещё пустой каталог/": None,
    "catalog/New File": "New Catalog File",
    "catalog/New File 2": "New Catalog File 2",
    "catalog/Empty Dir/": None,
    "category/list.txt": "Category list",
    "category/Pictures/128x160/Car/01.jpg": "File 01.jpg",
    "category/Pictures/128x160/Car/02.jpg": "File 02.jpg",
    "category/Pictures/240x320/Car/01.jpg": "File 01.jpg",
    "category/Pictures/240x320/Car/02.jpg": "File 02.jpg",
}

# Every directory the reference tree implies, including non-empty ones
REFERENCE_DIRECTORIES: frozenset[str] = frozenset(
    {
        "empty dir/",
        "empty dir2/",
        "empty dir2/ещё пустой каталог/",
        "catalog/",
        "catalog/Empty Dir/",
        "category/",
        "category/Pictures/",
        "category/Pictures/128x160/",
        "category/Pictures/128x160/Car/",
        "category/Pictures/240x320/",
        "category/Pictures/240x320/Car/",
    }
)


def build_tree(root: Path, layout: Mapping[str, str | None]) -> Path:
    """Create files and directories under ``root`` from a layout mapping.

    Keys ending in ``/`` (or mapped to None) become directories; other keys
    become files with the mapped text as UTF-8 content.
    """
    for name, content in layout.items():
        target = root / name
        if content is None:
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def tree_layout() -> Mapping[str, str | None]:
    """Layout of the reference tree (override in a module to customize)."""
    return REFERENCE_TREE


@pytest.fixture
def tree(tmp_path: Path, tree_layout: Mapping[str, str | None]) -> Path:
    """Reference directory tree built under a temporary directory."""
    return build_tree(tmp_path / "tree", tree_layout)


@pytest.fixture
def reference_files() -> dict[str, bytes]:
    """Relative path -> bytes for every file in the reference tree."""
    return {
        name: content.encode("utf-8")
        for name, content in REFERENCE_TREE.items()
        if content is not None
    }


@pytest.fixture
def reference_directories() -> frozenset[str]:
    """Every directory relative path implied by the reference tree."""
    return REFERENCE_DIRECTORIES
