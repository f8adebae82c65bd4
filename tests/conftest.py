"""Test configuration and fixtures for dirtree_logger."""

from datetime import datetime

import pytest

from dirtree_logger.file_system_tree.entry import EntryDescriptor
from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.types import NodeKind

WHEN = datetime(2024, 1, 1, 12, 0, 0)


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


def make_node(name, kind=NodeKind.FILE, size=0, parent=None, created=WHEN, **flags):
    """Build a node without touching the filesystem."""
    parent_path = parent.full_path if parent is not None else ""
    entry = EntryDescriptor(
        name,
        f"{parent_path}/{name}",
        kind,
        size,
        created,
        WHEN,
        WHEN,
        **flags,
    )
    return FileSystemNode(entry, parent=parent)


@pytest.fixture
def scenario_dir(tmp_path):
    """R/ with an empty folder E and a folder N holding f1.txt (1024 bytes) and f2.txt (2048 bytes)."""
    root = tmp_path / "R"
    root.mkdir()
    (root / "E").mkdir()
    (root / "N").mkdir()
    (root / "N" / "f1.txt").write_bytes(b"x" * 1024)
    (root / "N" / "f2.txt").write_bytes(b"x" * 2048)
    return root


@pytest.fixture
def mixed_dir(tmp_path):
    """A tree exercising every mode: empty files, empty folders and nesting.

    mixed/
        a.txt        (10 bytes)
        b.log        (20 bytes)
        empty.txt    (0 bytes)
        .hidden      (5 bytes)
        empty_dir/
        only_empty/
            zero.txt (0 bytes)
        sub/
            c.txt    (30 bytes)
            deeper/
                d.txt (40 bytes)
    """
    root = tmp_path / "mixed"
    root.mkdir()
    (root / "a.txt").write_bytes(b"a" * 10)
    (root / "b.log").write_bytes(b"b" * 20)
    (root / "empty.txt").write_bytes(b"")
    (root / ".hidden").write_bytes(b"h" * 5)
    (root / "empty_dir").mkdir()
    (root / "only_empty").mkdir()
    (root / "only_empty" / "zero.txt").write_bytes(b"")
    (root / "sub").mkdir()
    (root / "sub" / "c.txt").write_bytes(b"c" * 30)
    (root / "sub" / "deeper").mkdir()
    (root / "sub" / "deeper" / "d.txt").write_bytes(b"d" * 40)
    return root


@pytest.fixture
def sample_tree():
    """An in-memory tree: root/ -> docs/ (a.txt 1024), src/ (main.py 2048, notes & <draft>.md 0), README 100."""
    root = make_node("root", NodeKind.DIRECTORY)
    docs = make_node("docs", NodeKind.DIRECTORY, parent=root)
    make_node("a.txt", size=1024, parent=docs, created=datetime(2023, 5, 1))
    src = make_node("src", NodeKind.DIRECTORY, parent=root)
    make_node("main.py", size=2048, parent=src, created=datetime(2024, 6, 1))
    make_node('notes & <draft> "v1".md', size=0, parent=src)
    make_node("README", size=100, parent=root, is_hidden=False, is_read_only=True, owner="alice")
    root.freeze()
    return root


@pytest.fixture
def node_factory():
    return make_node


@pytest.fixture
def deep_chain(tmp_path):
    """A single chain of 350 nested folders ending in one file."""
    root = tmp_path / "deep"
    root.mkdir()
    current = root
    for _ in range(350):
        current = current / "a"
        current.mkdir()
    (current / "leaf.txt").write_text("x")
    return root
