"""Tests for tree statistics."""

from datetime import datetime

from dirtree_logger.statistics import TreeStatistics, compute_statistics
from dirtree_logger.types import NodeKind


def test_sample_tree_statistics(sample_tree):
    stats = compute_statistics(sample_tree)

    assert stats.total_files == 4
    assert stats.total_directories == 2
    assert stats.total_size_bytes == 3172
    assert stats.total_size_formatted == "3.10 KB"
    assert stats.max_depth == 2
    assert stats.oldest_file.name == "a.txt"
    assert stats.newest_file.name == "main.py"


def test_root_alone(node_factory):
    stats = compute_statistics(node_factory("root", NodeKind.DIRECTORY))
    assert stats == TreeStatistics(0, 0, 0, 0)
    assert stats.total_size_formatted == "0 bytes"


def test_ties_keep_first_file_seen(node_factory):
    root = node_factory("root", NodeKind.DIRECTORY)
    node_factory("first.txt", parent=root)
    node_factory("second.txt", parent=root)

    stats = compute_statistics(root)

    assert stats.oldest_file.name == "first.txt"
    assert stats.newest_file.name == "first.txt"


def test_statistics_do_not_modify_tree(sample_tree):
    before = [(node.full_path, node.depth) for node in sample_tree.iter_descendants()]
    compute_statistics(sample_tree)
    assert [(node.full_path, node.depth) for node in sample_tree.iter_descendants()] == before


def test_to_dict(sample_tree):
    record = compute_statistics(sample_tree).to_dict()

    assert record["total_files"] == 4
    assert record["total_size_formatted"] == "3.10 KB"
    assert record["oldest_file"] == {"name": "a.txt", "path": "/root/docs/a.txt", "created": datetime(2023, 5, 1)}
    assert record["newest_file"]["path"] == "/root/src/main.py"


def test_to_dict_without_files(node_factory):
    record = compute_statistics(node_factory("root", NodeKind.DIRECTORY)).to_dict()
    assert record["oldest_file"] is None
    assert record["newest_file"] is None
