"""Aggregate statistics computed from a built tree."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from anytree import PreOrderIter

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode, format_size


@dataclass(frozen=True)
class TreeStatistics:
    """Read-only summary of a tree.

    Attributes:
        total_files: Number of file nodes.
        total_directories: Number of directory nodes below the root.
        total_size_bytes: Sum of all file sizes.
        max_depth: Largest node depth observed, counting the root (depth 0).
        oldest_file: File with the earliest creation time, or None.
        newest_file: File with the latest creation time, or None.
    """

    total_files: int
    total_directories: int
    total_size_bytes: int
    max_depth: int
    oldest_file: Optional[FileSystemNode] = None
    newest_file: Optional[FileSystemNode] = None

    @property
    def total_size_formatted(self) -> str:
        return format_size(self.total_size_bytes)

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping shared by all renderers.

        Timestamps are left as datetime objects; each renderer formats them
        with its own datetime_format.
        """
        return {
            "total_files": self.total_files,
            "total_directories": self.total_directories,
            "total_size_bytes": self.total_size_bytes,
            "total_size_formatted": self.total_size_formatted,
            "max_depth": self.max_depth,
            "oldest_file": _file_summary(self.oldest_file),
            "newest_file": _file_summary(self.newest_file),
        }


def _file_summary(node: Optional[FileSystemNode]) -> Optional[Dict[str, Any]]:
    if node is None:
        return None
    return {"name": node.name, "path": node.full_path, "created": node.created}


def compute_statistics(root: FileSystemNode) -> TreeStatistics:
    """Compute statistics with a single pre-order pass over the tree.

    The tree is never modified. Ties on creation time keep the file met first.

    Example:
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> root = FileSystemNode(EntryDescriptor("r", "/r", NodeKind.DIRECTORY, 0, when, when, when))
        >>> sub = FileSystemNode(EntryDescriptor("s", "/r/s", NodeKind.DIRECTORY, 0, when, when, when), parent=root)
        >>> _ = FileSystemNode(EntryDescriptor("f", "/r/s/f", NodeKind.FILE, 1024, when, when, when), parent=sub)
        >>> stats = compute_statistics(root)
        >>> stats.total_files, stats.total_directories, stats.max_depth, stats.total_size_formatted
        (1, 1, 2, '1.00 KB')
    """
    total_files = 0
    total_directories = 0
    total_size = 0
    max_depth = 0
    oldest: Optional[FileSystemNode] = None
    newest: Optional[FileSystemNode] = None

    for node in PreOrderIter(root):
        max_depth = max(max_depth, node.depth)
        if node.is_dir:
            if node is not root:
                total_directories += 1
            continue

        total_files += 1
        total_size += node.size_bytes
        if oldest is None or node.created < oldest.created:
            oldest = node
        if newest is None or node.created > newest.created:
            newest = node

    return TreeStatistics(
        total_files=total_files,
        total_directories=total_directories,
        total_size_bytes=total_size,
        max_depth=max_depth,
        oldest_file=oldest,
        newest_file=newest,
    )
