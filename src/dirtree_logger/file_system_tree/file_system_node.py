"""Node representation for file system entries in the tree."""

import os
from datetime import datetime
from typing import Any, Iterator, Optional, Union

from anytree import Node, PreOrderIter

from dirtree_logger.file_system_tree.entry import EntryDescriptor
from dirtree_logger.patterns import glob_matches
from dirtree_logger.types import NodeKind

DIRECTORY_SIZE_PLACEHOLDER = "<DIR>"

_SIZE_UNITS = ("KB", "MB", "GB")


def format_size(size_bytes: int) -> str:
    """Render a byte count using binary units.

    Counts below 1024 render as bytes; larger counts step through KB, MB and GB
    (1024 per step) with two decimal places. GB is the largest unit.

    Example:
        >>> format_size(512)
        '512 bytes'
        >>> format_size(1024)
        '1.00 KB'
        >>> format_size(2048)
        '2.00 KB'
        >>> format_size(5 * 1024 ** 3)
        '5.00 GB'
    """
    if size_bytes < 1024:
        return f"{size_bytes} bytes"
    value = float(size_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.2f} {unit}"


class FileSystemNode(Node):  # type: ignore
    """Node class representing a file or directory in the filesystem tree.

    Extends anytree.Node with the metadata of one filesystem entry. Parent,
    children and depth are inherited from anytree, which keeps a node's depth
    equal to its parent's depth plus one. Nodes are built from an
    EntryDescriptor without touching the filesystem.

    Once a tree is complete it can be frozen; attaching or detaching any node of
    a frozen tree raises RuntimeError.

    Attributes:
        name (str): The base name of the entry.
        full_path (str): Absolute path of the entry, unique within one tree.
        kind (NodeKind): FILE or DIRECTORY.
        size_bytes (int): File size in bytes (0 for directories).
        extension (Optional[str]): File suffix as written, "" if none, None for directories.
        created (datetime): Creation time.
        modified (datetime): Last modification time.
        accessed (datetime): Last access time.
        is_hidden (bool): Hidden flag.
        is_system (bool): System flag.
        is_read_only (bool): Read-only flag.
        owner (Optional[str]): Owning user, if known.
        is_symlink (bool): Whether the entry was reached through a symbolic link.
        symlink_target (Optional[str]): Raw link target for symlinks.

    Example:
        >>> from datetime import datetime
        >>> when = datetime(2024, 1, 1)
        >>> root = FileSystemNode(EntryDescriptor("r", "/r", NodeKind.DIRECTORY, 0, when, when, when))
        >>> child = FileSystemNode(EntryDescriptor("a.txt", "/r/a.txt", NodeKind.FILE, 2048, when, when, when))
        >>> root.add_child(child)
        >>> child.depth, child.formatted_size(), child.extension
        (1, '2.00 KB', '.txt')
    """

    def __init__(self, entry: EntryDescriptor, parent: Optional["FileSystemNode"] = None, **kwargs: Any) -> None:
        """Initialize a FileSystemNode from an entry descriptor.

        Args:
            entry: Snapshot of the filesystem entry.
            parent: The parent node. Defaults to None.
            **kwargs: Additional arguments passed to anytree.Node.
        """
        self._frozen = False
        self.entry = entry
        self.full_path = entry.full_path
        self.kind = entry.kind
        self.size_bytes = entry.size_bytes if entry.kind is NodeKind.FILE else 0
        self.extension = os.path.splitext(entry.name)[1] if entry.kind is NodeKind.FILE else None
        self.created: datetime = entry.created
        self.modified: datetime = entry.modified
        self.accessed: datetime = entry.accessed
        self.is_hidden = entry.is_hidden
        self.is_system = entry.is_system
        self.is_read_only = entry.is_read_only
        self.owner = entry.owner
        self.is_symlink = entry.is_symlink
        self.symlink_target = entry.symlink_target
        super().__init__(entry.name, parent, **kwargs)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def add_child(self, node: "FileSystemNode") -> None:
        """Attach a node as the last child of this directory.

        The child's parent and depth follow from the attachment.

        Raises:
            ValueError: If this node is a file.
            RuntimeError: If either tree is frozen.
        """
        if not self.is_dir:
            raise ValueError(f"Cannot add children to file node: {self.full_path}")
        node.parent = self

    def iter_descendants(self) -> Iterator["FileSystemNode"]:
        """Lazily iterate over all nodes below this one, depth-first, pre-order.

        Each call starts a fresh traversal.

        Example:
            >>> from datetime import datetime
            >>> when = datetime(2024, 1, 1)
            >>> def make(name, kind):
            ...     return FileSystemNode(EntryDescriptor(name, "/" + name, kind, 0, when, when, when))
            >>> root, sub, leaf = make("r", NodeKind.DIRECTORY), make("s", NodeKind.DIRECTORY), make("f", NodeKind.FILE)
            >>> root.add_child(sub); sub.add_child(leaf)
            >>> [node.name for node in root.iter_descendants()]
            ['s', 'f']
        """
        iterator = PreOrderIter(self)
        next(iterator)  # skip self
        return iterator

    def relative_path(self, root: Union["FileSystemNode", str]) -> str:
        """Return this node's path relative to a root node or root path.

        The root prefix and the leading separator are stripped. The root itself
        yields an empty string; paths outside the root are returned unchanged.

        Example:
            >>> from datetime import datetime
            >>> when = datetime(2024, 1, 1)
            >>> node = FileSystemNode(EntryDescriptor("b.txt", "/r/a/b.txt", NodeKind.FILE, 0, when, when, when))
            >>> node.relative_path("/r")
            'a/b.txt'
        """
        root_path = root.full_path if isinstance(root, FileSystemNode) else str(root)
        root_path = root_path.rstrip("/\\") or root_path
        if self.full_path == root_path:
            return ""
        if self.full_path.startswith(root_path):
            remainder = self.full_path[len(root_path) :]  # noqa: E203
            if remainder[:1] in ("/", "\\") or root_path.endswith(("/", "\\")):
                return remainder.lstrip("/\\")
        return self.full_path

    def matches_pattern(self, pattern: str) -> bool:
        """Case-insensitive glob match against this node's name (not its path).

        A malformed pattern never matches.

        Example:
            >>> from datetime import datetime
            >>> when = datetime(2024, 1, 1)
            >>> node = FileSystemNode(EntryDescriptor("Notes.TXT", "/r/Notes.TXT", NodeKind.FILE, 0, when, when, when))
            >>> node.matches_pattern("*.txt"), node.matches_pattern("r*")
            (True, False)
        """
        return glob_matches(self.name, pattern)

    def formatted_size(self) -> str:
        """Human-readable size; directories render as a fixed placeholder."""
        if self.is_dir:
            return DIRECTORY_SIZE_PLACEHOLDER
        return format_size(self.size_bytes)

    def freeze(self) -> None:
        """Make this node and everything below it read-only."""
        for node in PreOrderIter(self):
            node._frozen = True

    def _pre_attach(self, parent: "FileSystemNode") -> None:
        if self._frozen or getattr(parent, "_frozen", False):
            raise RuntimeError(f"Cannot attach {self.full_path}: tree is frozen")

    def _pre_detach(self, parent: "FileSystemNode") -> None:
        if self._frozen or getattr(parent, "_frozen", False):
            raise RuntimeError(f"Cannot detach {self.full_path}: tree is frozen")
