"""File system tree construction with traversal modes and filter providers.

This module provides the FileSystemTree class, which walks a directory subtree,
consults a filter provider and a traversal mode for every entry, and
materializes the surviving entries as a tree of FileSystemNode objects.
"""

import logging
import os
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple, Union

from dirtree_logger.exceptions import (
    InvalidConfigurationError,
    NotADirectoryError,
    PathNotFoundError,
    PermissionDeniedError,
)
from dirtree_logger.file_system_tree.entry import describe_path
from dirtree_logger.file_system_tree.file_identifier import FileIdentifier
from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.file_system_tree.permission_action import PermissionAction
from dirtree_logger.file_system_tree.traversal_mode import TraversalMode
from dirtree_logger.filters.base_filter import BaseFilterProvider
from dirtree_logger.filters.pattern_filter import PatternFilter
from dirtree_logger.statistics import TreeStatistics, compute_statistics
from dirtree_logger.types import PathType

logger = logging.getLogger(__name__)

Ancestors = FrozenSet[FileIdentifier]


@dataclass(frozen=True)
class PermissionDeniedWarning:
    """Record of an entry skipped because it could not be read.

    Attributes:
        path: Path of the skipped entry.
        message: Description of the underlying error.
    """

    path: str
    message: str


@dataclass
class _DirectoryFrame:
    """A directory whose entries are being visited by the walk."""

    directory: FileSystemNode
    depth: int
    ancestors: Ancestors
    names: List[str]
    position: int = 0
    accepted: int = 0


class FileSystemTree:
    """A tree representation of a directory structure shaped by a traversal mode and filters.

    The tree is built lazily on first access and can be rebuilt with refresh().
    Every build produces a fresh, frozen tree; nodes are never mutated after the
    build completes.

    Traversal is a depth-first, pre-order walk. At each directory the immediate
    entries are listed and sorted by name, each entry is offered to the filter
    provider, and the traversal mode decides whether the accepted entry is
    materialized. Directories permitted by the mode are recursed into until
    max_depth is reached.

    Symbolic links are followed and appear as the kind of their target. A
    directory that is already on the current ancestor chain (a symlink loop) is
    not descended into again.

    Permission Handling:
        Unreadable entries are handled according to permission_action:
        - IGNORE: Skip silently
        - WARN (default): Skip, log a warning, and record it in `warnings`
        - RAISE: Raise PermissionDeniedError immediately

    Attributes:
        root_path (Path): Path to the root directory.
        mode (TraversalMode): Which files and directories are materialized.
        filter_provider (BaseFilterProvider): Per-entry inclusion filter.
        max_depth (int): Deepest level whose children are enumerated, -1 for unlimited.
        permission_action (PermissionAction): How to handle unreadable entries.
        workers (int): Number of threads walking the root's subtrees.

    Example:
        >>> tree = FileSystemTree(".", mode="EVERYTHING", max_depth=1)  # doctest: +SKIP
        >>> root = tree.get_tree()  # doctest: +SKIP
        >>> [child.name for child in root.children]  # doctest: +SKIP
        ['README.md', 'src', 'tests']
    """

    def __init__(
        self,
        root_path: PathType,
        mode: Union[str, TraversalMode] = TraversalMode.CLEAN,
        filter_provider: Optional[BaseFilterProvider] = None,
        max_depth: int = -1,
        permission_action: Union[str, PermissionAction] = PermissionAction.WARN,
        workers: int = 1,
    ) -> None:
        """Initialize a FileSystemTree.

        Args:
            root_path: Path to the root directory. Can be any path-like object.
            mode: Traversal mode or its case-sensitive name. Defaults to CLEAN.
            filter_provider: Inclusion filter. Defaults to a PatternFilter with
                default configuration, which includes everything.
            max_depth: Entries at this depth are not enumerated further. -1
                means unlimited. Defaults to -1.
            permission_action: How to handle unreadable entries. Defaults to WARN.
            workers: Threads used to walk the root's subtrees. Defaults to 1.

        Raises:
            InvalidConfigurationError: If mode, max_depth, permission_action or
                workers is invalid.
        """
        problems: List[str] = []

        try:
            self.mode = TraversalMode(mode)
        except ValueError:
            problems.append(f"unknown mode {mode!r}; expected one of {', '.join(m.value for m in TraversalMode)}")

        try:
            self.permission_action = PermissionAction(permission_action)
        except ValueError:
            problems.append(f"unknown permission_action {permission_action!r}")

        if isinstance(max_depth, bool) or not isinstance(max_depth, int):
            problems.append(f"max_depth must be an integer, got {max_depth!r}")
        elif max_depth < -1:
            problems.append(f"max_depth must be >= -1, got {max_depth}")

        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            problems.append(f"workers must be a positive integer, got {workers!r}")

        if problems:
            raise InvalidConfigurationError(problems, "traversal")

        self.root_path = Path(root_path)
        self.filter_provider = filter_provider if filter_provider is not None else PatternFilter()
        self.max_depth = max_depth
        self.workers = workers
        self._tree: Optional[FileSystemNode] = None
        self._statistics: Optional[TreeStatistics] = None
        self._warnings: List[PermissionDeniedWarning] = []
        self._warnings_lock = threading.Lock()

    def get_tree(self) -> FileSystemNode:
        """Get the root node of the filesystem tree, building it on first access.

        The root is always a directory node, whatever the mode.

        Raises:
            PathNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
            PermissionDeniedError: If an entry is unreadable and permission_action is RAISE.
        """
        if self._tree is None:
            self._build_tree()
        assert self._tree is not None
        return self._tree

    def get_statistics(self) -> TreeStatistics:
        """Get aggregate statistics for the built tree."""
        if self._statistics is None:
            self._statistics = compute_statistics(self.get_tree())
        return self._statistics

    @property
    def warnings(self) -> List[PermissionDeniedWarning]:
        """Entries skipped during the last build because they could not be read."""
        self.get_tree()
        with self._warnings_lock:
            return list(self._warnings)

    def refresh(self) -> None:
        """Discard the current tree and rebuild it from the filesystem."""
        self._tree = None
        self._statistics = None
        self._build_tree()

    def _build_tree(self) -> None:
        if not self.root_path.exists():
            raise PathNotFoundError(str(self.root_path))
        if not self.root_path.is_dir():
            raise NotADirectoryError(str(self.root_path))

        with self._warnings_lock:
            self._warnings = []

        logger.info(
            "Building directory tree for %s (mode=%s, max_depth=%d)",
            self.root_path,
            self.mode.value,
            self.max_depth,
        )

        try:
            root_entry = describe_path(self.root_path)
        except PermissionError as e:
            raise PermissionDeniedError(str(self.root_path), e.strerror or str(e)) from e

        root = FileSystemNode(root_entry)
        self.filter_provider.pre_process(root)

        ancestors: Ancestors = frozenset()
        if root_entry.identifier is not None and root_entry.identifier.is_reliable:
            ancestors = frozenset({root_entry.identifier})

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="TreeWalker") as executor:
                self._populate(root, ancestors, executor)
        else:
            self._populate(root, ancestors)

        self.filter_provider.post_process(root)
        root.freeze()
        self._tree = root
        self._statistics = None

        logger.info("Built directory tree for %s with %d node(s)", self.root_path, len(root.descendants) + 1)

    def _populate(self, root: FileSystemNode, ancestors: Ancestors, executor: Optional[Executor] = None) -> None:
        """Fill the root directory, walking its entries concurrently when an executor is given."""
        if executor is None:
            self._walk(root, 0, ancestors)
            return

        opened = self._open_directory(root, 0, ancestors)
        if not isinstance(opened, _DirectoryFrame):
            return

        path = Path(root.full_path)
        futures = [executor.submit(self._visit, path / name, 1, ancestors) for name in opened.names]
        for future in futures:
            node, _ = future.result()
            if node is not None:
                root.add_child(node)

    def _visit(self, path: Path, depth: int, ancestors: Ancestors) -> Tuple[Optional[FileSystemNode], bool]:
        """Describe, filter, and (for directories) walk one entry.

        Returns:
            The materialized node, or None if the entry is not part of the tree,
            and whether the filter accepted the entry.
        """
        candidate, accepted, chain = self._inspect(path, ancestors)
        if candidate is None or chain is None:
            return candidate, accepted
        has_content = self._walk(candidate, depth, chain)
        return (candidate if self.mode.includes_directory(has_content) else None), True

    def _inspect(
        self, path: Path, ancestors: Ancestors
    ) -> Tuple[Optional[FileSystemNode], bool, Optional[Ancestors]]:
        """Describe and filter one entry without walking it.

        Returns:
            The candidate node (None when the entry is not part of the tree),
            whether the filter accepted it, and for a directory still to be
            walked the ancestor chain to walk it with. A directory whose
            content is already settled (a symlink loop) comes back as a
            finished node with no chain.
        """
        try:
            entry = describe_path(path)
        except PermissionError as e:
            self._handle_unreadable(path, e)
            return None, False, None
        except FileNotFoundError:
            logger.debug("Entry vanished during traversal: %s", path)
            return None, False, None
        except OSError as e:
            # e.g. a symlink pointing at itself
            logger.warning("Skipping entry %s: %s", path, e.strerror or e)
            return None, False, None

        candidate = FileSystemNode(entry)
        if not self.filter_provider.should_include(candidate):
            return None, False, None

        if candidate.is_file:
            return (candidate if self.mode.includes_file(candidate.size_bytes) else None), True, None

        if not self.mode.enters_directories:
            return None, True, None

        identifier = entry.identifier
        if identifier is None or not identifier.is_reliable:
            return candidate, True, ancestors
        if identifier in ancestors:
            logger.warning("Symlink loop detected at %s; not descending", path)
            return (candidate if self.mode.includes_directory(False) else None), True, None
        return candidate, True, ancestors | {identifier}

    def _walk(self, directory: FileSystemNode, depth: int, ancestors: Ancestors) -> bool:
        """Fill a directory and everything below it, depth first, without recursing.

        Each directory being walked has a frame on an explicit stack, so the
        depth of the tree is limited by memory rather than the interpreter's
        recursion limit. A sub-directory is attached to its parent only once its
        own walk is finished and the mode has accepted it, which keeps siblings
        in sorted order.

        Returns:
            Whether the directory counts as non-empty under the active mode.
        """
        opened = self._open_directory(directory, depth, ancestors)
        if not isinstance(opened, _DirectoryFrame):
            return opened

        stack = [opened]
        while True:
            frame = stack[-1]
            if frame.position < len(frame.names):
                name = frame.names[frame.position]
                frame.position += 1
                candidate, accepted, chain = self._inspect(Path(frame.directory.full_path) / name, frame.ancestors)
                if accepted:
                    frame.accepted += 1
                if candidate is None:
                    continue
                if chain is None:
                    frame.directory.add_child(candidate)
                    continue

                child = self._open_directory(candidate, frame.depth + 1, chain)
                if isinstance(child, _DirectoryFrame):
                    stack.append(child)
                elif self.mode.includes_directory(child):
                    frame.directory.add_child(candidate)
                continue

            stack.pop()
            has_content = self._has_content(frame)
            if not stack:
                return has_content
            if self.mode.includes_directory(has_content):
                stack[-1].directory.add_child(frame.directory)

    def _open_directory(
        self, directory: FileSystemNode, depth: int, ancestors: Ancestors
    ) -> Union[_DirectoryFrame, bool]:
        """Start walking a directory.

        Returns:
            A frame listing the directory's entries, or, when the directory is
            not enumerated (depth cut-off or unreadable), whether it counts as
            non-empty.
        """
        path = Path(directory.full_path)

        if self.max_depth != -1 and depth >= self.max_depth:
            return self._has_any_entry(path)

        names = self._list_directory(path)
        if names is None:
            return False

        logger.debug("Entering %s (%d entr%s)", path, len(names), "y" if len(names) == 1 else "ies")
        return _DirectoryFrame(directory, depth, ancestors, names)

    def _has_content(self, frame: _DirectoryFrame) -> bool:
        if self.mode.content_from_materialized_children:
            return bool(frame.directory.children)
        return frame.accepted > 0

    def _list_directory(self, path: Path) -> Optional[List[str]]:
        try:
            return sorted(os.listdir(path))
        except PermissionError as e:
            self._handle_unreadable(path, e)
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", path, e.strerror or e)
        return None

    def _has_any_entry(self, path: Path) -> bool:
        """Check for at least one entry without enumerating the directory."""
        try:
            with os.scandir(path) as it:
                return next(it, None) is not None
        except PermissionError as e:
            self._handle_unreadable(path, e)
        except OSError as e:
            logger.warning("Cannot inspect directory %s: %s", path, e.strerror or e)
        return False

    def _handle_unreadable(self, path: Path, error: OSError) -> None:
        reason = error.strerror or str(error)
        if self.permission_action == PermissionAction.RAISE:
            raise PermissionDeniedError(str(path), reason) from error
        if self.permission_action == PermissionAction.WARN:
            logger.warning("Skipping unreadable entry %s: %s", path, reason)
            with self._warnings_lock:
                self._warnings.append(PermissionDeniedWarning(str(path), reason))
        else:
            logger.debug("Ignoring unreadable entry %s: %s", path, reason)
