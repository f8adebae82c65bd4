from abc import ABC, abstractmethod
from typing import Any, Dict

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode


class BaseFilterProvider(ABC):
    """
    Abstract base class defining the interface for per-node inclusion filters.

    A filter provider decides, for every entry the tree builder encounters,
    whether that entry may be materialized in the tree. Several providers can be
    combined with CompositeFilter, in which case a node is included only if
    every provider includes it.

    The tree builder calls pre_process once with the root node before the walk
    and post_process once with the finished root node after it. Both hooks are
    no-ops by default; providers that need per-build state (for example the
    root path to compute relative paths) override them.

    Example:
        >>> class NoLogsFilter(BaseFilterProvider):
        ...     def should_include(self, node):
        ...         return node.extension != ".log"
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> node = FileSystemNode(EntryDescriptor("app.log", "/r/app.log", NodeKind.FILE, 1, when, when, when))
        >>> NoLogsFilter().should_include(node)
        False
    """

    @abstractmethod
    def should_include(self, node: FileSystemNode) -> bool:
        """
        Determine whether a node is included in the materialized tree.

        Args:
            node (FileSystemNode): A detached candidate node describing the entry.
                Its parent is not yet set.

        Returns:
            bool: True if the node should be included, False if it should be rejected.
        """
        pass

    def pre_process(self, root: FileSystemNode) -> None:
        """Hook called with the root node before traversal starts."""
        pass

    def post_process(self, root: FileSystemNode) -> None:
        """Hook called with the finished root node after traversal completes."""
        pass

    def default_configuration(self) -> Dict[str, Any]:
        """Return the provider's default options as a plain mapping."""
        return {}

    def describe(self) -> Dict[str, Any]:
        """Return the provider's active options, for rendered metadata."""
        return {"provider": type(self).__name__}
