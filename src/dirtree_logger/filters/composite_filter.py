"""Composite filter for combining multiple filter providers."""

from typing import Any, Dict, List, Sequence

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode

from .base_filter import BaseFilterProvider


class CompositeFilter(BaseFilterProvider):
    """Composite filter that combines multiple filter providers.

    A node is included only if ALL constituent providers include it (logical
    AND). Evaluation stops at the first provider that rejects the node, so the
    order of providers affects performance but never the result. Placing cheap
    providers first avoids running expensive ones for rejected nodes.

    The pre_process and post_process hooks are forwarded to every provider in
    order.

    Attributes:
        filters (List[BaseFilterProvider]): List of constituent providers.

    Example:
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.filters.configuration import FilterConfiguration
        >>> from dirtree_logger.filters.pattern_filter import PatternFilter
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> node = FileSystemNode(EntryDescriptor("big.log", "/r/big.log", NodeKind.FILE, 4096, when, when, when))
        >>> small_only = PatternFilter(FilterConfiguration(max_size_bytes=1024))
        >>> no_txt = PatternFilter(FilterConfiguration(exclude_patterns=frozenset({"*.txt"})))
        >>> CompositeFilter([no_txt, small_only]).should_include(node)
        False
    """

    def __init__(self, filters: Sequence[BaseFilterProvider]):
        """Initialize a composite filter.

        Args:
            filters: Sequence of providers to combine. Each must implement
                the BaseFilterProvider interface.

        Raises:
            ValueError: If the sequence is empty.
            TypeError: If any member doesn't implement BaseFilterProvider.
        """
        if not filters:
            raise ValueError("At least one filter provider must be provided")

        for i, provider in enumerate(filters):
            if not isinstance(provider, BaseFilterProvider):
                raise TypeError(f"Filter at index {i} must implement BaseFilterProvider, got {type(provider)}")

        self.filters: List[BaseFilterProvider] = list(filters)

    def should_include(self, node: FileSystemNode) -> bool:
        return all(provider.should_include(node) for provider in self.filters)

    def pre_process(self, root: FileSystemNode) -> None:
        for provider in self.filters:
            provider.pre_process(root)

    def post_process(self, root: FileSystemNode) -> None:
        for provider in self.filters:
            provider.post_process(root)

    def add_filter(self, provider: BaseFilterProvider) -> None:
        """Append another provider to this composite.

        Raises:
            TypeError: If provider doesn't implement BaseFilterProvider.
        """
        if not isinstance(provider, BaseFilterProvider):
            raise TypeError(f"Filter must implement BaseFilterProvider, got {type(provider)}")
        self.filters.append(provider)

    def remove_filter(self, provider: BaseFilterProvider) -> bool:
        """Remove a provider from this composite.

        Returns:
            True if the provider was found and removed, False otherwise.
        """
        try:
            self.filters.remove(provider)
            return True
        except ValueError:
            return False

    def get_filters(self) -> List[BaseFilterProvider]:
        """Return a copy of the constituent providers."""
        return list(self.filters)

    def describe(self) -> Dict[str, Any]:
        return {"provider": type(self).__name__, "filters": [provider.describe() for provider in self.filters]}
