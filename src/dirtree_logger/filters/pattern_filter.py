"""Reference filter combining size, attribute, and name-pattern rules."""

from typing import Any, Dict, Optional

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.patterns import matches_any

from .base_filter import BaseFilterProvider
from .configuration import FilterConfiguration


class PatternFilter(BaseFilterProvider):
    """The default filter provider.

    Decision order for each node:

    1. If the filter is disabled, include everything.
    2. Files larger than ``max_size_bytes`` are rejected.
    3. Hidden entries are rejected when ``ignore_hidden`` is set, and system
       entries when ``ignore_system`` is set.
    4. Names matching any exclude pattern are rejected.
    5. If include patterns are configured, only names matching at least one of
       them are included; otherwise the node is included.

    Patterns are case-insensitive shell globs matched against the bare name,
    never the path. Include patterns apply to directories as well as files.

    Attributes:
        configuration (FilterConfiguration): The active options.

    Example:
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> def file(name, size=1):
        ...     return FileSystemNode(EntryDescriptor(name, "/r/" + name, NodeKind.FILE, size, when, when, when))
        >>> rules = PatternFilter(FilterConfiguration(exclude_patterns=frozenset({"*.txt"})))
        >>> rules.should_include(file("a.txt")), rules.should_include(file("b.log"))
        (False, True)
    """

    def __init__(self, configuration: Optional[FilterConfiguration] = None):
        self.configuration = configuration if configuration is not None else FilterConfiguration()

    def should_include(self, node: FileSystemNode) -> bool:
        config = self.configuration
        if not config.enabled:
            return True

        if node.is_file and config.max_size_bytes is not None and node.size_bytes > config.max_size_bytes:
            return False

        if config.ignore_hidden and node.is_hidden:
            return False
        if config.ignore_system and node.is_system:
            return False

        if matches_any(node.name, config.exclude_patterns):
            return False

        if config.include_patterns:
            return matches_any(node.name, config.include_patterns)
        return True

    def default_configuration(self) -> Dict[str, Any]:
        return FilterConfiguration().to_dict()

    def describe(self) -> Dict[str, Any]:
        return {"provider": type(self).__name__, **self.configuration.to_dict()}
