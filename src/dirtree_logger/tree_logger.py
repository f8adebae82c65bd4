"""One-call facade: build a tree, compute statistics and render it.

This module provides DirectoryTreeLogger, which wires a FileSystemTree, the
statistics aggregator and a renderer together for callers that just want the
rendered document.
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping, NamedTuple, Optional, Union

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.file_system_tree.file_system_tree import FileSystemTree, PermissionDeniedWarning
from dirtree_logger.file_system_tree.permission_action import PermissionAction
from dirtree_logger.file_system_tree.traversal_mode import TraversalMode
from dirtree_logger.filters.base_filter import BaseFilterProvider
from dirtree_logger.filters.composite_filter import CompositeFilter
from dirtree_logger.filters.configuration import FilterConfiguration
from dirtree_logger.filters.pattern_filter import PatternFilter
from dirtree_logger.renderers import get_renderer
from dirtree_logger.statistics import TreeStatistics
from dirtree_logger.types import PathType

logger = logging.getLogger(__name__)


class RenderedOutput(NamedTuple):
    """A rendered document with the metadata needed to store it."""

    text: str
    content_type: str
    file_extension: str


class DirectoryTreeLogger:
    """Build a directory tree once and render it in any supported format.

    Filtering combines the reference pattern filter (from filter_configuration)
    with an optional extra provider; a node must satisfy both.

    Attributes:
        root_path (Path): Root directory being described.

    Example:
        >>> logger = DirectoryTreeLogger("project", mode="EVERYTHING")  # doctest: +SKIP
        >>> output = logger.render("json", include_statistics=True)  # doctest: +SKIP
        >>> output.content_type  # doctest: +SKIP
        'application/json'
    """

    def __init__(
        self,
        root_path: PathType,
        *,
        mode: Union[str, TraversalMode] = TraversalMode.CLEAN,
        filter_configuration: Optional[Union[FilterConfiguration, Mapping[str, Any]]] = None,
        filter_provider: Optional[BaseFilterProvider] = None,
        max_depth: int = -1,
        permission_action: Union[str, PermissionAction] = PermissionAction.WARN,
        workers: int = 1,
    ) -> None:
        """Initialize the facade.

        Args:
            root_path: Directory to describe.
            mode: Traversal mode. Defaults to CLEAN.
            filter_configuration: Options for the reference pattern filter, as a
                FilterConfiguration or a mapping accepted by
                FilterConfiguration.from_mapping.
            filter_provider: Additional provider ANDed with the pattern filter.
            max_depth: Traversal depth limit, -1 for unlimited.
            permission_action: How to handle unreadable entries.
            workers: Threads used for the walk.

        Raises:
            InvalidConfigurationError: If any option is invalid.
        """
        if filter_configuration is None:
            filter_configuration = FilterConfiguration()
        elif not isinstance(filter_configuration, FilterConfiguration):
            filter_configuration = FilterConfiguration.from_mapping(filter_configuration)

        provider: BaseFilterProvider = PatternFilter(filter_configuration)
        if filter_provider is not None:
            provider = CompositeFilter([provider, filter_provider])

        self.root_path = Path(root_path)
        self._tree = FileSystemTree(
            self.root_path,
            mode=mode,
            filter_provider=provider,
            max_depth=max_depth,
            permission_action=permission_action,
            workers=workers,
        )

    @property
    def tree(self) -> FileSystemNode:
        """Root node of the built tree; the walk happens on first access."""
        return self._tree.get_tree()

    @property
    def statistics(self) -> TreeStatistics:
        return self._tree.get_statistics()

    @property
    def warnings(self) -> List[PermissionDeniedWarning]:
        return self._tree.warnings

    def refresh(self) -> None:
        self._tree.refresh()

    def render(
        self,
        format_name: str = "text",
        configuration: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> RenderedOutput:
        """Render the tree.

        Args:
            format_name: ``text``, ``json`` or ``xml``.
            configuration: Renderer defaults to start from.
            **overrides: Per-call option overrides, e.g. ``include_statistics=True``.

        Raises:
            ValueError: If the format is unknown.
            InvalidConfigurationError: If the render configuration is invalid.
        """
        renderer = get_renderer(format_name, configuration)
        root = self.tree
        text = renderer.format_with_options(root, overrides, self.statistics)
        return RenderedOutput(text, renderer.content_type, renderer.file_extension)

    def write(
        self,
        path: PathType,
        format_name: str = "text",
        configuration: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> Path:
        """Render the tree and write it as UTF-8.

        The renderer's file extension is appended when the path has none.

        Returns:
            The path actually written.
        """
        output = self.render(format_name, configuration, **overrides)
        target = Path(path)
        if not target.suffix:
            target = target.with_suffix(output.file_extension)
        target.write_text(output.text + "\n", encoding="utf-8")
        logger.info("Wrote %s output to %s", format_name, target)
        return target
