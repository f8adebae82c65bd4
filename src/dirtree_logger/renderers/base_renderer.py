"""Renderer base class defining the interface for tree output formats.

This module provides the abstract base class that every output format
implements. It owns the render configuration: defaults, validation, and the
per-call override mechanism. Concrete renderers only turn a validated
configuration, a tree and its statistics into a complete string.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, ClassVar, Dict, List, Mapping, NamedTuple, Optional

from dirtree_logger.exceptions import InvalidConfigurationError
from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.statistics import TreeStatistics, compute_statistics

Checker = Callable[[Any], Optional[str]]

# Everything outside the XML 1.0 Char production, including lone surrogates
_UNPRINTABLE = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _escape_unprintable(match: "re.Match[str]") -> str:
    code = ord(match.group())
    if 0xDC80 <= code <= 0xDCFF:
        # Undecodable byte carried through os.listdir by surrogateescape
        return f"\\x{code - 0xDC00:02x}"
    if code < 0x100:
        return f"\\x{code:02x}"
    return f"\\u{code:04x}"


def display_text(value: str) -> str:
    r"""Spell out characters that no output format can carry.

    Control characters and bytes that are not valid UTF-8 are legal in POSIX
    file names but cannot appear in an XML document or be encoded as UTF-8.
    They are replaced with backslash escapes, the same in every format.

    Example:
        >>> display_text("bad\x01name.txt")
        'bad\\x01name.txt'
        >>> display_text(b"\xff.txt".decode("utf-8", "surrogateescape"))
        '\\xff.txt'
        >>> display_text("notes & tab\there")
        'notes & tab\there'
    """
    return _UNPRINTABLE.sub(_escape_unprintable, value)


class Option(NamedTuple):
    """A render option: its default value and a checker returning a problem or None."""

    default: Any
    check: Checker


def check_bool(value: Any) -> Optional[str]:
    return None if isinstance(value, bool) else f"expected a boolean, got {value!r}"


def check_int_at_least(minimum: int) -> Checker:
    def check(value: Any) -> Optional[str]:
        if isinstance(value, bool) or not isinstance(value, int):
            return f"expected an integer, got {value!r}"
        if value < minimum:
            return f"must be >= {minimum}, got {value}"
        return None

    return check


def check_choice(*choices: str) -> Checker:
    def check(value: Any) -> Optional[str]:
        if value not in choices:
            return f"expected one of {', '.join(choices)}, got {value!r}"
        return None

    return check


def check_datetime_format(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return f"expected a non-empty strftime format, got {value!r}"
    return None


COMMON_OPTIONS: Dict[str, Option] = {
    "pretty_print": Option(True, check_bool),
    "include_metadata": Option(True, check_bool),
    "include_statistics": Option(False, check_bool),
    "datetime_format": Option("%Y-%m-%d %H:%M:%S", check_datetime_format),
    "max_depth": Option(-1, check_int_at_least(-1)),
    "include_permissions": Option(False, check_bool),
    "show_size": Option(True, check_bool),
    "show_timestamps": Option(False, check_bool),
    "show_attributes": Option(False, check_bool),
}


class Renderer(ABC):
    """Abstract base class for tree renderers.

    A renderer holds a default configuration, validated at construction. format()
    renders with it; format_with_options() renders with per-call overrides merged
    into a copy, leaving the defaults untouched. A renderer either returns a
    complete document or raises; it never returns partial output.

    Renderers only read the tree, so one tree can be rendered by several
    renderers concurrently.

    Subclasses declare ``name``, ``content_type``, ``file_extension`` and their
    format-specific ``OPTIONS`` (merged over ``COMMON_OPTIONS``), and implement
    ``_render``.

    Example:
        >>> class NameListRenderer(Renderer):
        ...     name = "names"
        ...     content_type = "text/plain"
        ...     file_extension = ".names"
        ...
        ...     def _render(self, root, configuration, statistics):
        ...         return "\\n".join(node.name for node in self.visible_nodes(root, configuration))
        >>> NameListRenderer().validate_configuration({"pretty_print": True})
        False
    """

    name: ClassVar[str]
    content_type: ClassVar[str]
    file_extension: ClassVar[str]
    version: ClassVar[str] = "1.0.0"
    OPTIONS: ClassVar[Dict[str, Option]] = {}

    def __init__(self, configuration: Optional[Mapping[str, Any]] = None) -> None:
        """Initialize the renderer with defaults, optionally overridden.

        Args:
            configuration: Partial configuration merged over the defaults.

        Raises:
            InvalidConfigurationError: If the resulting configuration is invalid.
        """
        merged = self.default_configuration()
        if configuration:
            merged.update(configuration)
        self._raise_if_invalid(merged)
        self._configuration = merged

    @classmethod
    def options(cls) -> Dict[str, Option]:
        return {**COMMON_OPTIONS, **cls.OPTIONS}

    @property
    def configuration(self) -> Dict[str, Any]:
        """A copy of the default configuration in use."""
        return dict(self._configuration)

    def default_configuration(self) -> Dict[str, Any]:
        return {key: option.default for key, option in self.options().items()}

    def configuration_problems(self, configuration: Mapping[str, Any]) -> List[str]:
        """List every problem with a complete configuration mapping."""
        options = self.options()
        problems = [f"missing key '{key}'" for key in options if key not in configuration]
        problems.extend(f"unknown key '{key}'" for key in configuration if key not in options)
        for key, value in configuration.items():
            option = options.get(key)
            if option is None:
                continue
            problem = option.check(value)
            if problem is not None:
                problems.append(f"{key}: {problem}")
        return problems

    def validate_configuration(self, configuration: Mapping[str, Any]) -> bool:
        """Check whether a complete configuration mapping is acceptable."""
        return not self.configuration_problems(configuration)

    def format(self, root: FileSystemNode, statistics: Optional[TreeStatistics] = None) -> str:
        """Render a tree with the default configuration.

        Args:
            root: Root of the tree to render.
            statistics: Precomputed statistics. Computed from the tree when needed
                and not supplied.

        Raises:
            InvalidConfigurationError: If the configuration is invalid.
        """
        return self._render_validated(root, dict(self._configuration), statistics)

    def format_with_options(
        self,
        root: FileSystemNode,
        overrides: Mapping[str, Any],
        statistics: Optional[TreeStatistics] = None,
    ) -> str:
        """Render a tree with per-call overrides; the defaults are not modified.

        Raises:
            InvalidConfigurationError: If the merged configuration is invalid.
        """
        return self._render_validated(root, {**self._configuration, **overrides}, statistics)

    def _render_validated(
        self,
        root: FileSystemNode,
        configuration: Dict[str, Any],
        statistics: Optional[TreeStatistics],
    ) -> str:
        self._raise_if_invalid(configuration)
        if statistics is None:
            statistics = compute_statistics(root)
        return self._render(root, configuration, statistics)

    def _raise_if_invalid(self, configuration: Mapping[str, Any]) -> None:
        problems = self.configuration_problems(configuration)
        if problems:
            raise InvalidConfigurationError(problems, f"{self.name} renderer")

    @abstractmethod
    def _render(self, root: FileSystemNode, configuration: Dict[str, Any], statistics: TreeStatistics) -> str:
        """Produce the complete document from a validated configuration."""
        pass

    @staticmethod
    def visible_nodes(root: FileSystemNode, configuration: Mapping[str, Any]) -> List[FileSystemNode]:
        """Nodes within the render depth, in pre-order."""
        max_depth = configuration["max_depth"]
        result = [root]
        for node in root.iter_descendants():
            if max_depth == -1 or node.depth <= max_depth:
                result.append(node)
        return result

    @staticmethod
    def visible_children(node: FileSystemNode, configuration: Mapping[str, Any]) -> List[FileSystemNode]:
        max_depth = configuration["max_depth"]
        if max_depth != -1 and node.depth >= max_depth:
            return []
        return list(node.children)

    @staticmethod
    def format_timestamp(value: Optional[datetime], configuration: Mapping[str, Any]) -> Optional[str]:
        if value is None:
            return None
        return value.strftime(configuration["datetime_format"])

    def metadata(self, root: FileSystemNode, configuration: Mapping[str, Any]) -> Dict[str, Any]:
        """Document header shared by all formats."""
        return {
            "generated_at": self.format_timestamp(datetime.now(), configuration),
            "root_path": display_text(root.full_path),
            "renderer": self.name,
            "version": self.version,
            "configuration": dict(configuration),
        }

    def statistics_record(self, statistics: TreeStatistics, configuration: Mapping[str, Any]) -> Dict[str, Any]:
        """Statistics mapping with timestamps formatted for output."""
        record = statistics.to_dict()
        for key in ("oldest_file", "newest_file"):
            summary = record[key]
            if summary is not None:
                record[key] = {
                    "name": display_text(summary["name"]),
                    "path": display_text(summary["path"]),
                    "created": self.format_timestamp(summary["created"], configuration),
                }
        return record
