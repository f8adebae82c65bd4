"""Loading of the optional JSON configuration file.

A ``project.config.json`` file looks like this::

    {
      "logging_mode": "CLEAN",
      "include_file_info": true,
      "max_file_size": "100MB",
      "output_format": "text",
      "max_depth": -1,
      "show_progress": true,
      "filters": {"exclude_patterns": [], "include_patterns": [], "ignore_hidden": false, "ignore_system": false},
      "render": {"pretty_print": true}
    }

Every key is optional. Without "max_file_size" there is no size limit; the
"100MB" above only shows the syntax. Values are validated here; render
options are validated later by the selected renderer.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dirtree_logger.exceptions import InvalidConfigurationError
from dirtree_logger.file_system_tree.traversal_mode import TraversalMode
from dirtree_logger.filters.configuration import FilterConfiguration, parse_file_size
from dirtree_logger.renderers import RENDERERS
from dirtree_logger.types import PathType

logger = logging.getLogger(__name__)

_KEYS = (
    "logging_mode",
    "include_file_info",
    "max_file_size",
    "output_format",
    "max_depth",
    "show_progress",
    "filters",
    "render",
)


@dataclass(frozen=True)
class AppConfiguration:
    """Validated application settings.

    Attributes:
        logging_mode: Traversal mode.
        include_file_info: Show timestamps and attribute flags for each entry.
        output_format: Renderer name.
        max_depth: Traversal depth limit, -1 for unlimited.
        show_progress: Log progress messages while scanning.
        filters: Options for the reference filter, including the size limit.
        render: Render option overrides passed to the renderer.
    """

    logging_mode: TraversalMode = TraversalMode.CLEAN
    include_file_info: bool = False
    output_format: str = "text"
    max_depth: int = -1
    show_progress: bool = True
    filters: FilterConfiguration = field(default_factory=FilterConfiguration)
    render: Dict[str, Any] = field(default_factory=dict)

    def render_options(self) -> Dict[str, Any]:
        """Render overrides implied by these settings, explicit ``render`` entries last."""
        options: Dict[str, Any] = {}
        if self.include_file_info:
            options["show_timestamps"] = True
            options["show_attributes"] = True
        options.update(self.render)
        return options

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AppConfiguration":
        """Validate a decoded configuration document.

        Raises:
            InvalidConfigurationError: Listing every problem found.

        Example:
            >>> config = AppConfiguration.from_mapping({"logging_mode": "EVERYTHING", "max_file_size": "1KB"})
            >>> config.logging_mode.value, config.filters.max_size_bytes
            ('EVERYTHING', 1024)
        """
        problems: List[str] = [f"unknown key '{key}'" for key in data if key not in _KEYS]
        values: Dict[str, Any] = {}

        if "logging_mode" in data:
            try:
                values["logging_mode"] = TraversalMode(data["logging_mode"])
            except ValueError:
                problems.append(f"logging_mode: unknown mode {data['logging_mode']!r}")

        for flag in ("include_file_info", "show_progress"):
            if flag in data:
                if isinstance(data[flag], bool):
                    values[flag] = data[flag]
                else:
                    problems.append(f"{flag}: expected a boolean, got {data[flag]!r}")

        if "output_format" in data:
            output_format = data["output_format"]
            if isinstance(output_format, str) and output_format.lower() in RENDERERS:
                values["output_format"] = output_format.lower()
            else:
                problems.append(f"output_format: expected one of {', '.join(RENDERERS)}, got {output_format!r}")

        if "max_depth" in data:
            max_depth = data["max_depth"]
            if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < -1:
                problems.append(f"max_depth: expected an integer >= -1, got {max_depth!r}")
            else:
                values["max_depth"] = max_depth

        filter_options: Dict[str, Any] = {}
        raw_filters = data.get("filters", {})
        if isinstance(raw_filters, Mapping):
            filter_options.update(raw_filters)
        else:
            problems.append(f"filters: expected an object, got {type(raw_filters).__name__}")

        max_file_size = data.get("max_file_size")
        if max_file_size is not None and "max_size_bytes" not in filter_options:
            try:
                filter_options["max_size_bytes"] = parse_file_size(max_file_size)
            except ValueError as e:
                problems.append(f"max_file_size: {e}")

        raw_render = data.get("render", {})
        if isinstance(raw_render, Mapping):
            values["render"] = dict(raw_render)
        else:
            problems.append(f"render: expected an object, got {type(raw_render).__name__}")

        if not problems:
            try:
                values["filters"] = FilterConfiguration.from_mapping(filter_options)
            except InvalidConfigurationError as e:
                problems.extend(f"filters: {problem}" for problem in e.problems)

        if problems:
            raise InvalidConfigurationError(problems)
        return cls(**values)


def load_configuration(path: Optional[PathType] = None) -> AppConfiguration:
    """Load settings from a JSON file, falling back to defaults.

    Args:
        path: Configuration file. None, or a path that does not exist, yields
            the defaults.

    Raises:
        InvalidConfigurationError: If the file is not valid JSON or holds invalid values.
    """
    if path is None:
        return AppConfiguration()

    config_path = Path(path)
    if not config_path.is_file():
        logger.info("Configuration file %s not found; using default configuration", config_path)
        return AppConfiguration()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigurationError([f"{config_path}: {e}"]) from e

    if not isinstance(data, dict):
        raise InvalidConfigurationError([f"{config_path}: top level must be an object"])

    configuration = AppConfiguration.from_mapping(data)
    logger.debug("Configuration loaded from %s", config_path)
    return configuration
