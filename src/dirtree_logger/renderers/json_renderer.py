"""JSON renderer with configurable property-name case and null handling."""

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.statistics import TreeStatistics

from .base_renderer import Option, Renderer, check_bool, check_choice, check_int_at_least, display_text

PROPERTY_CASES = ("camelCase", "PascalCase", "kebab-case", "snake_case")


def convert_key(key: str, style: str) -> str:
    """Convert a snake_case key to the given property case.

    Example:
        >>> [convert_key("size_formatted", style) for style in PROPERTY_CASES]
        ['sizeFormatted', 'SizeFormatted', 'size-formatted', 'size_formatted']
    """
    parts = key.split("_")
    if style == "camelCase":
        return parts[0] + "".join(part.capitalize() for part in parts[1:])
    if style == "PascalCase":
        return "".join(part.capitalize() for part in parts)
    if style == "kebab-case":
        return "-".join(parts)
    return key


def transform_keys(value: Any, style: str, omit_nulls: bool) -> Any:
    """Recursively rename every mapping key; string values are left alone.

    Example:
        >>> transform_keys({"is_hidden": False, "owner": None, "children": [{"total_files": 1}]}, "kebab-case", True)
        {'is-hidden': False, 'children': [{'total-files': 1}]}
    """
    if isinstance(value, dict):
        return {
            convert_key(key, style): transform_keys(item, style, omit_nulls)
            for key, item in value.items()
            if not (omit_nulls and item is None)
        }
    if isinstance(value, list):
        return [transform_keys(item, style, omit_nulls) for item in value]
    return value


def dump_json(value: Any, indent: Optional[int] = None) -> str:
    """Serialize nested dicts and lists like json.dumps, without recursing.

    Directory trees can be nested deeper than the interpreter's recursion
    limit, so containers are walked with an explicit stack. Scalars and keys
    are encoded by json itself. With indent None the compact separators are
    used.

    Example:
        >>> dump_json({"a": [1, None, {}], "b": "é"})
        '{"a":[1,null,{}],"b":"é"}'
        >>> print(dump_json({"a": [True]}, indent=2))
        {
          "a": [
            true
          ]
        }
    """
    encoder = json.JSONEncoder(ensure_ascii=False)
    key_separator = ": " if indent is not None else ":"
    parts: List[str] = []
    # Open containers: remaining (key, item) pairs, closing bracket, whether an item was written
    stack: List[List[Any]] = []

    def newline(level: int) -> str:
        return "" if indent is None else "\n" + " " * (indent * level)

    def emit(item: Any) -> None:
        if isinstance(item, dict) and item:
            parts.append("{")
            stack.append([iter(item.items()), "}", False])
        elif isinstance(item, list) and item:
            parts.append("[")
            stack.append([((None, element) for element in item), "]", False])
        elif isinstance(item, dict):
            parts.append("{}")
        elif isinstance(item, list):
            parts.append("[]")
        else:
            parts.append(encoder.encode(item))

    emit(value)
    while stack:
        frame = stack[-1]
        entry = next(frame[0], None)
        if entry is None:
            stack.pop()
            parts.append(newline(len(stack)) + frame[1])
            continue

        key, item = entry
        parts.append(("," if frame[2] else "") + newline(len(stack)))
        frame[2] = True
        if key is not None:
            parts.append(encoder.encode(key) + key_separator)
        emit(item)

    return "".join(parts)


class JSONRenderer(Renderer):
    """Renderer producing a single JSON document.

    The document holds ``metadata`` (optional), ``tree`` and ``statistics``
    (optional). Each node carries name, type and path; files add size,
    formatted size, extension, timestamps and flags as enabled by the
    configuration, and directories carry a ``children`` array.

    Keys are produced in snake_case and converted to ``property_case``
    recursively. With ``null_handling`` set to ``omit``, keys whose value is
    null are dropped instead of emitted as ``null``.

    Example:
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> root = FileSystemNode(EntryDescriptor("R", "/R", NodeKind.DIRECTORY, 0, when, when, when))
        >>> _ = FileSystemNode(EntryDescriptor("a.txt", "/R/a.txt", NodeKind.FILE, 2048, when, when, when), parent=root)
        >>> renderer = JSONRenderer({"include_metadata": False, "show_timestamps": False, "show_attributes": False})
        >>> document = json.loads(renderer.format(root))
        >>> document["tree"]["children"][0]["sizeFormatted"]
        '2.00 KB'
    """

    name = "json"
    content_type = "application/json"
    file_extension = ".json"
    OPTIONS = {
        "show_timestamps": Option(True, check_bool),
        "show_attributes": Option(True, check_bool),
        "property_case": Option("camelCase", check_choice(*PROPERTY_CASES)),
        "null_handling": Option("include", check_choice("include", "omit")),
        "indent": Option(2, check_int_at_least(0)),
    }

    def _render(self, root: FileSystemNode, configuration: Dict[str, Any], statistics: TreeStatistics) -> str:
        style = configuration["property_case"]
        omit_nulls = configuration["null_handling"] == "omit"

        document: Dict[str, Any] = {}
        if configuration["include_metadata"]:
            metadata = self.metadata(root, configuration)
            document[convert_key("metadata", style)] = transform_keys(metadata, style, omit_nulls)
        document[convert_key("tree", style)] = self._tree_record(root, configuration)
        if configuration["include_statistics"]:
            record = self.statistics_record(statistics, configuration)
            document[convert_key("statistics", style)] = transform_keys(record, style, omit_nulls)

        return dump_json(document, configuration["indent"] if configuration["pretty_print"] else None)

    def _tree_record(self, root: FileSystemNode, configuration: Mapping[str, Any]) -> Dict[str, Any]:
        children_key = convert_key("children", configuration["property_case"])
        top = self._node_record(root, configuration)

        pending: List[Tuple[FileSystemNode, Dict[str, Any]]] = [(root, top)]
        while pending:
            node, record = pending.pop()
            if not node.is_dir:
                continue
            for child in self.visible_children(node, configuration):
                child_record = self._node_record(child, configuration)
                record[children_key].append(child_record)
                pending.append((child, child_record))

        return top

    def _node_record(self, node: FileSystemNode, configuration: Mapping[str, Any]) -> Dict[str, Any]:
        """One node's record with converted keys; directories get an empty children list to fill."""
        record: Dict[str, Any] = {
            "name": display_text(node.name),
            "type": node.kind.value,
            "path": display_text(node.full_path),
        }

        if node.is_symlink:
            record["symlink_target"] = display_text(node.symlink_target) if node.symlink_target else None

        if node.is_file:
            if configuration["show_size"]:
                record["size"] = node.size_bytes
                record["size_formatted"] = node.formatted_size()
            record["extension"] = node.extension
            if configuration["show_timestamps"]:
                record["created"] = self.format_timestamp(node.created, configuration)
                record["modified"] = self.format_timestamp(node.modified, configuration)
                record["accessed"] = self.format_timestamp(node.accessed, configuration)

        if configuration["show_attributes"]:
            record["is_hidden"] = node.is_hidden
            record["is_system"] = node.is_system
            record["is_read_only"] = node.is_read_only

        if configuration["include_permissions"]:
            record["owner"] = node.owner

        if node.is_dir:
            record["children"] = []

        return transform_keys(record, configuration["property_case"], configuration["null_handling"] == "omit")
