"""XML renderer producing a DirectoryTree document."""

from typing import Any, Dict, List, Mapping, Optional, Union
from xml.sax.saxutils import escape as xml_escape

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.statistics import TreeStatistics

from .base_renderer import Option, Renderer, check_bool, check_int_at_least, display_text

_XML_ENTITIES = {'"': "&quot;"}
# Parsers normalize literal whitespace in attribute values to spaces
_ATTRIBUTE_ENTITIES = {**_XML_ENTITIES, "\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}


def _escape(value: Any, entities: Mapping[str, str] = _XML_ENTITIES) -> str:
    return xml_escape(display_text(str(value)), entities)


def _pascal(key: str) -> str:
    return "".join(part.capitalize() for part in key.split("_"))


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _ElementWriter:
    """Accumulates indented XML lines; with indent None everything is joined on one line."""

    def __init__(self, indent: Optional[int]) -> None:
        self._indent = indent
        self._level = 0
        self._parts: List[str] = []

    def _emit(self, markup: str) -> None:
        if self._indent is None:
            self._parts.append(markup)
        else:
            self._parts.append(" " * (self._indent * self._level) + markup)

    @staticmethod
    def _attributes(attributes: Optional[Mapping[str, Any]]) -> str:
        if not attributes:
            return ""
        return "".join(
            f' {key}="{_escape(_text(value), _ATTRIBUTE_ENTITIES)}"'
            for key, value in attributes.items()
            if value is not None
        )

    def open(self, tag: str, attributes: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(f"<{tag}{self._attributes(attributes)}>")
        self._level += 1

    def close(self, tag: str) -> None:
        self._level -= 1
        self._emit(f"</{tag}>")

    def empty(self, tag: str, attributes: Optional[Mapping[str, Any]] = None) -> None:
        self._emit(f"<{tag}{self._attributes(attributes)} />")

    def leaf(self, tag: str, value: Any, attributes: Optional[Mapping[str, Any]] = None) -> None:
        if value is None:
            self.empty(tag, attributes)
        else:
            self._emit(f"<{tag}{self._attributes(attributes)}>{_escape(_text(value))}</{tag}>")

    def getvalue(self) -> str:
        return ("" if self._indent is None else "\n").join(self._parts)


class XMLRenderer(Renderer):
    """Renderer producing an XML document rooted at ``DirectoryTree``.

    Structure::

        <DirectoryTree>
          <Metadata>...</Metadata>
          <Node type="directory" name="R" path="/R">
            <Children>
              <Node type="file" name="a.txt" path="/R/a.txt">
                <Size formatted="1.00 KB">1024</Size>
                ...
              </Node>
            </Children>
          </Node>
          <Statistics>...</Statistics>
        </DirectoryTree>

    All text content and attribute values are escaped with
    xml.sax.saxutils.escape, including double quotes. Characters XML 1.0 cannot
    carry at all, such as control characters in file names, are spelled out as
    backslash escapes first.

    Example:
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> root = FileSystemNode(EntryDescriptor("R&D", "/R&D", NodeKind.DIRECTORY, 0, when, when, when))
        >>> print(XMLRenderer({"include_metadata": False, "show_attributes": False}).format(root))
        <?xml version="1.0" encoding="UTF-8"?>
        <DirectoryTree>
          <Node type="directory" name="R&amp;D" path="/R&amp;D">
            <Children />
          </Node>
        </DirectoryTree>
    """

    name = "xml"
    content_type = "application/xml"
    file_extension = ".xml"
    OPTIONS = {
        "show_timestamps": Option(True, check_bool),
        "show_attributes": Option(True, check_bool),
        "indent": Option(2, check_int_at_least(0)),
    }

    def _render(self, root: FileSystemNode, configuration: Dict[str, Any], statistics: TreeStatistics) -> str:
        writer = _ElementWriter(configuration["indent"] if configuration["pretty_print"] else None)
        writer.open("DirectoryTree")

        if configuration["include_metadata"]:
            self._write_metadata(writer, root, configuration)

        self._write_node(writer, root, configuration)

        if configuration["include_statistics"]:
            self._write_statistics(writer, statistics, configuration)

        writer.close("DirectoryTree")
        declaration = '<?xml version="1.0" encoding="UTF-8"?>'
        separator = "\n" if configuration["pretty_print"] else ""
        return declaration + separator + writer.getvalue()

    def _write_metadata(self, writer: _ElementWriter, root: FileSystemNode, configuration: Mapping[str, Any]) -> None:
        metadata = self.metadata(root, configuration)
        writer.open("Metadata")
        writer.leaf("GeneratedAt", metadata["generated_at"])
        writer.leaf("RootPath", metadata["root_path"])
        writer.leaf("Renderer", metadata["renderer"])
        writer.leaf("Version", metadata["version"])
        writer.open("Configuration")
        for key, value in sorted(metadata["configuration"].items()):
            writer.leaf("Option", value, {"name": key})
        writer.close("Configuration")
        writer.close("Metadata")

    def _write_node(self, writer: _ElementWriter, root: FileSystemNode, configuration: Mapping[str, Any]) -> None:
        # Either a node still to open or the tag of an element to close
        pending: List[Union[FileSystemNode, str]] = [root]

        while pending:
            item = pending.pop()
            if isinstance(item, str):
                writer.close(item)
                continue

            node = item
            self._open_node(writer, node, configuration)

            children = self.visible_children(node, configuration) if node.is_dir else []
            if children:
                writer.open("Children")
                pending.append("Node")
                pending.append("Children")
                pending.extend(reversed(children))
                continue

            if node.is_dir:
                writer.empty("Children")
            writer.close("Node")

    def _open_node(self, writer: _ElementWriter, node: FileSystemNode, configuration: Mapping[str, Any]) -> None:
        """Open a Node element and write everything it holds except its children."""
        attributes: Dict[str, Any] = {"type": node.kind.value, "name": node.name, "path": node.full_path}
        if node.is_symlink:
            attributes["symlinkTarget"] = node.symlink_target
        writer.open("Node", attributes)

        if node.is_file:
            if configuration["show_size"]:
                writer.leaf("Size", node.size_bytes, {"formatted": node.formatted_size()})
            writer.leaf("Extension", node.extension)
            if configuration["show_timestamps"]:
                writer.leaf("Created", self.format_timestamp(node.created, configuration))
                writer.leaf("Modified", self.format_timestamp(node.modified, configuration))
                writer.leaf("Accessed", self.format_timestamp(node.accessed, configuration))

        if configuration["show_attributes"]:
            writer.leaf("IsHidden", node.is_hidden)
            writer.leaf("IsSystem", node.is_system)
            writer.leaf("IsReadOnly", node.is_read_only)

        if configuration["include_permissions"]:
            writer.leaf("Owner", node.owner)

    def _write_statistics(
        self, writer: _ElementWriter, statistics: TreeStatistics, configuration: Mapping[str, Any]
    ) -> None:
        record = self.statistics_record(statistics, configuration)
        writer.open("Statistics")
        for key in ("total_files", "total_directories", "total_size_bytes", "total_size_formatted", "max_depth"):
            writer.leaf(_pascal(key), record[key])
        for key in ("oldest_file", "newest_file"):
            summary = record[key]
            if summary is not None:
                writer.empty(_pascal(key), summary)
        writer.close("Statistics")
