"""Plain-text renderer drawing the tree with box glyphs."""

from typing import Any, Dict, Iterator, List, Mapping, Tuple

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.statistics import TreeStatistics

from .base_renderer import Option, Renderer, check_bool, display_text

UNICODE_GLYPHS = ("├── ", "└── ", "│   ", "    ")
ASCII_GLYPHS = ("|-- ", "`-- ", "|   ", "    ")


class TextRenderer(Renderer):
    """Renderer producing a tree similar to the Unix 'tree' command.

    Siblings keep the builder's order. Non-last siblings get a branch glyph, the
    last sibling a corner glyph, and every ancestor level that still has further
    siblings a vertical continuation. Directories are marked with a trailing
    slash. With pretty_print disabled the glyphs are replaced by plain two-space
    indentation.

    Each line may carry a size suffix, timestamps, attribute tags and the owner,
    depending on the configuration. An optional header lists the generation
    time, root path and active configuration, and an optional footer lists the
    statistics.

    Example:
        >>> from datetime import datetime
        >>> from dirtree_logger.file_system_tree.entry import EntryDescriptor
        >>> from dirtree_logger.types import NodeKind
        >>> when = datetime(2024, 1, 1)
        >>> root = FileSystemNode(EntryDescriptor("R", "/R", NodeKind.DIRECTORY, 0, when, when, when))
        >>> n = FileSystemNode(EntryDescriptor("N", "/R/N", NodeKind.DIRECTORY, 0, when, when, when), parent=root)
        >>> for name, size in (("f1.txt", 1024), ("f2.txt", 2048)):
        ...     entry = EntryDescriptor(name, "/R/N/" + name, NodeKind.FILE, size, when, when, when)
        ...     _ = FileSystemNode(entry, parent=n)
        >>> print(TextRenderer({"include_metadata": False}).format(root))
        R/
        └── N/
            ├── f1.txt (1.00 KB)
            └── f2.txt (2.00 KB)
    """

    name = "text"
    content_type = "text/plain"
    file_extension = ".txt"
    OPTIONS = {"ascii_only": Option(False, check_bool)}

    def _render(self, root: FileSystemNode, configuration: Dict[str, Any], statistics: TreeStatistics) -> str:
        sections: List[str] = []

        if configuration["include_metadata"]:
            sections.append("\n".join(self._header_lines(root, configuration)))

        sections.append("\n".join(self._tree_lines(root, configuration)))

        if configuration["include_statistics"]:
            sections.append("\n".join(self._statistics_lines(statistics, configuration)))

        return "\n\n".join(sections)

    def _header_lines(self, root: FileSystemNode, configuration: Mapping[str, Any]) -> Iterator[str]:
        metadata = self.metadata(root, configuration)
        yield "Directory Tree"
        yield f"Generated: {metadata['generated_at']}"
        yield f"Root: {metadata['root_path']}"
        options = ", ".join(f"{key}={value}" for key, value in sorted(metadata["configuration"].items()))
        yield f"Configuration: {options}"

    def _tree_lines(self, root: FileSystemNode, configuration: Mapping[str, Any]) -> Iterator[str]:
        if configuration["pretty_print"]:
            glyphs = ASCII_GLYPHS if configuration["ascii_only"] else UNICODE_GLYPHS
        else:
            glyphs = ("  ", "  ", "  ", "  ")
        branch, corner, vertical, blank = glyphs

        # (node, prefix, is_last), popped in sibling order
        pending: List[Tuple[FileSystemNode, str, bool]] = []

        def push_children(node: FileSystemNode, prefix: str) -> None:
            children = self.visible_children(node, configuration)
            last = len(children) - 1
            for i in range(last, -1, -1):
                pending.append((children[i], prefix, i == last))

        yield self._describe(root, configuration)
        push_children(root, "")

        while pending:
            node, prefix, is_last = pending.pop()
            connector = corner if is_last else branch
            yield f"{prefix}{connector}{self._describe(node, configuration)}"
            push_children(node, prefix + (blank if is_last else vertical))

    def _describe(self, node: FileSystemNode, configuration: Mapping[str, Any]) -> str:
        name = display_text(node.name)
        line = f"{name}/" if node.is_dir else name

        if node.is_symlink and node.symlink_target:
            arrow = "->" if configuration["ascii_only"] else "→"
            line += f" {arrow} {display_text(node.symlink_target)}"

        if configuration["show_size"] and node.is_file:
            line += f" ({node.formatted_size()})"

        if configuration["show_timestamps"]:
            stamps = [
                f"modified: {self.format_timestamp(node.modified, configuration)}",
                f"created: {self.format_timestamp(node.created, configuration)}",
                f"accessed: {self.format_timestamp(node.accessed, configuration)}",
            ]
            line += f" [{', '.join(stamps)}]"

        if configuration["show_attributes"] or configuration["include_permissions"]:
            flags = (("Hidden", node.is_hidden), ("System", node.is_system), ("ReadOnly", node.is_read_only))
            tags = [tag for tag, flag in flags if flag]
            if tags:
                line += f" [{', '.join(tags)}]"

        if configuration["include_permissions"] and node.owner:
            line += f" (owner: {node.owner})"

        return line

    def _statistics_lines(self, statistics: TreeStatistics, configuration: Mapping[str, Any]) -> Iterator[str]:
        record = self.statistics_record(statistics, configuration)
        yield "Statistics"
        yield f"  Total files: {record['total_files']}"
        yield f"  Total directories: {record['total_directories']}"
        yield f"  Total size: {record['total_size_formatted']} ({record['total_size_bytes']} bytes)"
        yield f"  Max depth: {record['max_depth']}"
        for label, key in (("Oldest file", "oldest_file"), ("Newest file", "newest_file")):
            summary = record[key]
            if summary is not None:
                yield f"  {label}: {summary['path']} (created {summary['created']})"
