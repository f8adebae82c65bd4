"""Filter provider using .gitignore pattern syntax on paths relative to the tree root."""

import logging
from os import PathLike
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from dirtree_logger.file_system_tree.file_system_node import FileSystemNode
from dirtree_logger.types import PathType

from .base_filter import BaseFilterProvider

logger = logging.getLogger(__name__)


class GitIgnoreFilter(BaseFilterProvider):
    """Filter provider that rejects entries matched by .gitignore-style rules.

    Unlike the reference filter, which matches bare names, this provider matches
    the entry's path relative to the tree root (with ``/`` separators and a
    trailing ``/`` for directories), so rules such as ``build/``, ``docs/*.md``
    and negations such as ``!keep.log`` behave as they do in Git.

    Rules can be loaded from one or more files or added one at a time; later
    rules override earlier ones. The root path is captured in pre_process, which
    the tree builder calls before the walk.

    Attributes:
        spec (PathSpec): Compiled pattern matcher from the pathspec library.

    Example:
        >>> rules = GitIgnoreFilter()
        >>> rules.add_rule("build/")
        >>> rules.add_rule("*.pyc")
        >>> rules.is_ignored("build/out.js"), rules.is_ignored("src/app.pyc"), rules.is_ignored("src/app.py")
        (True, True, False)
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize the filter with patterns from the given rule files.

        Args:
            rules_files: Path(s) to files containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self.spec = PathSpec.from_lines(GitWildMatchPattern, [])
        self._root_path: Optional[str] = None
        self._sources: List[str] = []

        if rules_files is not None:
            self.load_rules(rules_files)

    def pre_process(self, root: FileSystemNode) -> None:
        self._root_path = root.full_path

    def should_include(self, node: FileSystemNode) -> bool:
        if not self.spec.patterns:
            return True
        if self._root_path is None:
            # Not driven by a tree builder: fall back to the bare name
            relative = node.name
        else:
            relative = node.relative_path(self._root_path).replace("\\", "/")
        if not relative:
            return True
        if node.is_dir:
            relative += "/"
        return not self.is_ignored(relative)

    def is_ignored(self, relative_path: str) -> bool:
        """Check a root-relative path against the loaded rules."""
        return bool(self.spec.match_file(relative_path))

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and combine .gitignore patterns from one or more files.

        Args:
            rules_files: Path(s) to files containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()

            self._extend(PathSpec.from_lines(GitWildMatchPattern, lines).patterns)
            self._sources.append(str(path))
            logger.debug("Loaded %d rule line(s) from %s", len(lines), path)

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern, e.g. ``node_modules/`` or ``!keep.log``."""
        self._extend([GitWildMatchPattern(rule)])
        self._sources.append(rule)

    def has_rules(self) -> bool:
        return bool(self.spec.patterns)

    def _extend(self, patterns: Sequence[Any]) -> None:
        # Recompile rather than mutate the spec's pattern collection in place
        self.spec = PathSpec([*self.spec.patterns, *patterns])

    def describe(self) -> Dict[str, Any]:
        return {"provider": type(self).__name__, "rules": list(self._sources)}
