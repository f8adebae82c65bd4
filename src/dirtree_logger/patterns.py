"""Case-insensitive glob matching against bare entry names.

Patterns use shell-glob semantics (``*``, ``?``, ``[...]``) and are compiled
with pathspec's git wild-match implementation. Both the pattern and the name
are lower-cased before matching, so matching is case-insensitive on every
platform.
"""

import logging
import threading
from functools import lru_cache
from typing import Iterable, Set

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from dirtree_logger.exceptions import UnsupportedPatternError

logger = logging.getLogger(__name__)

_reported_patterns: Set[str] = set()
_reported_lock = threading.Lock()


@lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> PathSpec:
    """Compile a glob pattern for matching bare names.

    Args:
        pattern: The glob pattern, e.g. ``*.txt``.

    Returns:
        A compiled PathSpec holding the single lower-cased pattern.

    Raises:
        UnsupportedPatternError: If the pattern is empty, is a comment, or
            cannot be compiled.

    Example:
        >>> compile_glob("*.TXT").match_file("notes.txt")
        True
    """
    if not pattern or not pattern.strip():
        raise UnsupportedPatternError(pattern, "empty pattern")
    try:
        spec = PathSpec.from_lines(GitWildMatchPattern, [pattern.lower()])
    except ValueError as e:
        raise UnsupportedPatternError(pattern, str(e)) from e
    if not any(compiled.include is not None for compiled in spec.patterns):
        raise UnsupportedPatternError(pattern, "pattern matches nothing")
    return spec


def glob_matches(name: str, pattern: str) -> bool:
    """Match a bare name against one glob pattern, case-insensitively.

    A malformed pattern is reported once at WARNING level and treated as a
    non-match.

    Example:
        >>> glob_matches("README.md", "readme.*")
        True
        >>> glob_matches("README.md", "*.txt")
        False
        >>> glob_matches("README.md", "")
        False
    """
    try:
        spec = compile_glob(pattern)
    except UnsupportedPatternError as e:
        with _reported_lock:
            first_report = pattern not in _reported_patterns
            _reported_patterns.add(pattern)
        if first_report:
            logger.warning("%s; treating it as a non-match", e)
        return False
    return bool(spec.match_file(name.lower()))


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Return True if the name matches at least one of the patterns.

    Example:
        >>> matches_any("a.log", ["*.txt", "*.log"])
        True
        >>> matches_any("a.log", [])
        False
    """
    return any(glob_matches(name, pattern) for pattern in patterns)
