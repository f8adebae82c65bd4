"""Filter configuration and size parsing."""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from humanfriendly import InvalidSize, parse_size

from dirtree_logger.exceptions import InvalidConfigurationError


def parse_file_size(size: Union[str, int]) -> int:
    """Parse a human-readable file size to bytes.

    Units are binary, so ``1KB`` and ``1KiB`` both mean 1024 bytes, matching
    the way sizes are rendered.

    Args:
        size: Size like '100MB', '2.5K', '1024', or an int byte count.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the size is negative or not a valid size format.

    Example:
        >>> parse_file_size("1KB")
        1024
        >>> parse_file_size("2 MiB")
        2097152
        >>> parse_file_size(10)
        10
    """
    if isinstance(size, bool):
        raise ValueError(f"Invalid size format '{size}'")
    if isinstance(size, int):
        if size < 0:
            raise ValueError("Size cannot be negative")
        return size
    try:
        return int(parse_size(size, binary=True))
    except (InvalidSize, ValueError, TypeError) as e:
        raise ValueError(f"Invalid size format '{size}': {e}")


def _as_pattern_set(value: Any, key: str, problems: List[str]) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable):
        problems.append(f"{key} must be a collection of glob strings, got {type(value).__name__}")
        return frozenset()
    patterns = list(value)
    bad = [p for p in patterns if not isinstance(p, str)]
    if bad:
        problems.append(f"{key} must contain only strings, got {bad!r}")
    return frozenset(p for p in patterns if isinstance(p, str))


@dataclass(frozen=True)
class FilterConfiguration:
    """Options of the reference filter. Immutable for the duration of a build.

    Attributes:
        enabled: When False, every entry is included.
        exclude_patterns: Glob patterns; a matching name is rejected.
        include_patterns: Glob patterns; when non-empty, only matching names are included.
        max_size_bytes: Files larger than this are rejected. None means no limit.
        ignore_hidden: Reject hidden entries.
        ignore_system: Reject system entries.

    Example:
        >>> config = FilterConfiguration.from_mapping({"exclude_patterns": ["*.txt"], "max_size_bytes": "1KB"})
        >>> sorted(config.exclude_patterns), config.max_size_bytes
        (['*.txt'], 1024)
    """

    enabled: bool = True
    exclude_patterns: FrozenSet[str] = frozenset()
    include_patterns: FrozenSet[str] = frozenset()
    max_size_bytes: Optional[int] = None
    ignore_hidden: bool = False
    ignore_system: bool = False

    def __post_init__(self) -> None:
        problems: List[str] = []
        object.__setattr__(
            self, "exclude_patterns", _as_pattern_set(self.exclude_patterns, "exclude_patterns", problems)
        )
        object.__setattr__(
            self, "include_patterns", _as_pattern_set(self.include_patterns, "include_patterns", problems)
        )
        if self.max_size_bytes is not None:
            if isinstance(self.max_size_bytes, bool) or not isinstance(self.max_size_bytes, int):
                problems.append(f"max_size_bytes must be an integer or None, got {self.max_size_bytes!r}")
            elif self.max_size_bytes < 0:
                problems.append(f"max_size_bytes cannot be negative, got {self.max_size_bytes}")
        for flag in ("enabled", "ignore_hidden", "ignore_system"):
            if not isinstance(getattr(self, flag), bool):
                problems.append(f"{flag} must be a boolean, got {getattr(self, flag)!r}")
        if problems:
            raise InvalidConfigurationError(problems, "filter")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "FilterConfiguration":
        """Build a configuration from a mapping of named options.

        ``max_size_bytes`` may be an int or a human-readable size string.

        Raises:
            InvalidConfigurationError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise InvalidConfigurationError([f"unknown option(s): {', '.join(unknown)}"], "filter")

        values = dict(mapping)
        max_size = values.get("max_size_bytes")
        if isinstance(max_size, str):
            try:
                values["max_size_bytes"] = parse_file_size(max_size)
            except ValueError as e:
                raise InvalidConfigurationError([str(e)], "filter")
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Plain, deterministic representation used in rendered metadata."""
        data = asdict(self)
        data["exclude_patterns"] = sorted(self.exclude_patterns)
        data["include_patterns"] = sorted(self.include_patterns)
        return data
