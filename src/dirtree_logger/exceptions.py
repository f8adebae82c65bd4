from typing import Iterable, Optional


class DirectoryTreeError(Exception):
    """Base class for all errors raised by the directory tree logger."""

    pass


class PathNotFoundError(DirectoryTreeError, FileNotFoundError):
    """
    Exception raised when the root path of a build does not exist.

    This error is fatal: it is raised before any tree is built.

    Attributes:
        path (str): The path that could not be found.

    Example:
        >>> error = PathNotFoundError("/no/such/dir")
        >>> str(error)
        'Root path does not exist: /no/such/dir'
        >>> isinstance(error, FileNotFoundError)
        True
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Root path does not exist: {path}")


class NotADirectoryError(DirectoryTreeError, NotADirectoryError):  # noqa: A001
    """
    Exception raised when the root path of a build is not a directory.

    Shadows the builtin of the same name while remaining an instance of it,
    so callers catching the builtin keep working.

    Attributes:
        path (str): The offending path.

    Example:
        >>> import builtins
        >>> error = NotADirectoryError("/etc/hostname")
        >>> str(error)
        'Root path is not a directory: /etc/hostname'
        >>> isinstance(error, builtins.NotADirectoryError)
        True
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Root path is not a directory: {path}")


class PermissionDeniedError(DirectoryTreeError, PermissionError):
    """
    Exception raised when an entry is unreadable and the permission action is RAISE.

    With the default permission action the entry is skipped and a warning is
    recorded instead; this exception only surfaces when the caller asks for it.

    Attributes:
        path (str): Path of the unreadable entry.
        reason (str): Description of the underlying OS error.

    Example:
        >>> error = PermissionDeniedError("/root/secret", "Permission denied")
        >>> str(error)
        'Access denied to /root/secret: Permission denied'
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Access denied to {path}: {reason}")


class InvalidConfigurationError(DirectoryTreeError, ValueError):
    """
    Exception raised when a configuration mapping is missing keys or holds out-of-range values.

    Raised before traversal or rendering begins, so no partial output is ever produced.

    Attributes:
        problems (list[str]): Individual validation failures.

    Example:
        >>> error = InvalidConfigurationError(["max_depth must be >= -1, got -2"])
        >>> str(error)
        'Invalid configuration: max_depth must be >= -1, got -2'
        >>> error.problems
        ['max_depth must be >= -1, got -2']
    """

    def __init__(self, problems: Iterable[str], context: Optional[str] = None) -> None:
        self.problems = list(problems)
        prefix = f"Invalid {context} configuration" if context else "Invalid configuration"
        super().__init__(f"{prefix}: {'; '.join(self.problems)}")


class UnsupportedPatternError(DirectoryTreeError, ValueError):
    """
    Exception raised when a glob pattern cannot be compiled.

    Filters convert this into a non-match so that one bad pattern never aborts
    a walk over a large tree.

    Attributes:
        pattern (str): The malformed pattern.

    Example:
        >>> error = UnsupportedPatternError("[", "unterminated character class")
        >>> str(error)
        "Unsupported pattern '[': unterminated character class"
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Unsupported pattern '{pattern}': {reason}")
