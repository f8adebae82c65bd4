"""Permission action enum for handling unreadable entries during directory traversal."""

from enum import Enum


class PermissionAction(str, Enum):
    """Action to take when an entry cannot be read during directory traversal.

    Values:
        IGNORE: Skip the entry silently
        WARN: Skip the entry, log a warning and record it on the tree (default behavior)
        RAISE: Raise PermissionDeniedError immediately
    """

    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"
