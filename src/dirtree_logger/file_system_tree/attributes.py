"""Platform-dependent attribute detection for filesystem entries.

Hidden, system, and read-only flags are read from Windows file attributes
where the platform provides them, and from naming and mode conventions
elsewhere. Owner lookup uses the password database on POSIX systems.
"""

import os
import stat
from typing import Optional

try:
    import pwd
except ImportError:  # Windows has no password database
    pwd = None  # type: ignore[assignment]


def _windows_attributes(stat_result: os.stat_result) -> Optional[int]:
    return getattr(stat_result, "st_file_attributes", None)


def is_hidden(name: str, stat_result: os.stat_result) -> bool:
    """Return True if the entry is hidden.

    Example:
        >>> import os
        >>> st = os.stat(".")
        >>> is_hidden(".git", st)
        True
    """
    if name.startswith("."):
        return True
    attributes = _windows_attributes(stat_result)
    return attributes is not None and bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)


def is_system(stat_result: os.stat_result) -> bool:
    """Return True for system entries.

    On Windows this is the SYSTEM attribute. On POSIX systems, entries that are
    neither regular files nor directories (sockets, FIFOs, device nodes) are
    treated as system entries.
    """
    attributes = _windows_attributes(stat_result)
    if attributes is not None:
        return bool(attributes & stat.FILE_ATTRIBUTE_SYSTEM)
    mode = stat_result.st_mode
    return not (stat.S_ISREG(mode) or stat.S_ISDIR(mode))


def is_read_only(stat_result: os.stat_result) -> bool:
    """Return True if the owner cannot write to the entry."""
    attributes = _windows_attributes(stat_result)
    if attributes is not None:
        return bool(attributes & stat.FILE_ATTRIBUTE_READONLY)
    return not stat_result.st_mode & stat.S_IWUSR


def owner_name(stat_result: os.stat_result) -> Optional[str]:
    """Return the owning user's name, the numeric uid, or None if unavailable."""
    uid = getattr(stat_result, "st_uid", None)
    if uid is None:
        return None
    if pwd is not None:
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            pass
    return str(uid)
