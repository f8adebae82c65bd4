"""Filesystem entry descriptors.

An EntryDescriptor is the plain-data snapshot a FileSystemNode is built from.
All filesystem I/O happens in describe_path; node construction itself never
touches the disk.
"""

import os
import stat
from datetime import datetime
from pathlib import Path
from typing import NamedTuple, Optional

from dirtree_logger.file_system_tree import attributes
from dirtree_logger.file_system_tree.file_identifier import FileIdentifier
from dirtree_logger.types import NodeKind, PathType


class EntryDescriptor(NamedTuple):
    """Snapshot of one filesystem entry.

    Attributes:
        name: Base name of the entry.
        full_path: Absolute path of the entry.
        kind: FILE or DIRECTORY (symlinks are described as their target kind).
        size_bytes: Size in bytes for files, 0 for directories.
        created: Creation time (birth time where available, else ctime).
        modified: Last modification time.
        accessed: Last access time.
        is_hidden: Hidden flag.
        is_system: System flag.
        is_read_only: Read-only flag.
        owner: Owning user name, or None if unknown.
        is_symlink: True if the entry was reached through a symbolic link.
        symlink_target: Raw link target for symlinks.
        identifier: Device/inode identity used for loop detection.

    Example:
        >>> from datetime import datetime
        >>> when = datetime(2024, 1, 1)
        >>> entry = EntryDescriptor("a.txt", "/tmp/a.txt", NodeKind.FILE, 10, when, when, when)
        >>> entry.is_hidden, entry.owner
        (False, None)
    """

    name: str
    full_path: str
    kind: NodeKind
    size_bytes: int
    created: datetime
    modified: datetime
    accessed: datetime
    is_hidden: bool = False
    is_system: bool = False
    is_read_only: bool = False
    owner: Optional[str] = None
    is_symlink: bool = False
    symlink_target: Optional[str] = None
    identifier: Optional[FileIdentifier] = None

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


def _creation_time(stat_result: os.stat_result) -> float:
    birth_time = getattr(stat_result, "st_birthtime", None)
    if birth_time is not None:
        return float(birth_time)
    return stat_result.st_ctime


def describe_path(path: PathType) -> EntryDescriptor:
    """Stat a path and describe it.

    Symbolic links are followed so that links are traversed as their target
    kind. A dangling link is described from the link itself as an empty file.

    Args:
        path: Path to describe.

    Returns:
        The descriptor of the entry.

    Raises:
        PermissionError: If the entry cannot be stat'ed due to permissions.
        FileNotFoundError: If the entry vanished.
    """
    entry_path = Path(path)
    full_path = os.path.abspath(entry_path)
    # "." and ".." have no usable name until resolved
    name = os.path.basename(full_path) or full_path

    is_symlink = entry_path.is_symlink()
    symlink_target = None
    if is_symlink:
        try:
            symlink_target = os.readlink(entry_path)
        except OSError:
            pass

    dangling = False
    try:
        stat_result = entry_path.stat()
    except FileNotFoundError:
        if not is_symlink:
            raise
        # Dangling link: describe the link itself
        stat_result = entry_path.lstat()
        dangling = True

    kind = NodeKind.DIRECTORY if stat.S_ISDIR(stat_result.st_mode) else NodeKind.FILE

    return EntryDescriptor(
        name=name,
        full_path=full_path,
        kind=kind,
        size_bytes=0 if kind is NodeKind.DIRECTORY or dangling else stat_result.st_size,
        created=datetime.fromtimestamp(_creation_time(stat_result)),
        modified=datetime.fromtimestamp(stat_result.st_mtime),
        accessed=datetime.fromtimestamp(stat_result.st_atime),
        is_hidden=attributes.is_hidden(name, stat_result),
        is_system=False if dangling else attributes.is_system(stat_result),
        is_read_only=attributes.is_read_only(stat_result),
        owner=attributes.owner_name(stat_result),
        is_symlink=is_symlink,
        symlink_target=symlink_target,
        identifier=FileIdentifier.from_stat(stat_result),
    )
