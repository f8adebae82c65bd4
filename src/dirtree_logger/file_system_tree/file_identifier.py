"""Device/inode identity for filesystem entries."""

import os
from typing import NamedTuple


class FileIdentifier(NamedTuple):
    """Identity of a file or directory as the pair (device, inode).

    Two paths with the same identifier refer to the same underlying entry, which
    is how the tree builder recognizes a directory it is already inside when a
    symbolic link points back up the tree.

    Attributes:
        device_id: The st_dev value.
        inode_number: The st_ino value.

    Example:
        >>> FileIdentifier(1, 42) == FileIdentifier(1, 42)
        True
        >>> FileIdentifier(1, 42) in {FileIdentifier(2, 42)}
        False
    """

    device_id: int
    inode_number: int

    @classmethod
    def from_stat(cls, stat_result: os.stat_result) -> "FileIdentifier":
        return cls(stat_result.st_dev, stat_result.st_ino)

    @property
    def is_reliable(self) -> bool:
        """False when the platform reports no inode (some Windows filesystems)."""
        return self.inode_number != 0
