from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class NodeKind(str, Enum):
    """Enumeration of the kinds of entries materialized in a directory tree.

    Symbolic links are traversed as the kind of their target, so there is no
    separate symlink kind; a node records whether it was reached through a link.

    Attributes:
        FILE: Regular file (or anything that is not a directory)
        DIRECTORY: Directory
    """

    FILE = "file"
    DIRECTORY = "directory"
