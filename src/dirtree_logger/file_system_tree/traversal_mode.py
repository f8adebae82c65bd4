"""Traversal modes deciding which files and directories are materialized."""

from enum import Enum


class TraversalMode(str, Enum):
    """Traversal policy applied to every entry after the filter accepted it.

    ===========  ======================  =================  =====================
    Mode         Files                   Empty directories  Non-empty directories
    ===========  ======================  =================  =====================
    CLEAN        only if size > 0        excluded           included
    ALL_FILES    always                  excluded           excluded
    ALL_FOLDERS  excluded                included           included
    FOLDERS      excluded                excluded           included
    EVERYTHING   always                  included           included
    ===========  ======================  =================  =====================

    Values are case-sensitive.

    Example:
        >>> TraversalMode("CLEAN").includes_file(0)
        False
        >>> TraversalMode.EVERYTHING.includes_directory(has_content=False)
        True
    """

    CLEAN = "CLEAN"
    ALL_FILES = "ALL_FILES"
    ALL_FOLDERS = "ALL_FOLDERS"
    FOLDERS = "FOLDERS"
    EVERYTHING = "EVERYTHING"

    def includes_file(self, size_bytes: int) -> bool:
        if self is TraversalMode.CLEAN:
            return size_bytes > 0
        return self in (TraversalMode.ALL_FILES, TraversalMode.EVERYTHING)

    def includes_directory(self, has_content: bool) -> bool:
        if self in (TraversalMode.ALL_FOLDERS, TraversalMode.EVERYTHING):
            return True
        if self in (TraversalMode.CLEAN, TraversalMode.FOLDERS):
            return has_content
        return False

    @property
    def enters_directories(self) -> bool:
        """Whether directories are walked into at all under this mode."""
        return self is not TraversalMode.ALL_FILES

    @property
    def content_from_materialized_children(self) -> bool:
        """Whether a directory's emptiness is judged by the children that survived the walk.

        CLEAN judges by surviving children, so empty files and empty
        sub-directories make their parent empty too. The other modes judge by
        the entries the filter accepted.
        """
        return self is TraversalMode.CLEAN
