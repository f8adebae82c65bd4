"""Directory tree logging utilities.

This package walks a directory subtree, applies traversal modes and inclusion
rules, and renders the resulting tree as plain text, JSON, or XML, optionally
with aggregate statistics.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("directory-tree-logger")
except PackageNotFoundError:
    __version__ = "unknown"
