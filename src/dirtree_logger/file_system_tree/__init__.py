"""Filesystem walking and the node tree it produces.

Import from the submodules directly, e.g.
``from dirtree_logger.file_system_tree.file_system_tree import FileSystemTree``.
"""
