"""Filter providers deciding which entries are materialized in the tree."""

from .base_filter import BaseFilterProvider
from .composite_filter import CompositeFilter
from .configuration import FilterConfiguration, parse_file_size
from .git_filter import GitIgnoreFilter
from .pattern_filter import PatternFilter

__all__ = [
    "BaseFilterProvider",
    "CompositeFilter",
    "FilterConfiguration",
    "GitIgnoreFilter",
    "PatternFilter",
    "parse_file_size",
]
