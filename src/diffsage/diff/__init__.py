"""Diff parsing, filtering and retrieval."""

from diffsage.diff.classify import DiffLine, classify_line
from diffsage.diff.filter import DiffDocument, DiffFilter, FileSection, filter_diff
from diffsage.diff.path_filter import DEFAULT_EXCLUDE_PATTERNS, PathFilter

__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "DiffDocument",
    "DiffFilter",
    "DiffLine",
    "FileSection",
    "PathFilter",
    "classify_line",
    "filter_diff",
]
