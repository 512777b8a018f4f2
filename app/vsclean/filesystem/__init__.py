"""Filtered tree walking and the operations built on it.

This module provides the filtered copy/clean walker, its progress and
counter models, and the backup, copy and clean operations.
"""

from vsclean.filesystem.models import (
    FULL_WALK_RANGE,
    ProgressCallback,
    ProgressRange,
    TreeWalkStats,
    WalkMode,
)
from vsclean.filesystem.operations import (
    OperationResult,
    source_backup,
    source_clean,
    source_copy,
)
from vsclean.filesystem.walker import TreeWalker

__all__ = [
    "FULL_WALK_RANGE",
    "OperationResult",
    "ProgressCallback",
    "ProgressRange",
    "TreeWalkStats",
    "TreeWalker",
    "WalkMode",
    "source_backup",
    "source_clean",
    "source_copy",
]
