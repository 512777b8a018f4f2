"""Filesystem domain models for filtered tree walks.

This module defines the counters accumulated during a walk, the progress
interval owned by each recursive call, and the progress callback type.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

# (message, fraction in [0, 1]) -> None
ProgressCallback = Callable[[str, float], None]


class WalkMode(str, Enum):
    """Kind of filtered walk.

    Attributes:
        COPY: Accepted entries are mirrored into a destination tree.
        CLEAN: Rejected entries are deleted in place.
    """

    COPY = "copy"
    CLEAN = "clean"


@dataclass(slots=True)
class TreeWalkStats:
    """Counters accumulated by a single walk.

    A fresh instance is created for every walk and owned by it.

    Attributes:
        processed_folders: Directories descended into.
        pruned_folders: Directories skipped (copy) or deleted (clean).
        kept_files: Files copied (copy) or left in place (clean).
        removed_files: Files left out (copy) or deleted (clean).
    """

    processed_folders: int = 0
    pruned_folders: int = 0
    kept_files: int = 0
    removed_files: int = 0


@dataclass(frozen=True, slots=True)
class ProgressRange:
    """Slice of the 0..1 completion scale owned by one subtree.

    Attributes:
        min: Fraction reported when the subtree starts.
        max: Upper bound no report of the subtree may exceed.
    """

    min: float
    max: float

    def __post_init__(self) -> None:
        """Validate the interval bounds."""
        if not (0.0 <= self.min <= self.max <= 1.0):
            msg = f"Invalid progress range [{self.min}, {self.max}]"
            raise ValueError(msg)

    @property
    def span(self) -> float:
        return self.max - self.min

    def at(self, index: int, count: int) -> float:
        """Fraction at the start of slot ``index`` of ``count`` equal slots."""
        if count <= 0:
            return self.min
        return min(self.min + self.span * index / count, self.max)

    def split(self, count: int) -> list["ProgressRange"]:
        """Divide the range into ``count`` adjacent equal slots."""
        bounds = [self.at(i, count) for i in range(count + 1)]
        return [ProgressRange(bounds[i], bounds[i + 1]) for i in range(count)]


# Range handed to the top-level walk; the rest is left for setup/teardown
FULL_WALK_RANGE = ProgressRange(0.01, 0.99)
