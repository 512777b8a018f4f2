"""Filtered recursive tree walks.

The walker traverses a directory tree depth-first, consulting a
:class:`~vsclean.filtering.pattern_set.PatternSet` for every directory
and file. In copy mode the accepted entries are mirrored into a
destination tree; in clean mode the rejected entries are deleted in
place. Both modes report progress as a fraction that never decreases,
without knowing the total amount of work in advance: every call owns a
slice of the completion scale, splits it into one slot per child
directory plus one slot for its own files, and hands the slots down.

Filesystem errors are not caught here. They abort the walk and reach
the caller with the tree possibly partially modified.
"""

import logging
import shutil
import stat
from pathlib import Path

from vsclean.errors import PathOutsideRootError
from vsclean.filesystem.models import (
    FULL_WALK_RANGE,
    ProgressCallback,
    ProgressRange,
    TreeWalkStats,
)
from vsclean.filtering.pattern_set import PatternSet

logger = logging.getLogger(__name__)


class TreeWalker:
    """Walks a tree applying a pattern set.

    The walker holds no per-walk state: every call to :meth:`walk_copy`
    or :meth:`walk_clean` creates and returns its own counters.

    Args:
        patterns: Rules deciding which entries are kept. If the set has
            no root folder, the root of each walk is used.
        progress: Optional callback receiving ``(message, fraction)``.
            It is invoked synchronously from the walking thread.
    """

    def __init__(self, patterns: PatternSet, progress: ProgressCallback | None = None) -> None:
        self._patterns = patterns
        self._progress = progress

    def walk_copy(
        self,
        source: Path,
        destination: Path,
        progress_range: ProgressRange = FULL_WALK_RANGE,
    ) -> TreeWalkStats:
        """Mirror the accepted part of a tree into a destination folder.

        Pruned directories are neither descended into nor created in the
        destination. Copied files get their bytes only, with a normal
        writable mode. Symbolic links are recreated as links, dangling ones
        included.

        Args:
            source: Root of the tree to copy.
            destination: Folder receiving the mirrored tree; created if absent.
            progress_range: Slice of the completion scale for this walk.

        Returns:
            Counters for this walk.

        Raises:
            OSError: On any filesystem failure.
        """
        source = Path(source)
        stats = TreeWalkStats()
        patterns = self._rooted_patterns(source)
        self._copy(patterns, source, Path(destination), progress_range, stats)
        return stats

    def walk_clean(
        self,
        directory: Path,
        progress_range: ProgressRange = FULL_WALK_RANGE,
    ) -> TreeWalkStats:
        """Delete the rejected part of a tree in place.

        Pruned directories are removed with their whole contents, without
        inspecting them. Rejected files are made writable and deleted.

        Args:
            directory: Root of the tree to clean.
            progress_range: Slice of the completion scale for this walk.

        Returns:
            Counters for this walk.

        Raises:
            PathOutsideRootError: If recursion reaches a directory outside
                the root (e.g. through a rule or link resolving elsewhere).
            OSError: On any filesystem failure.
        """
        directory = Path(directory)
        stats = TreeWalkStats()
        patterns = self._rooted_patterns(directory)
        self._clean(patterns, directory.resolve(), directory, progress_range, stats)
        return stats

    def _rooted_patterns(self, root: Path) -> PatternSet:
        if self._patterns.root_folder:
            return self._patterns
        return self._patterns.with_root(str(root))

    def _copy(
        self,
        patterns: PatternSet,
        source: Path,
        destination: Path,
        progress_range: ProgressRange,
        stats: TreeWalkStats,
    ) -> None:
        destination.mkdir(parents=True, exist_ok=True)

        folders, files = _list_entries(source)
        slots = progress_range.split(len(folders) + 1)

        for folder, slot in zip(folders, slots, strict=False):
            if patterns.denies_directory(str(folder)):
                logger.debug("Pruned folder: %s", folder)
                stats.pruned_folders += 1
                continue
            stats.processed_folders += 1
            self._copy(patterns, folder, destination / folder.name, slot, stats)

        file_slot = slots[-1]
        self._notify(f"In folder: {source}", file_slot.min)

        for index, file in enumerate(files):
            fraction = file_slot.at(index, len(files))
            if patterns.accepts(str(file), False):
                self._notify(f"    Copying: {file.name}", fraction)
                target = destination / file.name
                if file.is_symlink():
                    _copy_link(file, target)
                else:
                    shutil.copyfile(file, target)
                    _make_writable(target)
                stats.kept_files += 1
            else:
                self._notify(f"    Skipping: {file.name}", fraction)
                stats.removed_files += 1

    def _clean(
        self,
        patterns: PatternSet,
        root: Path,
        directory: Path,
        progress_range: ProgressRange,
        stats: TreeWalkStats,
    ) -> None:
        if not directory.resolve().is_relative_to(root):
            msg = f"Folder {directory} is not under {root}"
            raise PathOutsideRootError(msg)

        folders, files = _list_entries(directory)
        slots = progress_range.split(len(folders) + 1)

        for folder, slot in zip(folders, slots, strict=False):
            if patterns.denies_directory(str(folder)):
                self._notify(f"Deleting folder: {folder}", slot.min)
                logger.debug("Deleting folder: %s", folder)
                _remove_tree(folder)
                stats.pruned_folders += 1
            else:
                self._clean(patterns, root, folder, slot, stats)
                stats.processed_folders += 1

        file_slot = slots[-1]
        self._notify(f"In folder: {directory}", file_slot.min)

        for index, file in enumerate(files):
            fraction = file_slot.at(index, len(files))
            if patterns.accepts(str(file), False):
                self._notify(f"    Keeping: {file.name}", fraction)
                stats.kept_files += 1
            else:
                self._notify(f"    Deleting: {file.name}", fraction)
                logger.debug("Deleting file: %s", file)
                _make_writable(file)
                file.unlink()
                stats.removed_files += 1

    def _notify(self, message: str, fraction: float) -> None:
        if self._progress is not None:
            self._progress(message, fraction)


def _list_entries(directory: Path) -> tuple[list[Path], list[Path]]:
    """List child directories and files of a directory, sorted by name.

    Symbolic links are listed as files, so links to directories are
    never descended into. Copies recreate them as links.
    """
    folders: list[Path] = []
    files: list[Path] = []
    for entry in sorted(directory.iterdir()):
        if entry.is_dir() and not entry.is_symlink():
            folders.append(entry)
        else:
            files.append(entry)
    return folders, files


def _copy_link(link: Path, target: Path) -> None:
    """Recreate a symbolic link with the same (possibly dangling) target."""
    if target.is_symlink() or target.exists():
        target.unlink()
    target.symlink_to(link.readlink(), target_is_directory=link.is_dir())


def _make_writable(path: Path) -> None:
    """Clear the read-only state of a file (links are left untouched)."""
    if path.is_symlink():
        return
    mode = path.stat().st_mode
    if not mode & stat.S_IWUSR:
        path.chmod(mode | stat.S_IWUSR)


def _remove_tree(path: Path) -> None:
    """Delete a directory tree, retrying entries that are read-only."""

    def _retry_writable(func, failed_path, exc):  # type: ignore[no-untyped-def]
        if not isinstance(exc, PermissionError):
            raise exc
        _make_writable(Path(failed_path))
        func(failed_path)

    shutil.rmtree(path, onexc=_retry_writable)
