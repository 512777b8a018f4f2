"""Backup, copy and clean operations on source trees.

Each operation validates the source folder, resolves and compiles the
filter script before touching the filesystem, runs one filtered walk,
and reports progress through the callback it is given. The walk gets
the ``[0.01, 0.99]`` slice of the completion scale; the remainder is
used for setup and teardown notices, and the final summary is always
reported at ``1.0``.
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from vsclean.errors import FileSystemError, VscleanError
from vsclean.filesystem.models import (
    FULL_WALK_RANGE,
    ProgressCallback,
    TreeWalkStats,
    WalkMode,
)
from vsclean.filesystem.walker import TreeWalker
from vsclean.filtering.defaults import FilterScript, resolve_filter_script
from vsclean.filtering.pattern_set import PatternSet
from vsclean.models.settings import ArchiveFormat, Settings

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES: dict[str, str] = {
    "zip": ".zip",
    "tar": ".tar",
    "gztar": ".tar.gz",
    "bztar": ".tar.bz2",
    "xztar": ".tar.xz",
}


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a backup, copy or clean operation.

    Attributes:
        mode: Whether entries were copied or deleted.
        source: Absolute source folder.
        stats: Counters of the walk.
        script: The filter script that was applied.
        archive_path: Created archive (backup only).
        destination: Mirrored tree (copy only).
    """

    mode: WalkMode
    source: Path
    stats: TreeWalkStats
    script: FilterScript
    archive_path: Path | None = None
    destination: Path | None = None

    @property
    def summary(self) -> str:
        """One-line summary of the counters."""
        s = self.stats
        if self.mode == WalkMode.CLEAN:
            return (
                f"Kept: {s.kept_files} ({s.processed_folders} folders), "
                f"Deleted: {s.removed_files} ({s.pruned_folders} folders)"
            )
        return (
            f"Copied: {s.kept_files} ({s.processed_folders} folders), "
            f"Skipped: {s.removed_files} ({s.pruned_folders} folders)"
        )


def source_backup(
    folder: Path,
    *,
    exclude_version_control: bool | None = None,
    archive_path: Path | None = None,
    archive_format: ArchiveFormat | None = None,
    filter_script: str | None = None,
    settings: Settings | None = None,
    progress: ProgressCallback | None = None,
) -> OperationResult:
    """Archive the filtered contents of a source tree.

    The accepted part of the tree is mirrored into a temporary folder,
    which is then packed with :func:`shutil.make_archive`. The archive
    contains the tree's contents at its top level.

    Args:
        folder: Source tree to back up.
        exclude_version_control: Leave ``.git/`` and ``$tf/`` at the root
            out of the archive. Defaults to the settings value.
        archive_path: Archive to create. Defaults to
            ``<folder>/<folder name><suffix>``. An existing file is replaced.
        archive_format: Archive format. Defaults to the settings value.
        filter_script: Explicit filter script text.
        settings: User settings. Defaults are used when None.
        progress: Optional progress callback.

    Returns:
        OperationResult with the archive path.

    Raises:
        FileSystemError: If the source is missing or any I/O fails.
        InvalidPatternError: If the filter script is malformed.
    """
    settings = settings or Settings()
    source = _prepare_source(folder)
    if exclude_version_control is None:
        exclude_version_control = settings.backup.exclude_version_control
    fmt = archive_format or settings.backup.archive_format

    script = _load_script(source, filter_script, settings)
    if exclude_version_control:
        script = script.with_version_control_rules()
    patterns = PatternSet.from_script(script.text, root_folder=str(source))

    if archive_path is None:
        archive = source / f"{source.name}{ARCHIVE_SUFFIXES[fmt]}"
    else:
        archive = Path(archive_path).resolve()

    logger.info("Backing up %s to %s", source, archive)
    _notify(progress, f"Using {script.describe()}", 0.0)

    try:
        if archive.exists():
            _notify(progress, f"Deleting existing archive: {archive}", 0.005)
            archive.unlink()

        tmp = tempfile.TemporaryDirectory(prefix="vsclean-")
        try:
            staging = Path(tmp.name) / "tree"
            stats = TreeWalker(patterns, progress).walk_copy(source, staging, FULL_WALK_RANGE)

            _notify(progress, f"Creating archive: {archive}", 0.99)
            built = shutil.make_archive(str(Path(tmp.name) / "archive"), fmt, root_dir=staging)
            archive.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(built, archive)

            _notify(progress, "Deleting temporary folder", 0.995)
        finally:
            tmp.cleanup()
    except VscleanError:
        raise
    except OSError as e:
        msg = f"Backup of {source} failed: {e}"
        raise FileSystemError(msg) from e

    result = OperationResult(
        mode=WalkMode.COPY,
        source=source,
        stats=stats,
        script=script,
        archive_path=archive,
    )
    _finish(progress, result)
    return result


def source_copy(
    folder: Path,
    destination: Path,
    *,
    exclude_version_control: bool | None = None,
    filter_script: str | None = None,
    settings: Settings | None = None,
    progress: ProgressCallback | None = None,
) -> OperationResult:
    """Copy the filtered contents of a source tree into a destination folder.

    A destination that already exists is deleted and recreated empty.

    Args:
        folder: Source tree to copy.
        destination: Folder receiving the filtered tree. Must not lie
            inside the source tree.
        exclude_version_control: Leave ``.git/`` and ``$tf/`` at the root
            out of the copy. Defaults to the settings value.
        filter_script: Explicit filter script text.
        settings: User settings. Defaults are used when None.
        progress: Optional progress callback.

    Returns:
        OperationResult with the destination path.

    Raises:
        FileSystemError: If the source is missing, the destination lies
            inside the source, or any I/O fails.
        InvalidPatternError: If the filter script is malformed.
    """
    settings = settings or Settings()
    source = _prepare_source(folder)
    target = Path(destination).resolve()
    if target.is_relative_to(source):
        msg = f"Destination {target} must not lie inside the source folder {source}"
        raise FileSystemError(msg)
    if exclude_version_control is None:
        exclude_version_control = settings.backup.exclude_version_control

    script = _load_script(source, filter_script, settings)
    if exclude_version_control:
        script = script.with_version_control_rules()
    patterns = PatternSet.from_script(script.text, root_folder=str(source))

    logger.info("Copying %s to %s", source, target)
    _notify(progress, f"Using {script.describe()}", 0.0)

    try:
        if target.exists():
            _notify(progress, f"Clearing destination: {target}", 0.005)
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        stats = TreeWalker(patterns, progress).walk_copy(source, target, FULL_WALK_RANGE)
    except VscleanError:
        raise
    except OSError as e:
        msg = f"Copy of {source} failed: {e}"
        raise FileSystemError(msg) from e

    result = OperationResult(
        mode=WalkMode.COPY,
        source=source,
        stats=stats,
        script=script,
        destination=target,
    )
    _finish(progress, result)
    return result


def source_clean(
    folder: Path,
    *,
    filter_script: str | None = None,
    settings: Settings | None = None,
    progress: ProgressCallback | None = None,
) -> OperationResult:
    """Delete the filtered-out parts of a source tree in place.

    Version-control folders are never added to the rules here.

    Args:
        folder: Source tree to clean.
        filter_script: Explicit filter script text.
        settings: User settings. Defaults are used when None.
        progress: Optional progress callback.

    Returns:
        OperationResult for the clean.

    Raises:
        FileSystemError: If the source is missing or any I/O fails.
        InvalidPatternError: If the filter script is malformed.
        PathOutsideRootError: If the walk escapes the source folder.
    """
    settings = settings or Settings()
    source = _prepare_source(folder)

    script = _load_script(source, filter_script, settings)
    patterns = PatternSet.from_script(script.text, root_folder=str(source))

    logger.info("Cleaning %s", source)
    _notify(progress, f"Using {script.describe()}", 0.0)

    try:
        stats = TreeWalker(patterns, progress).walk_clean(source, FULL_WALK_RANGE)
    except VscleanError:
        raise
    except OSError as e:
        msg = f"Clean of {source} failed: {e}"
        raise FileSystemError(msg) from e

    result = OperationResult(mode=WalkMode.CLEAN, source=source, stats=stats, script=script)
    _finish(progress, result)
    return result


def _prepare_source(folder: Path) -> Path:
    """Validate a source folder and return its absolute path."""
    if not str(folder):
        msg = "Source folder path is empty"
        raise FileSystemError(msg)

    path = Path(folder)
    if not path.exists():
        msg = f"Folder {path} does not exist"
        raise FileSystemError(msg)
    if not path.is_dir():
        msg = f"{path} is not a folder"
        raise FileSystemError(msg)
    return path.resolve()


def _notify(progress: ProgressCallback | None, message: str, fraction: float) -> None:
    if progress is not None:
        progress(message, fraction)


def _finish(progress: ProgressCallback | None, result: OperationResult) -> None:
    logger.info("%s: %s", result.source, result.summary)
    _notify(progress, result.summary, 1.0)


def _load_script(source: Path, filter_script: str | None, settings: Settings) -> FilterScript:
    try:
        return resolve_filter_script(source, script=filter_script, settings=settings)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read filter script in {source}: {e}"
        raise FileSystemError(msg) from e
