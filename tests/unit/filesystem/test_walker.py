"""Unit tests for TreeWalker.

Tests filtered copy and clean walks: pruning, counters, progress
reporting, containment checks and error propagation.
"""

import os
import stat
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from vsclean.errors import PathOutsideRootError
from vsclean.filesystem.models import FULL_WALK_RANGE, ProgressRange, TreeWalkStats
from vsclean.filesystem.walker import TreeWalker
from vsclean.filtering.defaults import DEFAULT_FILTER_SCRIPT, VERSION_CONTROL_RULES
from vsclean.filtering.pattern_set import PatternSet

Progress = Callable[[str, float], None]


def _files_under(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


def _patterns(script: str, root: Path) -> PatternSet:
    return PatternSet.from_script(script, root_folder=str(root))


def _assert_monotonic_within(fractions: list[float], rng: ProgressRange) -> None:
    assert fractions, "expected progress notifications"
    assert fractions == sorted(fractions)
    assert all(rng.min <= f <= rng.max for f in fractions)


class TestWalkCopy:
    """Tests for TreeWalker.walk_copy."""

    def test_default_filter_with_version_control(
        self, project_tree: Path, tmp_path: Path
    ) -> None:
        """Build output and .git are left out of the mirror."""
        destination = tmp_path / "mirror"
        patterns = _patterns(VERSION_CONTROL_RULES + DEFAULT_FILTER_SCRIPT, project_tree)

        stats = TreeWalker(patterns).walk_copy(project_tree, destination)

        assert _files_under(destination) == {"src/main.cs"}
        assert stats.pruned_folders >= 2
        assert stats.kept_files == 1
        assert stats.processed_folders == 1
        assert not (destination / "bin").exists()
        assert not (destination / ".git").exists()

    def test_file_content_copied(self, make_tree: Callable[..., Path], tmp_path: Path) -> None:
        """Copied files carry the source bytes."""
        source = make_tree("a/b/c.txt")
        destination = tmp_path / "out"

        TreeWalker(PatternSet()).walk_copy(source, destination)

        assert (destination / "a" / "b" / "c.txt").read_text() == "a/b/c.txt"

    def test_rejected_files_counted(self, make_tree: Callable[..., Path], tmp_path: Path) -> None:
        """Files rejected by a rule are counted as removed and not copied."""
        source = make_tree("App.sln", "App.suo", "src/App.pdb", "src/Program.cs")
        destination = tmp_path / "out"

        stats = TreeWalker(_patterns("*.suo\n*.pdb", source)).walk_copy(source, destination)

        assert _files_under(destination) == {"App.sln", "src/Program.cs"}
        assert stats == TreeWalkStats(
            processed_folders=1, pruned_folders=0, kept_files=2, removed_files=2
        )

    def test_empty_directories_mirrored(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """Accepted empty directories exist in the mirror."""
        source = make_tree("docs/", "src/keep.cs")
        destination = tmp_path / "out"

        TreeWalker(PatternSet()).walk_copy(source, destination)

        assert (destination / "docs").is_dir()

    def test_pruned_directory_contents_never_inspected(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """A negated rule below a pruned directory has no effect."""
        source = make_tree("bin/keep.dll", "bin/other.dll")
        destination = tmp_path / "out"
        patterns = _patterns("**/bin/\n!bin/keep.dll", source)

        stats = TreeWalker(patterns).walk_copy(source, destination)

        assert _files_under(destination) == set()
        assert stats.pruned_folders == 1
        assert stats.kept_files == 0
        assert stats.removed_files == 0

    def test_unrooted_pattern_set_uses_walk_root(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """A set without a root folder is rooted at the walk source."""
        source = make_tree("x.txt", "sub/x.txt")
        destination = tmp_path / "out"

        TreeWalker(PatternSet.from_script("/x.txt")).walk_copy(source, destination)

        assert _files_under(destination) == {"sub/x.txt"}

    def test_copied_files_are_writable(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """Read-only sources produce writable copies."""
        source = make_tree("ro.txt")
        (source / "ro.txt").chmod(stat.S_IRUSR)
        destination = tmp_path / "out"

        try:
            TreeWalker(PatternSet()).walk_copy(source, destination)
        finally:
            (source / "ro.txt").chmod(stat.S_IRUSR | stat.S_IWUSR)

        assert os.access(destination / "ro.txt", os.W_OK)

    def test_stats_fresh_per_walk(self, make_tree: Callable[..., Path], tmp_path: Path) -> None:
        """Each walk starts from zeroed counters."""
        source = make_tree("a.txt", "b.txt")
        walker = TreeWalker(PatternSet())

        first = walker.walk_copy(source, tmp_path / "one")
        second = walker.walk_copy(source, tmp_path / "two")

        assert first.kept_files == 2
        assert second.kept_files == 2
        assert first is not second

    def test_progress_monotonic_and_bounded(
        self,
        make_tree: Callable[..., Path],
        tmp_path: Path,
        progress_log: list[tuple[str, float]],
        record_progress: Progress,
    ) -> None:
        """Fractions never decrease and stay inside the given range."""
        source = make_tree(
            "a/1.txt",
            "a/2.txt",
            "a/deep/3.txt",
            "a/deep/deeper/4.txt",
            "b/5.txt",
            "bin/x.dll",
            "c/",
            "top1.txt",
            "top2.txt",
        )
        rng = ProgressRange(0.2, 0.6)
        patterns = _patterns(DEFAULT_FILTER_SCRIPT, source)

        TreeWalker(patterns, record_progress).walk_copy(source, tmp_path / "out", rng)

        _assert_monotonic_within([f for _, f in progress_log], rng)

    def test_progress_messages(
        self,
        make_tree: Callable[..., Path],
        tmp_path: Path,
        progress_log: list[tuple[str, float]],
        record_progress: Progress,
    ) -> None:
        """Directories and files are announced."""
        source = make_tree("keep.cs", "drop.pdb")

        TreeWalker(_patterns("*.pdb", source), record_progress).walk_copy(
            source, tmp_path / "out"
        )

        messages = [m for m, _ in progress_log]
        assert messages[0] == f"In folder: {source}"
        assert "    Skipping: drop.pdb" in messages
        assert "    Copying: keep.cs" in messages
        # the first notification of the top-level walk is at the range start
        assert progress_log[0][1] == FULL_WALK_RANGE.min

    def test_copy_error_propagates(self, make_tree: Callable[..., Path], tmp_path: Path) -> None:
        """I/O failures abort the walk."""
        source = make_tree("a.txt", "b.txt")

        with (
            patch("vsclean.filesystem.walker.shutil.copyfile", side_effect=PermissionError("denied")),
            pytest.raises(PermissionError),
        ):
            TreeWalker(PatternSet()).walk_copy(source, tmp_path / "out")

    def test_directory_symlink_recreated(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """Links to directories are copied as links, not descended into."""
        source = make_tree("src/main.cs")
        (source / "link").symlink_to(source / "src", target_is_directory=True)
        destination = tmp_path / "out"

        stats = TreeWalker(PatternSet()).walk_copy(source, destination)

        assert (destination / "link").is_symlink()
        assert os.readlink(destination / "link") == str(source / "src")
        assert stats.processed_folders == 1
        assert stats.kept_files == 2

    def test_dangling_symlink_recreated(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """A link whose target is missing does not abort the copy."""
        source = make_tree("src/main.cs")
        (source / "dangling").symlink_to(source / "gone.txt")
        destination = tmp_path / "out"

        TreeWalker(PatternSet()).walk_copy(source, destination)

        assert (destination / "dangling").is_symlink()
        assert not (destination / "dangling").exists()
        assert (destination / "src" / "main.cs").is_file()

    def test_rejected_symlink_skipped(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        source = make_tree("a.txt")
        (source / "old.pdb").symlink_to(source / "a.txt")
        destination = tmp_path / "out"

        stats = TreeWalker(_patterns("*.pdb", source)).walk_copy(source, destination)

        assert not (destination / "old.pdb").is_symlink()
        assert stats.removed_files == 1

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        """Walking a missing source raises an OSError."""
        with pytest.raises(FileNotFoundError):
            TreeWalker(PatternSet()).walk_copy(tmp_path / "missing", tmp_path / "out")


class TestWalkClean:
    """Tests for TreeWalker.walk_clean."""

    def test_removes_denied_entries(self, make_tree: Callable[..., Path]) -> None:
        """Denied folders and files are deleted in place."""
        root = make_tree(
            "App.sln",
            "App.suo",
            "src/Program.cs",
            "src/bin/Debug/App.dll",
            "src/obj/project.assets.json",
            "node_modules/pkg/index.js",
        )

        stats = TreeWalker(_patterns(DEFAULT_FILTER_SCRIPT, root)).walk_clean(root)

        assert _files_under(root) == {"App.sln", "src/Program.cs"}
        assert not (root / "src" / "bin").exists()
        assert not (root / "node_modules").exists()
        assert stats.pruned_folders == 3
        assert stats.processed_folders == 1
        assert stats.kept_files == 2
        assert stats.removed_files == 1

    def test_clean_is_idempotent(self, make_tree: Callable[..., Path]) -> None:
        """A second clean finds nothing to remove."""
        root = make_tree("bin/x.dll", "src/main.cs", "src/main.pdb", "obj/")
        walker = TreeWalker(_patterns(DEFAULT_FILTER_SCRIPT, root))

        first = walker.walk_clean(root)
        second = walker.walk_clean(root)

        assert first.pruned_folders == 2
        assert first.removed_files == 1
        assert second.removed_files == 0
        assert second.pruned_folders == 0
        assert second.kept_files == 1

    def test_read_only_file_deleted(self, make_tree: Callable[..., Path]) -> None:
        """Read-only files are made writable before deletion."""
        root = make_tree("locked.pdb")
        (root / "locked.pdb").chmod(stat.S_IRUSR)

        stats = TreeWalker(_patterns("*.pdb", root)).walk_clean(root)

        assert not (root / "locked.pdb").exists()
        assert stats.removed_files == 1

    def test_directory_symlink_not_followed(
        self, make_tree: Callable[..., Path], tmp_path: Path
    ) -> None:
        """Links to directories are treated as entries, not descended into."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "victim.pdb").write_text("x")
        root = make_tree("src/main.cs")
        (root / "linked").symlink_to(outside, target_is_directory=True)

        TreeWalker(_patterns("*.pdb", root)).walk_clean(root)

        assert (outside / "victim.pdb").exists()
        assert (root / "linked").is_symlink()

    def test_directory_outside_root_rejected(self, make_tree: Callable[..., Path]) -> None:
        """Recursion outside the original root fails."""
        root = make_tree("src/main.cs")
        walker = TreeWalker(PatternSet())

        with (
            patch("vsclean.filesystem.walker.Path.is_relative_to", return_value=False),
            pytest.raises(PathOutsideRootError),
        ):
            walker.walk_clean(root)

    def test_progress_monotonic_and_bounded(
        self,
        make_tree: Callable[..., Path],
        progress_log: list[tuple[str, float]],
        record_progress: Progress,
    ) -> None:
        """Fractions never decrease and stay inside the given range."""
        root = make_tree(
            "a/1.txt",
            "a/1.pdb",
            "a/obj/x",
            "b/c/d/2.txt",
            "bin/x.dll",
            "e.suo",
            "f.txt",
        )
        patterns = _patterns(DEFAULT_FILTER_SCRIPT, root)

        TreeWalker(patterns, record_progress).walk_clean(root, FULL_WALK_RANGE)

        _assert_monotonic_within([f for _, f in progress_log], FULL_WALK_RANGE)
        messages = [m for m, _ in progress_log]
        assert f"Deleting folder: {root / 'bin'}" in messages
        assert "    Deleting: e.suo" in messages
        assert "    Keeping: f.txt" in messages

    def test_delete_error_propagates(self, make_tree: Callable[..., Path]) -> None:
        """A failed deletion aborts the walk."""
        root = make_tree("a.pdb", "b.pdb")

        with (
            patch.object(Path, "unlink", side_effect=PermissionError("in use")),
            pytest.raises(PermissionError),
        ):
            TreeWalker(_patterns("*.pdb", root)).walk_clean(root)
