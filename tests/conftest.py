"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

TreeFactory = Callable[..., Path]


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeFactory:
    """Create a directory tree from relative paths.

    Paths ending with "/" become empty directories; all others become
    files whose content is their own relative path.
    """

    def _make(*entries: str, root: str = "proj") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for entry in entries:
            target = base / entry
            if entry.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(entry)
        return base

    return _make


@pytest.fixture
def project_tree(make_tree: TreeFactory) -> Path:
    """A small Visual Studio style project with build output and VCS data."""
    return make_tree(
        "bin/x.dll",
        "src/main.cs",
        ".git/HEAD",
    )


@pytest.fixture
def progress_log() -> list[tuple[str, float]]:
    """List collecting progress notifications."""
    return []


@pytest.fixture
def record_progress(progress_log: list[tuple[str, float]]) -> Callable[[str, float], None]:
    """Progress callback appending to progress_log."""

    def _record(message: str, fraction: float) -> None:
        progress_log.append((message, fraction))

    return _record
