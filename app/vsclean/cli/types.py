"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from vsclean.core.settings import SettingsError, load_settings
from vsclean.models.settings import Settings
from vsclean.utils.formatting import print_error


class ArchiveFormatChoice(str, Enum):
    """Archive formats available for backups."""

    ZIP = "zip"
    TAR = "tar"
    GZTAR = "gztar"
    BZTAR = "bztar"
    XZTAR = "xztar"


def is_quiet(ctx: typer.Context) -> bool:
    """Check whether non-essential output is suppressed."""
    return bool(ctx.obj and ctx.obj.get("quiet"))


def get_settings(ctx: typer.Context) -> Settings:
    """Load settings from the file selected by the global --config option.

    Exits with code 1 if the settings file is invalid.

    Args:
        ctx: Typer context carrying the global options.

    Returns:
        Validated settings (defaults if no settings file exists).
    """
    config_path: Path | None = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return load_settings(config_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def read_filter_file(path: Path | None) -> str | None:
    """Read a user-supplied filter script file.

    Exits with code 1 if the file cannot be read.

    Args:
        path: Script file, or None when no file was given.

    Returns:
        Script text, or None when no file was given.
    """
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read filter script {path}: {e}")
        raise typer.Exit(code=1) from e
