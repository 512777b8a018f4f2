"""Clean command implementation.

Deletes build output, IDE caches and other filtered entries from a
project tree in place.
"""

from pathlib import Path
from typing import Annotated

import typer

from vsclean.cli.progress import progress_reporter
from vsclean.cli.types import get_settings, is_quiet, read_filter_file
from vsclean.errors import VscleanError
from vsclean.filesystem.operations import source_clean
from vsclean.utils.formatting import print_error, print_info, print_success


def clean(
    ctx: typer.Context,
    folder: Annotated[
        Path,
        typer.Argument(help="Root folder of the project to clean."),
    ],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    filter_file: Annotated[
        Path | None,
        typer.Option(
            "--filter",
            "-f",
            help="Filter script to use instead of the project or default one.",
        ),
    ] = None,
) -> None:
    """Delete filtered files and folders from a project tree in place."""
    settings = get_settings(ctx)
    script = read_filter_file(filter_file)
    quiet = is_quiet(ctx)

    if not yes:
        confirmed = typer.confirm(
            f"Delete filtered files and folders under {folder}?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        with progress_reporter(enabled=not quiet) as report:
            result = source_clean(
                folder,
                filter_script=script,
                settings=settings,
                progress=report,
            )
    except VscleanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(result.summary)
