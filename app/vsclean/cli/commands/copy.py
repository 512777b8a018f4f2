"""Copy command implementation.

Mirrors the filtered contents of a source tree into another folder.
"""

from pathlib import Path
from typing import Annotated

import typer

from vsclean.cli.progress import progress_reporter
from vsclean.cli.types import get_settings, is_quiet, read_filter_file
from vsclean.errors import VscleanError
from vsclean.filesystem.operations import source_copy
from vsclean.utils.formatting import print_error, print_info, print_success, print_warning


def copy(
    ctx: typer.Context,
    folder: Annotated[
        Path,
        typer.Argument(help="Root folder of the project to copy."),
    ],
    destination: Annotated[
        Path,
        typer.Argument(help="Folder receiving the copy. Existing content is replaced."),
    ],
    include_vc: Annotated[
        bool,
        typer.Option(
            "--include-vc",
            help="Keep .git/ and $tf/ at the project root.",
        ),
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
    """Copy a project tree, leaving out filtered files and folders."""
    settings = get_settings(ctx)
    script = read_filter_file(filter_file)
    quiet = is_quiet(ctx)

    if destination.exists() and not quiet:
        print_warning(f"Replacing existing destination: {destination}")

    try:
        with progress_reporter(enabled=not quiet) as report:
            result = source_copy(
                folder,
                destination,
                exclude_version_control=False if include_vc else None,
                filter_script=script,
                settings=settings,
                progress=report,
            )
    except VscleanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(result.summary)
    if not quiet:
        print_info(f"Copied to: {result.destination}")
