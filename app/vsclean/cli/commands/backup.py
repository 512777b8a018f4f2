"""Backup command implementation.

Archives a source tree without build output, IDE caches and, unless
asked otherwise, version-control metadata.
"""

from pathlib import Path
from typing import Annotated

import typer

from vsclean.cli.progress import progress_reporter
from vsclean.cli.types import ArchiveFormatChoice, get_settings, is_quiet, read_filter_file
from vsclean.errors import VscleanError
from vsclean.filesystem.operations import source_backup
from vsclean.utils.formatting import print_error, print_info, print_success


def backup(
    ctx: typer.Context,
    folder: Annotated[
        Path,
        typer.Argument(help="Root folder of the project to back up."),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Archive to create (default: <folder>/<folder name>.zip).",
        ),
    ] = None,
    archive_format: Annotated[
        ArchiveFormatChoice | None,
        typer.Option(
            "--format",
            help="Archive format (default from settings).",
            case_sensitive=False,
        ),
    ] = None,
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
    """Archive a project tree, leaving out filtered files and folders.

    Examples:
        vsclean backup ./MySolution                  # Creates MySolution/MySolution.zip
        vsclean backup ./MySolution -o ~/ms.zip      # Explicit archive path
        vsclean backup ./MySolution --include-vc     # Keep .git/ in the archive
        vsclean backup ./MySolution --format gztar   # Create a .tar.gz
    """
    settings = get_settings(ctx)
    script = read_filter_file(filter_file)
    quiet = is_quiet(ctx)

    try:
        with progress_reporter(enabled=not quiet) as report:
            result = source_backup(
                folder,
                exclude_version_control=False if include_vc else None,
                archive_path=output,
                archive_format=archive_format.value if archive_format else None,
                filter_script=script,
                settings=settings,
                progress=report,
            )
    except VscleanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(result.summary)
    if not quiet:
        print_info(f"Archive created: {result.archive_path}")
