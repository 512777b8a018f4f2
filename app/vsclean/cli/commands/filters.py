"""Filter inspection commands.

Provides commands to display the effective filter script for a project
and to check how it treats individual paths.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from vsclean.cli.types import get_settings, read_filter_file
from vsclean.errors import InvalidPatternError
from vsclean.filtering.defaults import FilterScript, resolve_filter_script
from vsclean.filtering.pattern_set import PatternSet
from vsclean.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Inspect filter scripts.",
    no_args_is_help=True,
)


class Verdict(str, Enum):
    """How a filter script treats a path."""

    KEPT = "kept"
    EXCLUDED = "excluded"
    PRUNED = "pruned"


@app.command()
def show(
    ctx: typer.Context,
    folder: Annotated[
        Path | None,
        typer.Argument(help="Project folder whose filter script to show (default: cwd)."),
    ] = None,
    include_vc: Annotated[
        bool,
        typer.Option("--include-vc", help="Show the script without version-control rules."),
    ] = False,
) -> None:
    """Show the filter script a backup of FOLDER would apply."""
    script = _resolve(ctx, folder, None, include_vc)

    print_info(f"Using {script.describe()}")
    console.print(script.text.rstrip("\n"), markup=False, highlight=False)


@app.command()
def test(
    ctx: typer.Context,
    paths: Annotated[
        list[str],
        typer.Argument(help="Paths relative to the project root."),
    ],
    directory: Annotated[
        bool,
        typer.Option("--dir", "-d", help="Treat the paths as directories."),
    ] = False,
    folder: Annotated[
        Path | None,
        typer.Option("--folder", help="Project folder used to find the filter script."),
    ] = None,
    filter_file: Annotated[
        Path | None,
        typer.Option("--filter", "-f", help="Filter script file to test."),
    ] = None,
    include_vc: Annotated[
        bool,
        typer.Option("--include-vc", help="Test without version-control rules."),
    ] = False,
) -> None:
    """Show whether each path is kept, excluded or pruned."""
    script = _resolve(ctx, folder, read_filter_file(filter_file), include_vc)

    try:
        patterns = PatternSet.from_script(script.text)
    except InvalidPatternError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(
        title="Filter Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Verdict", width=10)
    table.add_column("Kind", style="muted")
    table.add_column("Pruned at", style="muted")

    for path in paths:
        verdict, pruned_at = _classify(patterns, path, directory)
        table.add_row(
            escape(path),
            f"[{verdict.value}]{verdict.value}[/{verdict.value}]",
            "directory" if directory else "file",
            escape(pruned_at or ""),
        )

    console.print(table)


# === Private helper functions ===


def _resolve(
    ctx: typer.Context,
    folder: Path | None,
    script: str | None,
    include_vc: bool,
) -> FilterScript:
    """Resolve the filter script for a folder as a backup would."""
    settings = get_settings(ctx)
    source = folder or Path.cwd()
    try:
        resolved = resolve_filter_script(source, script=script, settings=settings)
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read filter script in {source}: {e}")
        raise typer.Exit(code=1) from e

    if include_vc:
        return resolved
    return resolved.with_version_control_rules()


def _classify(patterns: PatternSet, path: str, directory: bool) -> tuple[Verdict, str | None]:
    """Classify a path the way a walk would reach it.

    Returns the verdict and, for pruned paths, the folder whose pruning
    decides it (the path itself or one of its ancestors).
    """
    parts = [part for part in re.split(r"[\\/]", path) if part]
    for depth in range(1, len(parts)):
        ancestor = "/".join(parts[:depth])
        if patterns.denies_directory(ancestor):
            return Verdict.PRUNED, ancestor

    if directory and patterns.denies_directory(path):
        return Verdict.PRUNED, path
    if patterns.accepts(path, directory):
        return Verdict.KEPT, None
    return Verdict.EXCLUDED, None
