"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from vsclean import __version__
from vsclean.cli.commands import backup, clean, copy, filters
from vsclean.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="vsclean",
    help="Back up or clean source-code project trees using gitignore-style filters.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vsclean version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to the error console through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Settings file (default: ~/.config/vsclean/config.toml).",
        ),
    ] = None,
) -> None:
    """vsclean - Back up or clean source-code project trees.

    Build output, IDE caches and similar clutter are selected with a
    gitignore-style filter script: the built-in default, a .vsclean
    file in the project root, or a script given on the command line.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path


# Register commands
app.command(name="backup")(backup.backup)
app.command(name="copy")(copy.copy)
app.command(name="clean")(clean.clean)
app.add_typer(filters.app, name="filter")


if __name__ == "__main__":
    app()
