"""CLI package for vsclean.

This package contains the Typer application and all subcommands.
"""

from vsclean.cli.main import app

__all__ = ["app"]
