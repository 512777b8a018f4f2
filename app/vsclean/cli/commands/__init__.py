"""CLI commands for vsclean.

This package contains all subcommand implementations.
"""

from vsclean.cli.commands import backup, clean, copy, filters

__all__ = ["backup", "clean", "copy", "filters"]
