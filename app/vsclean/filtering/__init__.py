"""Gitignore-style path filtering.

This package compiles filter scripts into ordered rule sets and answers
whether individual files are kept and whether directories are pruned.
"""

from vsclean.filtering.defaults import (
    DEFAULT_FILTER_SCRIPT,
    VERSION_CONTROL_RULES,
    FilterScript,
    ScriptOrigin,
    resolve_filter_script,
)
from vsclean.filtering.pattern import GlobPattern, glob_to_regex
from vsclean.filtering.pattern_set import PatternSet, parse_filter_script

__all__ = [
    "DEFAULT_FILTER_SCRIPT",
    "VERSION_CONTROL_RULES",
    "FilterScript",
    "GlobPattern",
    "PatternSet",
    "ScriptOrigin",
    "glob_to_regex",
    "parse_filter_script",
    "resolve_filter_script",
]
