"""Exception hierarchy for vsclean.

All errors raised deliberately by the library derive from
:class:`VscleanError`, so callers (the CLI in particular) can report
them uniformly without catching unrelated exceptions.
"""


class VscleanError(Exception):
    """Base exception for vsclean errors."""


class InvalidPatternError(VscleanError, ValueError):
    """Raised when a filter-script line cannot be compiled into a pattern.

    Attributes:
        pattern: The offending source text.
    """

    def __init__(self, message: str, pattern: str = "") -> None:
        super().__init__(message)
        self.pattern = pattern


class PathOutsideRootError(VscleanError, ValueError):
    """Raised when a path is not a descendant of the configured root folder."""


class FileSystemError(VscleanError, OSError):
    """Raised when an underlying I/O operation fails during an operation."""
