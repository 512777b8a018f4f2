"""Ordered gitignore-style rule sets.

A :class:`PatternSet` decides, for a path below its root folder, whether
the path is kept (accepted) or excluded. Rules are evaluated in
declaration order and the last matching rule wins, so a later ``!rule``
re-includes what an earlier rule excluded and vice versa.

Directory pruning is answered separately by :meth:`PatternSet.denies_directory`:
a single non-negated directory-only rule is enough to prune a directory
and no negated rule can bring it back, because the walker never looks
inside a pruned directory.
"""

import logging
from collections.abc import Iterable, Iterator

from vsclean.errors import InvalidPatternError, PathOutsideRootError
from vsclean.filtering.pattern import GlobPattern

logger = logging.getLogger(__name__)

_SEPARATORS = ("/", "\\")


def parse_filter_script(script: str) -> list[GlobPattern]:
    """Compile every rule line of a filter script.

    Blank lines and lines whose first non-whitespace character is ``#``
    are skipped.

    Args:
        script: Multi-line filter script text.

    Returns:
        Compiled patterns in declaration order.

    Raises:
        InvalidPatternError: If a rule line is malformed. The message
            names the 1-based line number.
    """
    rules: list[GlobPattern] = []
    for lineno, line in enumerate(script.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            rules.append(GlobPattern.compile(stripped))
        except InvalidPatternError as e:
            msg = f"Line {lineno}: {e}"
            raise InvalidPatternError(msg, pattern=e.pattern) from e
    return rules


class PatternSet:
    """An ordered collection of filter rules with an optional root folder.

    Args:
        rules: Compiled rules; order is override order.
        root_folder: When set, every evaluated path must lie below this
            folder and is made relative to it before matching.
    """

    def __init__(
        self,
        rules: Iterable[GlobPattern] = (),
        *,
        root_folder: str | None = None,
    ) -> None:
        self._rules: tuple[GlobPattern, ...] = tuple(rules)
        self._root_folder = _strip_trailing_separator(root_folder) if root_folder else None

    @classmethod
    def from_script(cls, script: str, *, root_folder: str | None = None) -> "PatternSet":
        """Build a pattern set from filter-script text.

        Compilation happens eagerly, so malformed rules are reported
        before any traversal starts.
        """
        rules = parse_filter_script(script)
        logger.debug("Compiled %d filter rule(s)", len(rules))
        return cls(rules, root_folder=root_folder)

    @property
    def rules(self) -> tuple[GlobPattern, ...]:
        """Rules in declaration order."""
        return self._rules

    @property
    def root_folder(self) -> str | None:
        """Folder that evaluated paths are made relative to, if any."""
        return self._root_folder

    def with_root(self, root_folder: str | None) -> "PatternSet":
        """Return a pattern set with the same rules and another root folder."""
        return PatternSet(self._rules, root_folder=root_folder)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[GlobPattern]:
        return iter(self._rules)

    def relative_path(self, path: str) -> str:
        """Normalize a path into the root-relative form rules match against.

        Args:
            path: Absolute path below the root folder, or a relative path
                when no root folder is configured.

        Returns:
            The path with the root folder prefix and a single leading
            separator removed.

        Raises:
            PathOutsideRootError: If a root folder is configured and the
                path does not lie below it.
        """
        path = str(path)
        if self._root_folder:
            if not _is_below(path, self._root_folder):
                msg = f"Path {path} is outside of root folder {self._root_folder}"
                raise PathOutsideRootError(msg)
            path = path[len(self._root_folder) :]

        if path.startswith(_SEPARATORS):
            path = path[1:]
        return path

    def accepts(self, path: str, is_directory: bool) -> bool:
        """Decide whether a path is kept by this rule set.

        Directory-only rules are skipped when ``is_directory`` is False.
        Among the remaining rules, the last one that matches decides;
        a path no rule matches is accepted.

        Args:
            path: Path to evaluate (see :meth:`relative_path`).
            is_directory: Whether the path names a directory.

        Returns:
            True if the path is kept, False if it is excluded.
        """
        relative = self.relative_path(path)
        accepted = True
        for rule in self._rules:
            if rule.directory_only and not is_directory:
                continue
            if rule.matches(relative):
                accepted = rule.negated
        return accepted

    def denies(self, path: str, is_directory: bool) -> bool:
        """Inverse of :meth:`accepts`."""
        return not self.accepts(path, is_directory)

    def denies_directory(self, path: str) -> bool:
        """Check whether a directory must be pruned.

        Returns True if any non-negated, directory-only rule matches the
        path. Later negated rules do not override this.
        """
        relative = self.relative_path(path)
        return any(
            not rule.negated and rule.directory_only and rule.matches(relative)
            for rule in self._rules
        )


def _strip_trailing_separator(path: str) -> str:
    return path.rstrip("/\\")


def _is_below(path: str, root: str) -> bool:
    """Case-insensitive check that path equals root or lies beneath it."""
    if path[: len(root)].casefold() != root.casefold():
        return False
    remainder = path[len(root) :]
    return not remainder or remainder.startswith(_SEPARATORS)
