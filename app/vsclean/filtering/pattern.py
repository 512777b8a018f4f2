"""Compilation of single gitignore-style lines into path matchers.

A filter line is turned into an anchored, case-insensitive regular
expression over root-relative paths. Both forward and backward slashes
are accepted as separators in the candidate path.
"""

import re
from dataclasses import dataclass

from vsclean.errors import InvalidPatternError

# Separator-agnostic fragments of the generated expression
_SEPARATOR = r"[\\/]"
_NOT_SEPARATOR = r"[^\\/]"
_ANY_DIRECTORIES = r"(.+[\\/])?"

# Character classes are passed through to the regex engine verbatim
_NEGATED_CHAR_CLASS = re.compile(r"\[!([^\]]+)\]")
_CHAR_CLASS = re.compile(r"\[([^!\]][^\]]*)\]")

# Characters that must be escaped when they appear outside a glob token
_REGEX_METACHARACTERS = frozenset("-[]/{}()+?.\\^$|")


def glob_to_regex(glob: str) -> str:
    """Translate a normalized glob into an anchored regular expression.

    The glob is expected to have been through the line normalization
    done by :meth:`GlobPattern.compile` (negation, anchoring and the
    directory marker already removed).

    Args:
        glob: Normalized glob text.

    Returns:
        Regular expression source anchored at both ends.
    """
    parts: list[str] = ["^"]
    i = 0
    while i < len(glob):
        if glob.startswith("**/", i):
            parts.append(_ANY_DIRECTORIES)
            i += 3
            continue

        char = glob[i]
        if char == "*":
            parts.append(_NOT_SEPARATOR + "*")
        elif char == "?":
            parts.append(_NOT_SEPARATOR)
        elif char == "/":
            parts.append(_SEPARATOR)
        elif char == "[":
            match = _NEGATED_CHAR_CLASS.match(glob, i) or _CHAR_CLASS.match(glob, i)
            if match is None:
                parts.append("\\[")
            else:
                negation = "^" if match.group(0).startswith("[!") else ""
                parts.append(f"[{negation}{match.group(1)}]")
                i = match.end()
                continue
        elif char in _REGEX_METACHARACTERS:
            parts.append("\\" + char)
        else:
            parts.append(char)
        i += 1

    parts.append("$")
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class GlobPattern:
    """A compiled filter rule.

    Attributes:
        source: The trimmed line the pattern was compiled from.
        negated: True if the line began with ``!`` (re-include rule).
        directory_only: True if the line ended with ``/``.
        matcher: Anchored, case-insensitive expression over root-relative paths.
    """

    source: str
    negated: bool
    directory_only: bool
    matcher: re.Pattern[str]

    @classmethod
    def compile(cls, line: str) -> "GlobPattern":
        """Compile one filter-script line.

        Args:
            line: Raw line text. Surrounding whitespace is ignored.

        Returns:
            The compiled pattern.

        Raises:
            InvalidPatternError: If the line is empty, a comment, or yields
                an expression the regex engine rejects.
        """
        glob = line.strip()
        if not glob or glob.startswith("#"):
            msg = "Cannot compile an empty or comment line into a pattern"
            raise InvalidPatternError(msg, pattern=line)
        source = glob

        negated = glob.startswith("!")
        if negated:
            glob = glob[1:]
            if not glob:
                msg = "Negation marker '!' must be followed by a pattern"
                raise InvalidPatternError(msg, pattern=source)

        # A bare name matches at any depth
        if "/" not in glob:
            glob = "**/" + glob

        if glob.startswith("/"):
            glob = glob[1:]

        directory_only = glob.endswith("/")
        if directory_only:
            glob = glob[:-1]

        # "abc/**" matches everything below abc but not abc itself
        if glob.endswith("/**"):
            glob += "/*"

        expression = glob_to_regex(glob)
        try:
            matcher = re.compile(expression, re.IGNORECASE)
        except re.error as e:
            msg = f"Invalid pattern '{source}': {e}"
            raise InvalidPatternError(msg, pattern=source) from e

        return cls(
            source=source,
            negated=negated,
            directory_only=directory_only,
            matcher=matcher,
        )

    def matches(self, path: str) -> bool:
        """Check whether a normalized root-relative path matches this rule."""
        return self.matcher.match(path) is not None

    def __str__(self) -> str:
        return self.source
