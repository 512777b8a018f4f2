"""Built-in filter rules and filter-script resolution.

The default script removes the build output, IDE state and package
caches typically found in Visual Studio and Node projects. A project can
replace it with its own script stored in the project root (``.vsclean``
unless configured otherwise).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from vsclean.models.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_FILTER_SCRIPT: str = """\
# Build output
**/bin/
**/obj/
**/TestResults/
**/debug/
**/debugpublic/
**/release/
**/releases/
**/x64/
**/x86/
**/build/
**/bld/
# IDE state and upgrade leftovers
**/.vs/
**/_upgradereport_files/
**/backup*/
# Package caches
**/packages/
**/node_modules/
# User-specific and profiler files
*.suo
*.user
*.userosscache
*.sln.docstates
*.userprefs
*.pdb
*.vsp
*.vspx
*.vspscc
*.vssscc
*.vsmdi
*.psess
"""

# Prepended when version-control metadata is excluded from a backup
VERSION_CONTROL_RULES: str = "/$tf/\n/.git/\n"


class ScriptOrigin(str, Enum):
    """Where an effective filter script came from."""

    EXPLICIT = "explicit"
    PROJECT = "project"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class FilterScript:
    """A resolved filter script.

    Attributes:
        text: Script text, including any configured extra rules.
        origin: Where the base script came from.
        path: Script file for project scripts, None otherwise.
    """

    text: str
    origin: ScriptOrigin
    path: Path | None = None

    def with_version_control_rules(self) -> "FilterScript":
        """Return a copy with the version-control directories denied first."""
        return FilterScript(
            text=VERSION_CONTROL_RULES + self.text,
            origin=self.origin,
            path=self.path,
        )

    def describe(self) -> str:
        """Human-readable description of the script origin."""
        if self.origin == ScriptOrigin.PROJECT:
            return f"filter script from {self.path}"
        if self.origin == ScriptOrigin.EXPLICIT:
            return "user-supplied filter script"
        return "built-in default filter"


def resolve_filter_script(
    source: Path,
    *,
    script: str | None = None,
    settings: Settings | None = None,
) -> FilterScript:
    """Determine the filter script to apply to a source tree.

    Priority:
    1. An explicitly supplied script.
    2. The project script file (``settings.filter.script_name``) in the
       source root.
    3. :data:`DEFAULT_FILTER_SCRIPT`.

    Extra rules from the settings are appended after the chosen script,
    so they override it.

    Args:
        source: Root folder of the tree to be processed.
        script: Explicit script text, if any.
        settings: User settings. Defaults are used when None.

    Returns:
        The resolved FilterScript.

    Raises:
        OSError: If the project script exists but cannot be read.
        UnicodeDecodeError: If the project script is not valid UTF-8.
    """
    settings = settings or Settings()

    if script is not None:
        resolved = FilterScript(text=script, origin=ScriptOrigin.EXPLICIT)
    else:
        project_script = source / settings.filter.script_name
        if project_script.is_file():
            logger.info("Using filter script from %s", project_script)
            resolved = FilterScript(
                text=project_script.read_text(encoding="utf-8"),
                origin=ScriptOrigin.PROJECT,
                path=project_script,
            )
        else:
            resolved = FilterScript(text=DEFAULT_FILTER_SCRIPT, origin=ScriptOrigin.DEFAULT)

    if settings.filter.extra_rules:
        text = resolved.text
        if text and not text.endswith("\n"):
            text += "\n"
        text += "\n".join(settings.filter.extra_rules) + "\n"
        resolved = FilterScript(text=text, origin=resolved.origin, path=resolved.path)

    return resolved
