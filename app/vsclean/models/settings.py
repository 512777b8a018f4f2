"""Settings models for the vsclean configuration file.

This module defines the Pydantic models representing config.toml, the
optional user configuration that tunes filter-script lookup and backup
defaults.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Archive formats understood by shutil.make_archive
ArchiveFormat = Literal["zip", "tar", "gztar", "bztar", "xztar"]


class FilterSettings(BaseModel):
    """Filter section of the settings file.

    Attributes:
        script_name: Name of the per-project filter script in a source root.
        extra_rules: Rules appended after whichever script is in effect.
    """

    model_config = ConfigDict(extra="forbid")

    script_name: Annotated[
        str, Field(min_length=1, description="Per-project filter script file name")
    ] = ".vsclean"
    extra_rules: Annotated[
        list[str],
        Field(default_factory=list, description="Rules appended to the effective script"),
    ]

    @field_validator("script_name")
    @classmethod
    def validate_script_name(cls, v: str) -> str:
        """Ensure the script name is a plain file name."""
        if "/" in v or "\\" in v:
            msg = f"script_name must be a file name, not a path: {v!r}"
            raise ValueError(msg)
        return v


class BackupSettings(BaseModel):
    """Backup section of the settings file.

    Attributes:
        exclude_version_control: Leave .git/ and $tf/ out of backups.
        archive_format: Archive format used for backups.
    """

    model_config = ConfigDict(extra="forbid")

    exclude_version_control: Annotated[
        bool, Field(description="Exclude version-control metadata from backups")
    ] = True
    archive_format: Annotated[ArchiveFormat, Field(description="Backup archive format")] = "zip"


class Settings(BaseModel):
    """Root settings model."""

    model_config = ConfigDict(extra="forbid")

    filter: Annotated[FilterSettings, Field(default_factory=FilterSettings)]
    backup: Annotated[BackupSettings, Field(default_factory=BackupSettings)]
