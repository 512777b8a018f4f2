"""Data models for vsclean.

This package contains the Pydantic models for user settings.
"""

from vsclean.models.settings import ArchiveFormat, BackupSettings, FilterSettings, Settings

__all__ = [
    "ArchiveFormat",
    "BackupSettings",
    "FilterSettings",
    "Settings",
]
