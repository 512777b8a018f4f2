"""vsclean - Filtered backup and cleanup of source-code project trees."""

__version__ = "0.1.0"
