"""Core infrastructure for vsclean: paths and settings loading."""
