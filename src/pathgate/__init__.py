"""pathgate - decide which path rules a code change touches."""

__version__ = "0.1.0"
