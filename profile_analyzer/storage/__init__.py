"""Content sources for script lookups."""

from .archive import Archive

__all__ = ["Archive"]
