"""Call frame filters."""

from .builtin_filter import BUILTIN_URLS, BuiltinFrameFilter

__all__ = ["BUILTIN_URLS", "BuiltinFrameFilter"]
