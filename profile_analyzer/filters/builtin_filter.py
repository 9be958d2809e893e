"""
Built-in (engine internal) call frame filtering.
"""

from typing import Iterable

from ..core.types import UNSET, CallFrame

# Scripts that ship inside the JS engine or browser, not the application
BUILTIN_URLS = frozenset([
    'extensions::SafeBuiltins',
    'v8/LoadTimes',
    'native array.js',
    'native intl.js',
])


class BuiltinFrameFilter:
    """Identifies call frames that cannot belong to an application module."""

    def __init__(self, extra_urls: Iterable[str] = ()):
        """
        Initialize with optional extra denylisted script URLs.

        Args:
            extra_urls: URLs treated as built-in on top of BUILTIN_URLS
        """
        self.builtin_urls = BUILTIN_URLS.union(extra_urls)

    def is_builtin(self, call_frame: CallFrame) -> bool:
        """
        Determine if a frame is engine internal.

        A frame is built-in when it has no URL, its URL is denylisted, or it
        carries no line number.

        Args:
            call_frame: Frame to classify

        Returns:
            True if module based locators must never match this frame
        """
        url = call_frame.url
        if not url:
            return True
        if url in self.builtin_urls:
            return True
        if call_frame.line_number is None or call_frame.line_number == UNSET:
            return True
        return False
