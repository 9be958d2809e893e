"""
Module name resolution for call frames.
"""

import bisect
import re
from typing import Dict, List, Optional, Tuple

from ..core.types import CallFrame


class ModuleResolver:
    """Interface: maps a call frame to the name of the module it came from."""

    def find_module_name(self, call_frame: CallFrame) -> Optional[str]:
        """
        Resolve the originating module of a call frame.

        Returns:
            Module name, or None if it cannot be resolved
        """
        raise NotImplementedError


class StaticModuleResolver(ModuleResolver):
    """Resolves module names from a fixed URL -> module name map."""

    def __init__(self, url_to_module: Optional[Dict[str, str]] = None):
        self.url_to_module = dict(url_to_module or {})

    def find_module_name(self, call_frame: CallFrame) -> Optional[str]:
        if not call_frame.url:
            return None
        return self.url_to_module.get(call_frame.url)


class AmdModuleResolver(ModuleResolver):
    """
    Resolves module names from AMD ``define("name", ...)`` calls.

    The script source is fetched through a content lookup (anything with a
    ``content_for(url)`` method, e.g. an Archive). The frame belongs to the
    nearest define call that starts at or before its line/column. Lookup
    misses propagate, the source is required for attribution.
    """

    def __init__(self, content_lookup):
        """
        Initialize with a content lookup.

        Args:
            content_lookup: Object providing content_for(url) -> str
        """
        self.content_lookup = content_lookup
        self.define_pattern = re.compile(r'''\bdefine\(\s*(['"])([^'"]+)\1''')
        self._defines: Dict[str, Tuple[List[Tuple[int, int]], List[str]]] = {}

    def find_module_name(self, call_frame: CallFrame) -> Optional[str]:
        if not call_frame.url:
            return None

        positions, names = self._defines_for(call_frame.url)
        index = bisect.bisect_right(positions, (call_frame.line_number, call_frame.column_number))
        if index == 0:
            return None
        return names[index - 1]

    def _defines_for(self, url: str) -> Tuple[List[Tuple[int, int]], List[str]]:
        cached = self._defines.get(url)
        if cached is not None:
            return cached

        source = self.content_lookup.content_for(url)
        positions, names = [], []
        for match in self.define_pattern.finditer(source):
            offset = match.start()
            # Profiler line and column numbers are zero based
            line = source.count('\n', 0, offset)
            column = offset - (source.rfind('\n', 0, offset) + 1)
            positions.append((line, column))
            names.append(match.group(2))

        self._defines[url] = (positions, names)
        return positions, names
