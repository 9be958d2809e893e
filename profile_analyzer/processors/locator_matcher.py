"""
Locator matching for call frames.
"""

from typing import Dict, List, Optional

from ..core.types import CallFrame, Locator, LocatorKind
from ..filters.builtin_filter import BuiltinFrameFilter

_UNRESOLVED = object()


class LocatorMatcher:
    """Finds the first locator that claims a call frame."""

    def __init__(self, locators: List[Locator], module_resolver, builtin_filter: Optional[BuiltinFrameFilter] = None):
        """
        Initialize with the locators in registration order.

        Args:
            locators: Compiled locators, first match wins
            module_resolver: Object providing find_module_name(call_frame)
            builtin_filter: BuiltinFrameFilter instance (default denylist if None)
        """
        self.locators = locators
        self.module_resolver = module_resolver
        self.builtin_filter = builtin_filter or BuiltinFrameFilter()
        self._module_names: Dict[CallFrame, Optional[str]] = {}

    def module_name(self, call_frame: CallFrame) -> Optional[str]:
        """Resolve a frame's module name, once per distinct frame."""
        module_name = self._module_names.get(call_frame, _UNRESOLVED)
        if module_name is _UNRESOLVED:
            module_name = self.module_resolver.find_module_name(call_frame)
            self._module_names[call_frame] = module_name
        return module_name

    def match(self, call_frame: CallFrame) -> Optional[Locator]:
        """
        Find the locator for a call frame.

        Checks run cheapest first; the exact comparisons give the same answer
        the anchored regexes would, so the regex is only a fallback.

        Args:
            call_frame: Frame to classify

        Returns:
            The first matching locator in registration order, or None
        """
        is_builtin = None
        for locator in self.locators:
            same_function = locator.function_name == call_frame.function_name
            if locator.module_is_wildcard and same_function:
                return locator

            # Built-ins never belong to a module
            if is_builtin is None:
                is_builtin = self.builtin_filter.is_builtin(call_frame)
            if is_builtin:
                continue

            module_name = self.module_name(call_frame)
            if module_name is None:
                continue

            same_module = locator.module_name == module_name
            if same_module and locator.function_is_wildcard:
                return locator

            if same_function and same_module:
                return locator

            if locator.kind is LocatorKind.EXACT:
                continue
            if (locator.function_name_regex.fullmatch(call_frame.function_name)
                    and locator.module_name_regex.fullmatch(module_name)):
                return locator

        return None
