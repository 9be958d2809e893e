"""
Aggregation of sampled time into locator buckets.
"""

from typing import Any, Iterable, List, Optional

from ..core.errors import DuplicateLocatorError, LocatorError
from ..core.types import (
    UNKNOWN_BUCKET,
    AggregationResult,
    Aggregations,
    CallFrame,
    CallFrameInfo,
    Locator,
)
from ..filters.builtin_filter import BuiltinFrameFilter
from .locator_matcher import LocatorMatcher


def verify_locators(locators: List[Locator]) -> None:
    """
    Reject locator lists whose function/module keys are not unique.

    Raises:
        DuplicateLocatorError: On the first repeated key
        LocatorError: If a key collides with the unknown bucket
    """
    seen = set()
    for locator in locators:
        if locator.key in seen:
            raise DuplicateLocatorError(locator.function_name, locator.module_name)
        if locator.key == UNKNOWN_BUCKET:
            raise LocatorError(f'Locator key "{UNKNOWN_BUCKET}" is reserved')
        seen.add(locator.key)


def _empty_bucket(function_name: str, module_name: str) -> AggregationResult:
    return {
        'total': 0,
        'self': 0,
        'attributed': 0,
        'function_name': function_name,
        'module_name': module_name,
        'callframes': [],
    }


class AggregationCollector:
    """Holds one bucket per locator plus the unknown bucket."""

    def __init__(
        self,
        locators: Iterable[Any],
        module_resolver,
        content_lookup=None,
        builtin_filter: Optional[BuiltinFrameFilter] = None
    ):
        """
        Initialize the buckets.

        Args:
            locators: Locators or their input form ({functionName, moduleName})
            module_resolver: Object providing find_module_name(call_frame)
            content_lookup: Object providing content_for(url), optional
            builtin_filter: BuiltinFrameFilter instance (default denylist if None)

        Raises:
            LocatorError: If a locator is invalid or duplicated
        """
        self.locators = [Locator.parse(locator) for locator in locators]
        verify_locators(self.locators)

        self.content_lookup = content_lookup
        self.matcher = LocatorMatcher(self.locators, module_resolver, builtin_filter)

        self._aggregations: Aggregations = {}
        for locator in self.locators:
            self._aggregations[locator.key] = _empty_bucket(locator.function_name, locator.module_name)
        self._aggregations[UNKNOWN_BUCKET] = _empty_bucket(UNKNOWN_BUCKET, UNKNOWN_BUCKET)

    def push_call_frames(self, name: str, call_frame_info: CallFrameInfo) -> None:
        self._aggregations[name]['callframes'].append(call_frame_info)

    def add_to_attributed(self, name: str, time: float) -> None:
        self._aggregations[name]['attributed'] += time

    def add_to_total(self, name: str, time: float) -> None:
        self._aggregations[name]['total'] += time

    def match(self, call_frame: CallFrame) -> Optional[Locator]:
        return self.matcher.match(call_frame)

    def content_for(self, url: str) -> str:
        """
        Fetch script source through the content lookup.

        Raises:
            ArchiveLookupError: If the lookup has no entry for the URL
            LocatorError: If no content lookup was configured
        """
        if self.content_lookup is None:
            raise LocatorError('No content lookup configured')
        return self.content_lookup.content_for(url)

    def collect(self) -> Aggregations:
        """Recompute each bucket's self time from its recorded call frames."""
        for aggregation in self._aggregations.values():
            aggregation['self'] = sum(info['self'] for info in aggregation['callframes'])
        return self._aggregations


def aggregate(profile, locators: Iterable[Any], module_resolver, content_lookup=None,
              builtin_filter: Optional[BuiltinFrameFilter] = None) -> Aggregations:
    """
    Bill the self time of every sampled node to locator buckets.

    For each node with self time, walk from the node itself up to the root.
    Every matching frame gets the time added to its total; the nearest one
    also gets it as attributed time and records the stack. Nodes with no
    matching frame go to the unknown bucket.

    Args:
        profile: Reconstructed CpuProfile
        locators: Locators or their input form, in priority order
        module_resolver: Object providing find_module_name(call_frame)
        content_lookup: Object providing content_for(url), optional
        builtin_filter: BuiltinFrameFilter instance (default denylist if None)

    Returns:
        Mapping of bucket key -> AggregationResult
    """
    collector = AggregationCollector(locators, module_resolver, content_lookup, builtin_filter)

    for node in profile.each():
        self_time = node.self_time
        if self_time == 0:
            continue

        stack: List[CallFrame] = []
        owner: Optional[str] = None
        for current in profile.ancestors(node):
            call_frame = current.call_frame
            locator = collector.match(call_frame)
            if locator is not None:
                if owner is None:
                    owner = locator.key
                    collector.add_to_attributed(owner, self_time)
                collector.add_to_total(locator.key, self_time)
            stack.append(call_frame)

        if owner is None:
            owner = UNKNOWN_BUCKET
            collector.add_to_attributed(owner, self_time)
            collector.add_to_total(owner, self_time)
        collector.push_call_frames(owner, {'self': self_time, 'stack': stack})

    return collector.collect()
