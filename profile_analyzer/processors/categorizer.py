"""
Post-processing of aggregation buckets: stack collapsing and categories.
"""

from typing import Any, List, Set, Tuple

from ..core.errors import LocatorError
from ..core.types import (
    UNKNOWN_BUCKET,
    Aggregations,
    Categories,
    Categorized,
    CallFrameInfo,
    Locator,
)


def stack_identity(call_frame_info: CallFrameInfo) -> Tuple[Tuple[str, int, int], ...]:
    """
    Identity of a recorded stack: function, column and line of every frame.

    Fields are kept as tuples rather than joined into one string, so
    ``a`` at column 1, line 12 and ``a1`` at column 1, line 2 stay distinct.
    """
    return tuple(
        (frame.function_name, frame.column_number, frame.line_number)
        for frame in call_frame_info['stack']
    )


def collapse_call_frames(aggregations: Aggregations) -> Aggregations:
    """
    Drop structurally identical stacks within each bucket, keeping the first.

    Totals are left untouched; this only thins out the recorded stacks for
    reporting.

    Args:
        aggregations: Buckets to collapse (modified in-place)

    Returns:
        The same aggregations mapping
    """
    for aggregation in aggregations.values():
        seen: Set[Tuple] = set()
        collapsed: List[CallFrameInfo] = []
        for call_frame_info in aggregation['callframes']:
            key = stack_identity(call_frame_info)
            if key not in seen:
                seen.add(key)
                collapsed.append(call_frame_info)
        aggregation['callframes'] = collapsed

    return aggregations


def category_names(entry: Any) -> Tuple[str, str]:
    """
    Literal (function, module) names of one category entry.

    Accepts the same forms as locators but compiles nothing: categories
    compare names as plain strings.
    """
    if isinstance(entry, Locator):
        return entry.function_name, entry.module_name
    if isinstance(entry, dict):
        return entry.get('functionName', ''), entry.get('moduleName', '')
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return entry[0], entry[1]
    raise LocatorError(f'Cannot read a category entry from {entry!r}')


def categorize_aggregations(aggregations: Aggregations, categories: Categories) -> Categorized:
    """
    Group buckets into named categories.

    A bucket belongs to a category when its function and module names equal
    one of the category's entries. The unknown bucket is always a category
    of its own.

    Args:
        aggregations: Collected buckets
        categories: Mapping of category name -> locators (or their input form)

    Returns:
        Mapping of category name -> list of AggregationResult
    """
    categorized: Categorized = {UNKNOWN_BUCKET: [aggregations[UNKNOWN_BUCKET]]}

    for category, entries in categories.items():
        names = {category_names(entry) for entry in entries}

        members = categorized.setdefault(category, [])
        for aggregation in aggregations.values():
            if (aggregation['function_name'], aggregation['module_name']) in names:
                members.append(aggregation)

    return categorized
