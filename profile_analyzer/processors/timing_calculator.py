"""
Timing calculator for profile hierarchy nodes.
"""

from typing import Dict, List

from ..core.types import UNSET, ProfileNode


class TimingCalculator:
    """Calculates subtree timing metrics for profile nodes."""

    def __init__(self, children_links: Dict[int, List[ProfileNode]]):
        """
        Initialize with the children map.

        Args:
            children_links: Mapping of node id -> ordered child nodes
        """
        self.children_links = children_links

    @staticmethod
    def merge_min(current: float, other: float) -> float:
        """Earliest of two timestamps, ignoring unset values."""
        if current == UNSET:
            return other
        if other == UNSET:
            return current
        return min(current, other)

    @staticmethod
    def merge_max(current: float, other: float) -> float:
        """Latest of two timestamps, ignoring unset values."""
        if current == UNSET:
            return other
        if other == UNSET:
            return current
        return max(current, other)

    def calculate_hierarchy_timings(self, root: ProfileNode) -> None:
        """
        Traverse the hierarchy bottom-up to compute min, max and total time.
        Children are re-sorted by their first sample once computed.

        Iterative post-order walk: call stacks of real profiles can be deeper
        than the interpreter's recursion limit.

        Args:
            root: Root node of the hierarchy (modified in-place)
        """
        stack = [(root, False)]
        while stack:
            node, children_done = stack.pop()
            children = self.children_links.get(node.id)

            if not children_done:
                stack.append((node, True))
                if children:
                    stack.extend((child, False) for child in reversed(children))
                continue

            min_time = node.min_time
            max_time = node.max_time
            child_total = 0
            if children:
                for child in children:
                    child_total += child.total_time
                    min_time = self.merge_min(min_time, child.min_time)
                    max_time = self.merge_max(max_time, child.max_time)
                children.sort(key=lambda c: c.min_time)

            node.min_time = min_time
            node.max_time = max_time
            node.total_time = node.self_time + child_total
