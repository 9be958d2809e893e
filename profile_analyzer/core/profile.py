"""
Reconstructed CPU profile: the call tree with per-node timings.
"""

from collections import deque
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .errors import InvalidProfileError
from .types import (
    IDLE_FUNCTION_NAME,
    NATIVE_SCRIPT_ID,
    PROGRAM_FUNCTION_NAME,
    UNSET,
    ProfileNode,
    Sample,
)
from ..processors.hierarchy_builder import HierarchyBuilder
from ..processors.sample_mapper import SampleMapper
from ..processors.timing_calculator import TimingCalculator

# Children of (root) that are not part of the analysed hierarchy
META_FUNCTION_NAMES = frozenset([PROGRAM_FUNCTION_NAME, IDLE_FUNCTION_NAME])


def is_meta_node(node: ProfileNode) -> bool:
    return (
        node.call_frame.script_id == NATIVE_SCRIPT_ID
        and node.call_frame.function_name in META_FUNCTION_NAMES
    )


class CpuProfile:
    """
    A CPU profile reconstructed from its node table and sample stream.

    Nodes live in an id-addressed map; parent and children relations are
    kept in separate maps keyed by node id.
    """

    def __init__(self, profile: Dict[str, Any], window_min: float = UNSET, window_max: float = UNSET):
        """
        Reconstruct the profile.

        Args:
            profile: Raw profile dict (nodes, samples, timeDeltas, startTime)
            window_min: Exclusive lower bound for samples counted in timings
            window_max: Exclusive upper bound, -1 for no bound

        Raises:
            InvalidProfileError: If the profile is malformed
            MissingRootError: If the profile has no (root) node
        """
        self.profile = profile

        # Pass 1 & 2: map nodes and link the tree
        builder = HierarchyBuilder()
        self.nodes: Dict[int, ProfileNode] = builder.build(profile.get('nodes', []))
        self._parent_links, self._children_links = builder.links()
        self.root: ProfileNode = builder.root
        self.program: Optional[ProfileNode] = builder.program
        self.idle: Optional[ProfileNode] = builder.idle
        self.gc: Optional[ProfileNode] = builder.gc
        self.hit_count = builder.hit_count

        # Pass 3: chronological samples and per-node self time
        start_time = profile.get('startTime', 0)
        mapper = SampleMapper(window_min, window_max)
        self.samples: List[Sample] = mapper.map_samples(
            profile.get('samples', []),
            profile.get('timeDeltas', []),
            start_time,
            self.nodes
        )

        # Pass 4: subtree min/max/total
        TimingCalculator(self._children_links).calculate_hierarchy_timings(self.root)

        self.start = start_time
        self.end = self.root.max_time
        self.duration = self.end - self.start

    @classmethod
    def from_trace_event(
        cls,
        trace_event: Optional[Dict[str, Any]],
        window_min: float = UNSET,
        window_max: float = UNSET
    ) -> Optional['CpuProfile']:
        """
        Build a profile from a ``CpuProfile`` instant trace event.

        Returns:
            The reconstructed profile, or None if the event is not a CPU profile
        """
        if not is_cpu_profile_event(trace_event):
            return None
        return cls(trace_event['args']['data']['cpuProfile'], window_min, window_max)

    def node(self, node_id: int) -> ProfileNode:
        node = self.nodes.get(node_id)
        if node is None:
            raise InvalidProfileError(f'invalid node id: {node_id}')
        return node

    def parent(self, node: ProfileNode) -> Optional[ProfileNode]:
        return self._parent_links.get(node.id)

    def children(self, node: ProfileNode) -> Optional[List[ProfileNode]]:
        return self._children_links.get(node.id)

    def hierarchy_children(self, node: ProfileNode) -> List[ProfileNode]:
        """Children as seen by the analysed hierarchy (no (program)/(idle) under root)."""
        children = self._children_links.get(node.id)
        if not children:
            return []
        if node is self.root:
            return [child for child in children if not is_meta_node(child)]
        return children

    def each(self) -> Iterator[ProfileNode]:
        """Breadth-first walk of the hierarchy, starting at the root."""
        queue = deque([self.root])
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(self.hierarchy_children(node))

    def ancestors(self, node: ProfileNode) -> Iterator[ProfileNode]:
        """Yield the node itself, then each parent up to the root."""
        current: Optional[ProfileNode] = node
        while current is not None:
            yield current
            current = self.parent(current)


def is_cpu_profile_event(trace_event: Optional[Dict[str, Any]]) -> bool:
    return (
        trace_event is not None
        and trace_event.get('ph') == 'I'
        and trace_event.get('name') == 'CpuProfile'
    )


def reconstruct(
    raw_nodes: List[Dict[str, Any]],
    sample_ids: Sequence[int],
    time_deltas: Sequence[float],
    start_time: float,
    window_min: float = UNSET,
    window_max: float = UNSET
) -> CpuProfile:
    """
    Reconstruct a profile from its parts.

    Args:
        raw_nodes: Node table
        sample_ids: Node id hit by each sample
        time_deltas: Delta-encoded sample timestamps
        start_time: Profile start timestamp
        window_min: Exclusive lower bound for samples counted in timings
        window_max: Exclusive upper bound, -1 for no bound

    Returns:
        The reconstructed CpuProfile
    """
    return CpuProfile(
        {
            'nodes': raw_nodes,
            'samples': list(sample_ids),
            'timeDeltas': list(time_deltas),
            'startTime': start_time,
        },
        window_min,
        window_max
    )
