"""
Sample stream reconstruction for CPU profiles.
"""

from typing import Dict, List, Sequence

from ..core.errors import InvalidProfileError
from ..core.types import UNSET, ProfileNode, Sample


class SampleMapper:
    """Turns delta-encoded sample ids into a chronological sample list."""

    def __init__(self, window_min: float = UNSET, window_max: float = UNSET):
        """
        Initialize with the time window.

        Args:
            window_min: Exclusive lower bound on sample timestamps
            window_max: Exclusive upper bound on sample timestamps, -1 for none
        """
        self.window_min = window_min
        self.window_max = window_max

    def in_window(self, timestamp: float) -> bool:
        """Check whether a sample at this timestamp contributes to node timings."""
        return self.window_min < timestamp and (
            self.window_max > timestamp or self.window_max == UNSET
        )

    def map_samples(
        self,
        sample_ids: Sequence[int],
        time_deltas: Sequence[float],
        start_time: float,
        nodes: Dict[int, ProfileNode]
    ) -> List[Sample]:
        """
        Rebuild absolute timestamps, sort the samples and accumulate self time.

        Deltas can be negative, so the input order is not chronological. The
        samples are sorted before node timings are touched; max_time is simply
        overwritten per sample and is only correct in chronological order.

        Args:
            sample_ids: Node id of each sample
            time_deltas: Offset of each sample from the previous one
            start_time: Profile start timestamp
            nodes: Mapping of node id -> ProfileNode (modified in-place)

        Returns:
            Samples sorted by timestamp with prev/next links set

        Raises:
            InvalidProfileError: On length mismatch or unknown node ids
        """
        if len(sample_ids) != len(time_deltas):
            raise InvalidProfileError(
                f'samples ({len(sample_ids)}) and timeDeltas ({len(time_deltas)}) '
                f'differ in length'
            )

        samples = []
        last = start_time
        for node_id, time_delta in zip(sample_ids, time_deltas):
            node = nodes.get(node_id)
            if node is None:
                raise InvalidProfileError(f'invalid node id: {node_id}')
            timestamp = last + time_delta
            samples.append(Sample(node=node, timestamp=timestamp))
            last = timestamp

            node.sample_count += 1

        samples.sort(key=lambda s: s.timestamp)

        prev = None
        for sample in samples:
            timestamp = sample.timestamp

            if prev is None:
                sample.delta = timestamp - start_time
            else:
                prev.next = sample
                sample.prev = prev
                sample.delta = timestamp - prev.timestamp

            if self.in_window(timestamp):
                node = sample.node
                if node.min_time == UNSET:
                    node.min_time = timestamp
                node.self_time += sample.delta
                node.max_time = timestamp

            prev = sample

        return samples
