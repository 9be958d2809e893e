"""
Unit tests for profile_analyzer.processors.sample_mapper module.
"""
import pytest
from profile_analyzer.core.errors import InvalidProfileError
from profile_analyzer.core.types import CallFrame, ProfileNode
from profile_analyzer.processors.sample_mapper import SampleMapper


def make_nodes(*ids):
    """Helper to create an id -> ProfileNode map."""
    frame = CallFrame('f', '1', 'https://www.example.com/a.js', 1, 1)
    return {node_id: ProfileNode(id=node_id, call_frame=frame) for node_id in ids}


class TestMapSamples:
    """Tests for the map_samples method."""

    def test_timestamps_from_prefix_sum(self):
        """Test that absolute timestamps are the running sum of deltas."""
        nodes = make_nodes(1, 2)
        samples = SampleMapper().map_samples([1, 2, 1], [10, 5, 5], 100, nodes)

        assert [s.timestamp for s in samples] == [110, 115, 120]
        assert [s.delta for s in samples] == [10, 5, 5]

    def test_negative_deltas_sorted_chronologically(self):
        """Test that out-of-order samples are sorted and deltas recomputed."""
        nodes = make_nodes(1, 2)
        samples = SampleMapper().map_samples([1, 2], [10, -5], 0, nodes)

        assert [s.node.id for s in samples] == [2, 1]
        assert [s.timestamp for s in samples] == [5, 10]
        assert [s.delta for s in samples] == [5, 5]

    def test_prev_next_links(self):
        """Test that samples are doubly linked in chronological order."""
        nodes = make_nodes(1)
        samples = SampleMapper().map_samples([1, 1, 1], [1, 1, 1], 0, nodes)

        assert samples[0].prev is None
        assert samples[0].next is samples[1]
        assert samples[1].prev is samples[0]
        assert samples[2].next is None

    def test_self_time_and_bounds(self):
        """Test that self time, min and max accumulate per node."""
        nodes = make_nodes(1, 2)
        SampleMapper().map_samples([1, 2, 1], [4, 3, 2], 0, nodes)

        assert nodes[1].self_time == 6
        assert nodes[1].min_time == 4
        assert nodes[1].max_time == 9
        assert nodes[2].self_time == 3
        assert nodes[2].min_time == nodes[2].max_time == 7

    def test_max_follows_chronological_order(self):
        """
        Test that max is correct for out-of-order input.

        max_time is overwritten per sample, so it is only the true maximum
        because samples are processed after the chronological sort.
        """
        nodes = make_nodes(1)
        SampleMapper().map_samples([1, 1, 1], [30, -20, 5], 0, nodes)

        assert nodes[1].min_time == 10
        assert nodes[1].max_time == 30

    def test_window_bounds_are_exclusive(self):
        """Test that samples exactly on the window edges are ignored for timing."""
        nodes = make_nodes(1)
        mapper = SampleMapper(window_min=10, window_max=30)
        mapper.map_samples([1, 1, 1, 1], [10, 10, 10, 10], 0, nodes)

        # Only the sample at 20 is strictly inside (10, 30)
        assert nodes[1].self_time == 10
        assert nodes[1].min_time == 20
        assert nodes[1].max_time == 20

    def test_sample_count_ignores_window(self):
        """Test that sample counts include samples outside the window."""
        nodes = make_nodes(1)
        SampleMapper(window_min=100).map_samples([1, 1], [1, 1], 0, nodes)

        assert nodes[1].sample_count == 2
        assert nodes[1].self_time == 0
        assert nodes[1].min_time == -1

    def test_no_upper_bound(self):
        """Test that window_max of -1 means no upper bound."""
        mapper = SampleMapper(window_min=0, window_max=-1)
        assert mapper.in_window(1_000_000_000)
        assert not mapper.in_window(0)

    def test_length_mismatch_raises(self):
        """Test that samples and deltas must have the same length."""
        with pytest.raises(InvalidProfileError, match='differ in length'):
            SampleMapper().map_samples([1, 1], [1], 0, make_nodes(1))

    def test_unknown_node_id_raises(self):
        """Test that samples must reference existing nodes."""
        with pytest.raises(InvalidProfileError, match='invalid node id: 7'):
            SampleMapper().map_samples([7], [1], 0, make_nodes(1))
