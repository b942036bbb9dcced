"""Tests for per-partition closure computation."""

import pytest

from orgchart.closure import ClosureLimits, ComputationLimitExceededError, InvalidEdgeError
from orgchart.partitions import compute_partitions


class TestComputePartitions:
    """Test cases for compute_partitions."""

    @pytest.fixture
    def partitions(self):
        """Two companies whose employee ids collide."""
        return {
            "acme": [(1, 2), (2, 3), (4, 3)],
            "globex": [(1, 5), (5, 6)],
        }

    def test_serial(self, partitions):
        """Test that each partition gets its own grouping."""
        results = compute_partitions(partitions, workers=1)
        assert results == {
            "acme": {2: {1}, 3: {1, 2, 4}},
            "globex": {5: {1}, 6: {1, 5}},
        }

    def test_process_pool_matches_serial(self, partitions):
        """Test that spreading over processes gives the same answer."""
        assert compute_partitions(partitions, workers=2) == compute_partitions(
            partitions, workers=1
        )

    def test_colliding_ids_do_not_leak(self, partitions):
        """Test that a shared id doesn't merge two hierarchies."""
        results = compute_partitions(partitions, workers=1)
        assert 3 not in results["globex"]
        assert 6 not in results["acme"]
        assert results["acme"][3] == {1, 2, 4}

    def test_empty_mapping(self):
        """Test no partitions at all."""
        assert compute_partitions({}) == {}

    def test_partition_without_edges(self):
        """Test that a partition with no reporting lines maps to an empty grouping."""
        assert compute_partitions({"empty": []}, workers=1) == {"empty": {}}

    def test_limits_apply_per_partition(self, partitions):
        """Test that a bound trips in whichever partition exceeds it."""
        partitions["deep"] = [(i, i + 1) for i in range(10)]
        with pytest.raises(ComputationLimitExceededError):
            compute_partitions(partitions, ClosureLimits(max_iterations=3), workers=1)

    def test_worker_errors_propagate(self, partitions):
        """Test that an error raised in a worker process reaches the caller."""
        partitions["deep"] = [(i, i + 1) for i in range(10)]
        with pytest.raises(ComputationLimitExceededError) as exc_info:
            compute_partitions(partitions, ClosureLimits(max_iterations=3), workers=2)
        assert exc_info.value.iterations == 4

    def test_invalid_edge_propagates(self):
        """Test that a malformed edge in one partition fails the call."""
        with pytest.raises(InvalidEdgeError):
            compute_partitions({"bad": [(1, None)]}, workers=1)
