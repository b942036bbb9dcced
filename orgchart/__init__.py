"""orgchart - Resolve every boss's direct and indirect subordinates."""

from orgchart.closure import (
    ClosureError,
    ClosureLimits,
    ComputationLimitExceededError,
    Edge,
    InvalidEdgeError,
    compute_closure,
    group_by_ancestor,
    subordinates,
    validate_edges,
)
from orgchart.partitions import compute_partitions

__all__ = [
    "ClosureError",
    "ClosureLimits",
    "ComputationLimitExceededError",
    "Edge",
    "InvalidEdgeError",
    "compute_closure",
    "compute_partitions",
    "group_by_ancestor",
    "subordinates",
    "validate_edges",
]
