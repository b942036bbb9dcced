"""Compute closures for several independent partitions, optionally in parallel."""

import logging
import multiprocessing as mp
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Set, Tuple

from .closure import ClosureLimits, Edge, group_by_ancestor, compute_closure

logger = logging.getLogger(__name__)


def _process_partition(
    partition_key: Hashable,
    anchors: List[Edge],
    limits: Optional[ClosureLimits],
) -> Tuple[Hashable, Dict[Hashable, Set[Hashable]]]:
    """Worker: closure and grouping for one partition's anchor snapshot."""
    closure = compute_closure(anchors, limits)
    return partition_key, group_by_ancestor(closure)


def compute_partitions(
    anchors_by_partition: Mapping[Hashable, Iterable[Any]],
    limits: Optional[ClosureLimits] = None,
    workers: Optional[int] = None,
) -> Dict[Hashable, Dict[Hashable, Set[Hashable]]]:
    """
    Group subordinates per ancestor for every partition independently.

    Each partition gets its own copy of its anchors, so ids that collide
    across partitions never meet. With more than one worker and more than one
    partition the work is spread over a process pool.

    Args:
        anchors_by_partition: partition key -> that partition's (id, parent_id) pairs
        limits: Bounds applied to each partition's computation separately
        workers: Pool size; defaults to the CPU count, 1 runs serially

    Returns:
        partition key -> ancestor_id -> set of descendant ids

    Raises:
        ComputationLimitExceededError: if any partition trips ``limits``
        InvalidEdgeError: if any partition has a malformed edge
    """
    tasks = [
        (partition_key, list(anchors), limits)
        for partition_key, anchors in anchors_by_partition.items()
    ]
    if not tasks:
        return {}

    num_workers = min(workers or mp.cpu_count(), len(tasks))

    if num_workers <= 1:
        logger.info(f"Computing {len(tasks)} partitions serially")
        return dict(_process_partition(*task) for task in tasks)

    logger.info(f"Computing {len(tasks)} partitions with {num_workers} workers")

    pool = None
    try:
        pool = mp.Pool(processes=num_workers)
        async_result = pool.starmap_async(_process_partition, tasks)
        results = async_result.get()
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, cleaning up workers...")
        if pool:
            pool.terminate()
            pool.join()
            pool = None
        raise
    finally:
        if pool:
            pool.close()
            pool.join()

    return dict(results)
