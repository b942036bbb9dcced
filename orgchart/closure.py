"""Transitive closure of a boss/subordinate relation."""

import logging
import os
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, NamedTuple, Optional, Set

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    """One reporting line: ``id`` reports (directly or not) to ``parent_id``."""

    id: Hashable
    parent_id: Hashable


class ClosureError(Exception):
    """Base class for closure computation failures."""

    pass


class InvalidEdgeError(ClosureError, ValueError):
    """Raised when an input edge is malformed."""

    def __init__(self, message: str, edge: Any = None):
        super().__init__(message)
        self.edge = edge

    def __reduce__(self):
        return (self.__class__, (str(self), self.edge))


class ComputationLimitExceededError(ClosureError):
    """Raised when a configured ClosureLimits bound is reached."""

    def __init__(self, message: str, iterations: int, pairs: int):
        super().__init__(message)
        self.iterations = iterations
        self.pairs = pairs

    def __reduce__(self):
        return (self.__class__, (str(self), self.iterations, self.pairs))


def _env_number(name: str, cast):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class ClosureLimits:
    """Optional bounds on a closure computation. ``None`` means unbounded."""

    max_iterations: Optional[int] = None
    max_pairs: Optional[int] = None
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "ClosureLimits":
        """Build limits from ORGCHART_MAX_ITERATIONS, ORGCHART_MAX_PAIRS and ORGCHART_TIMEOUT."""
        return cls(
            max_iterations=_env_number("ORGCHART_MAX_ITERATIONS", int),
            max_pairs=_env_number("ORGCHART_MAX_PAIRS", int),
            timeout=_env_number("ORGCHART_TIMEOUT", float),
        )

    def check(self, iterations: int, pairs: int, started_at: float) -> None:
        """Raise ComputationLimitExceededError if any bound has been passed."""
        if self.max_iterations is not None and iterations > self.max_iterations:
            raise ComputationLimitExceededError(
                f"Closure needed more than {self.max_iterations} iterations",
                iterations,
                pairs,
            )
        if self.max_pairs is not None and pairs > self.max_pairs:
            raise ComputationLimitExceededError(
                f"Closure grew beyond {self.max_pairs} pairs", iterations, pairs
            )
        if self.timeout is not None and time.monotonic() - started_at > self.timeout:
            raise ComputationLimitExceededError(
                f"Closure did not finish within {self.timeout}s", iterations, pairs
            )


def validate_edges(edges: Iterable[Any]) -> Set[Edge]:
    """
    Coerce raw ``(id, parent_id)`` pairs into a set of Edges.

    Duplicates collapse. Any pair with a null endpoint, or anything that is
    not a pair at all, is rejected before the engine sees it.

    Raises:
        InvalidEdgeError: on the first malformed pair
    """
    anchors: Set[Edge] = set()
    for raw in edges:
        # A two-character string would otherwise unpack into a pair
        if isinstance(raw, (str, bytes)):
            raise InvalidEdgeError(f"Edge must be an (id, parent_id) pair: {raw!r}", raw)
        try:
            child_id, parent_id = raw
        except (TypeError, ValueError):
            raise InvalidEdgeError(f"Edge must be an (id, parent_id) pair: {raw!r}", raw)
        if child_id is None:
            raise InvalidEdgeError(f"Edge has a null id: {raw!r}", raw)
        if parent_id is None:
            raise InvalidEdgeError(
                f"Edge for {child_id!r} has a null parent_id", raw
            )
        try:
            anchors.add(Edge(child_id, parent_id))
        except TypeError:
            raise InvalidEdgeError(f"Edge endpoints must be hashable: {raw!r}", raw)
    return anchors


def compute_closure(
    anchors: Iterable[Any], limits: Optional[ClosureLimits] = None
) -> Set[Edge]:
    """
    Expand parent pointers into every (descendant, ancestor) pair.

    Level-synchronous: each iteration extends the edges discovered in the
    previous one by exactly one hop through the anchor relation. Candidates
    that point back at their own start, or that are already known, are dropped,
    so cycles and self-loops exhaust the frontier instead of feeding it.

    Args:
        anchors: Direct (id, parent_id) pairs for a single partition
        limits: Optional bounds; when one trips nothing is returned

    Returns:
        Set of Edge(id, ancestor_id), never containing id == ancestor_id

    Raises:
        InvalidEdgeError: if an anchor is malformed
        ComputationLimitExceededError: if ``limits`` is given and exceeded
    """
    edges = validate_edges(anchors)

    # Reflexive anchors can never contribute a non-reflexive pair on their own.
    direct = {edge for edge in edges if edge.id != edge.parent_id}
    dropped = len(edges) - len(direct)
    if dropped:
        logger.debug(f"Ignoring {dropped} self-referencing edges")

    parents_of: Dict[Hashable, Set[Hashable]] = defaultdict(set)
    for edge in direct:
        parents_of[edge.id].add(edge.parent_id)

    closure: Set[Edge] = set(direct)
    frontier: Set[Edge] = set(direct)
    iterations = 0
    started_at = time.monotonic()

    while frontier:
        iterations += 1
        if limits is not None:
            limits.check(iterations, len(closure), started_at)

        next_frontier: Set[Edge] = set()
        for child_id, ancestor_id in frontier:
            for next_ancestor in parents_of.get(ancestor_id, ()):
                if next_ancestor == child_id:
                    continue
                candidate = Edge(child_id, next_ancestor)
                if candidate not in closure:
                    next_frontier.add(candidate)

        closure |= next_frontier
        frontier = next_frontier
        logger.debug(
            f"Iteration {iterations}: {len(frontier)} new pairs, {len(closure)} total"
        )

    if limits is not None:
        limits.check(iterations, len(closure), started_at)

    logger.info(
        f"Closure of {len(edges)} edges: {len(closure)} pairs after {iterations} iterations"
    )
    return closure


def group_by_ancestor(closure: Iterable[Any]) -> Dict[Hashable, Set[Hashable]]:
    """Fold (id, ancestor_id) pairs into ancestor_id -> set of ids."""
    groups: Dict[Hashable, Set[Hashable]] = defaultdict(set)
    for child_id, ancestor_id in closure:
        groups[ancestor_id].add(child_id)
    return dict(groups)


def subordinates(
    anchors: Iterable[Any], limits: Optional[ClosureLimits] = None
) -> Dict[Hashable, Set[Hashable]]:
    """Closure and grouping in one call."""
    return group_by_ancestor(compute_closure(anchors, limits))
