"""Subordinate lookups for companies stored in the database."""

import logging
from typing import Dict, Hashable, Iterable, Optional, Set

from sqlalchemy.orm import Session

from ..closure import ClosureLimits, subordinates
from ..loader import load_anchors, load_anchors_by_company
from ..models import Employee
from ..partitions import compute_partitions

logger = logging.getLogger(__name__)


def subordinates_for_company(
    session: Session, company_id: int, limits: Optional[ClosureLimits] = None
) -> Dict[Hashable, Set[Hashable]]:
    """Boss id -> every direct and indirect subordinate id, for one company."""
    anchors = load_anchors(session, company_id)
    return subordinates(anchors, limits)


def subordinates_for_companies(
    session: Session,
    company_ids: Optional[Iterable[int]] = None,
    limits: Optional[ClosureLimits] = None,
    workers: Optional[int] = None,
) -> Dict[int, Dict[Hashable, Set[Hashable]]]:
    """
    Compute subordinates for several companies, each on its own.

    All anchor sets are loaded up front so the computation itself needs no
    database access and can be spread over worker processes.

    Args:
        session: Database session
        company_ids: Companies to include; all companies when None
        limits: Bounds applied to every company separately
        workers: Number of worker processes (see compute_partitions)

    Returns:
        company id -> boss id -> subordinate ids
    """
    anchors_by_company = load_anchors_by_company(session, company_ids)
    logger.info(f"Loaded reporting lines for {len(anchors_by_company)} companies")
    return compute_partitions(anchors_by_company, limits, workers)


def subordinates_via_sql(
    session: Session, company_id: int
) -> Dict[Hashable, Set[Hashable]]:
    """Same result as subordinates_for_company, computed by a recursive query."""
    return Employee.query_subordinates(session, company_id)
