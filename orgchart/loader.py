"""Relation loaders producing anchor sets for the closure engine."""

import csv
import logging
from collections import defaultdict
from typing import Dict, Iterable, Optional, Set

from sqlalchemy import select
from sqlalchemy.orm import Session

from .closure import Edge
from .models import Company, Employee

logger = logging.getLogger(__name__)

ID_COLUMN = "id"
PARENT_COLUMN = "parent_id"
PARTITION_COLUMN = "company_id"


def load_anchors(session: Session, company_id: int) -> Set[Edge]:
    """
    Load direct (employee, boss) edges for one company.

    Employees without a boss are left out. So is any edge whose boss belongs
    to another company, since the engine trusts its input to be one partition.
    """
    anchors = Employee.query_anchors(session, company_id)
    logger.debug(f"Loaded {len(anchors)} reporting lines for company {company_id}")
    return anchors


def load_anchors_by_company(
    session: Session, company_ids: Optional[Iterable[int]] = None
) -> Dict[int, Set[Edge]]:
    """
    Load anchor sets for several companies.

    Args:
        session: Database session
        company_ids: Companies to load; all companies when None

    Returns:
        company id -> that company's anchor set (possibly empty)
    """
    if company_ids is None:
        company_ids = session.execute(select(Company.id).order_by(Company.id)).scalars().all()

    return {company_id: load_anchors(session, company_id) for company_id in company_ids}


def _read_rows(csv_file_path: str) -> Iterable[dict]:
    with open(csv_file_path, "r", encoding="utf-8-sig", newline="") as csvfile:
        reader = csv.DictReader(csvfile)
        missing = {ID_COLUMN, PARENT_COLUMN} - set(reader.fieldnames or [])
        if missing:
            raise ValueError(
                f"{csv_file_path} is missing column(s): {', '.join(sorted(missing))}"
            )
        yield from reader


def load_anchors_csv(csv_file_path: str) -> Dict[str, Set[Edge]]:
    """
    Read (id, parent_id) pairs from a CSV file.

    Expected CSV format:
    "id","parent_id"[,"company_id"]

    Rows with an empty parent_id have no boss and are skipped. Without a
    company_id column every row belongs to a single partition keyed "".
    Ids are kept as strings.

    Args:
        csv_file_path: Path to the CSV file

    Returns:
        partition key -> anchor set
    """
    partitions: Dict[str, Set[Edge]] = defaultdict(set)
    skipped = 0

    for row in _read_rows(csv_file_path):
        child_id = (row.get(ID_COLUMN) or "").strip()
        parent_id = (row.get(PARENT_COLUMN) or "").strip()
        partition = (row.get(PARTITION_COLUMN) or "").strip()

        if not child_id:
            logger.debug(f"Skipping row without id: {row}")
            skipped += 1
            continue

        if not parent_id:
            partitions.setdefault(partition, set())
            continue

        partitions[partition].add(Edge(child_id, parent_id))

    if skipped:
        logger.warning(f"Skipped {skipped} rows without an id in {csv_file_path}")

    logger.info(
        f"Loaded {sum(len(edges) for edges in partitions.values())} reporting lines "
        f"in {len(partitions)} partition(s) from {csv_file_path}"
    )
    return dict(partitions)
