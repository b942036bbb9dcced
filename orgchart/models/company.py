"""Company and employee models."""

from typing import Dict, Hashable, Set

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    select,
)
from sqlalchemy.orm import Session, aliased, relationship

from ..closure import Edge, group_by_ancestor
from .base import Base, TimestampMixin


class Company(Base, TimestampMixin):
    """A partition of employees. Reporting lines never cross companies."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)

    employees = relationship(
        "Employee", back_populates="company", cascade="all, delete-orphan"
    )


class Employee(Base, TimestampMixin):
    """An employee, optionally reporting to a boss in the same company."""

    __tablename__ = "employees"
    __table_args__ = (Index("idx_employees_company_boss", "company_id", "boss_id"),)

    id = Column(Integer, primary_key=True)
    company_id = Column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    boss_id = Column(
        Integer,
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = Column(String, nullable=True)

    # Relationships
    company = relationship("Company", back_populates="employees")
    # post_update on both sides lets a cycle of bosses be flushed in one go
    boss = relationship(
        "Employee",
        remote_side="Employee.id",
        back_populates="direct_reports",
        post_update=True,
    )
    direct_reports = relationship("Employee", back_populates="boss", post_update=True)

    @classmethod
    def _anchor_query(cls, company_id: int):
        """Direct (employee, boss) pairs with both ends inside the company."""
        boss = aliased(cls)
        return (
            select(cls.id.label("employee_id"), cls.boss_id.label("boss_id"))
            .join(boss, boss.id == cls.boss_id)
            .where(
                cls.company_id == company_id,
                boss.company_id == company_id,
            )
        )

    @classmethod
    def _build_closure_cte(cls, company_id: int, cte_name: str = "closure"):
        """Build a recursive CTE of every (employee, ancestor) pair in a company.

        The recursive step joins the pairs found so far back onto the direct
        boss edges, one level at a time. UNION (not UNION ALL) discards rows
        that were produced before, which is what stops the recursion on
        cyclic reporting lines.

        Args:
            company_id: Company whose reporting lines are followed
            cte_name: Name for the CTE (must be unique within a query)

        Returns:
            SQLAlchemy CTE with ``employee_id`` and ``boss_id`` columns
        """
        base_query = cls._anchor_query(company_id).where(cls.id != cls.boss_id)
        closure = base_query.cte(cte_name, recursive=True)

        anchor = aliased(cls)
        anchor_boss = aliased(cls)
        recursive_query = (
            select(
                closure.c.employee_id.label("employee_id"),
                anchor.boss_id.label("boss_id"),
            )
            .select_from(closure)
            .join(anchor, anchor.id == closure.c.boss_id)
            .join(anchor_boss, anchor_boss.id == anchor.boss_id)
            .where(
                anchor.company_id == company_id,
                anchor_boss.company_id == company_id,
                closure.c.employee_id != anchor.boss_id,
            )
        )

        return closure.union(recursive_query)

    @classmethod
    def query_anchors(cls, session: Session, company_id: int) -> Set[Edge]:
        """Query direct (employee, boss) edges of one company."""
        result = session.execute(cls._anchor_query(company_id))
        return {Edge(row.employee_id, row.boss_id) for row in result}

    @classmethod
    def query_closure(cls, session: Session, company_id: int) -> Set[Edge]:
        """
        Query every (employee, ancestor) pair of one company using recursive SQL.

        Args:
            session: Database session
            company_id: Company to compute the closure for

        Returns:
            Set of Edge(employee_id, ancestor_id)
        """
        closure = cls._build_closure_cte(company_id)
        result = session.execute(select(closure.c.employee_id, closure.c.boss_id))
        return {Edge(row.employee_id, row.boss_id) for row in result}

    @classmethod
    def query_subordinates(
        cls, session: Session, company_id: int
    ) -> Dict[Hashable, Set[Hashable]]:
        """Query boss id -> all direct and indirect subordinate ids of one company."""
        return group_by_ancestor(cls.query_closure(session, company_id))
