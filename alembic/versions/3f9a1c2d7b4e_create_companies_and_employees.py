"""Create companies and employees tables

Revision ID: 3f9a1c2d7b4e
Revises:
Create Date: 2026-10-19 10:12:31.208114

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f9a1c2d7b4e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), nullable=False, primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False, primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("boss_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.ForeignKeyConstraint(
            ["company_id"], ["companies.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["boss_id"], ["employees.id"], ondelete="SET NULL"),
    )
    op.create_index(
        op.f("ix_employees_company_id"), "employees", ["company_id"], unique=False
    )
    op.create_index(
        op.f("ix_employees_boss_id"), "employees", ["boss_id"], unique=False
    )
    op.create_index(
        "idx_employees_company_boss",
        "employees",
        ["company_id", "boss_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_employees_company_boss", table_name="employees")
    op.drop_index(op.f("ix_employees_boss_id"), table_name="employees")
    op.drop_index(op.f("ix_employees_company_id"), table_name="employees")
    op.drop_table("employees")
    op.drop_table("companies")
