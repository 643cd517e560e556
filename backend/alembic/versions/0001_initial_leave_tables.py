"""Create leave_type and leave_balance.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "leave_type",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("annual_allocation", sa.Integer(), nullable=False),
        sa.Column("carry_forward_allowed", sa.Boolean(), nullable=False),
        sa.Column("max_carry_forward_days", sa.Integer(), nullable=True),
        sa.Column("max_consecutive_days", sa.Integer(), nullable=True),
        sa.Column("approval_required", sa.Boolean(), nullable=False),
        sa.Column("accrual_type", sa.String(length=50), server_default="YEARLY", nullable=False),
        sa.Column("applicable_roles", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_system_default", sa.Boolean(), nullable=False),
        sa.Column("has_balance_restriction", sa.Boolean(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leave_type_name", "leave_type", ["name"])
    op.create_index("ix_leave_type_organization_id", "leave_type", ["organization_id"])
    op.create_index("ix_leave_type_active_accrual", "leave_type", ["is_active", "accrual_type"])

    op.create_table(
        "leave_balance",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_allocated", sa.Integer(), server_default="0", nullable=False),
        sa.Column("used_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("pending_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("carried_forward_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("remaining_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_accrual_period", sa.String(length=7), nullable=True),
        sa.Column("organization_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["leave_type_id"], ["leave_type.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "leave_type_id", "year", name="uq_leave_balance_user_type_year"),
    )
    op.create_index("ix_leave_balance_user_id", "leave_balance", ["user_id"])
    op.create_index("ix_leave_balance_organization_id", "leave_balance", ["organization_id"])
    op.create_index("ix_leave_balance_type_year", "leave_balance", ["leave_type_id", "year"])


def downgrade() -> None:
    op.drop_index("ix_leave_balance_type_year", table_name="leave_balance")
    op.drop_index("ix_leave_balance_organization_id", table_name="leave_balance")
    op.drop_index("ix_leave_balance_user_id", table_name="leave_balance")
    op.drop_table("leave_balance")
    op.drop_index("ix_leave_type_active_accrual", table_name="leave_type")
    op.drop_index("ix_leave_type_organization_id", table_name="leave_type")
    op.drop_index("ix_leave_type_name", table_name="leave_type")
    op.drop_table("leave_type")
