# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from hrms.models.base import TimestampMixin, UUIDBase


class LeaveBalance(UUIDBase, TimestampMixin, table=True):
    """Per-user, per-leave-type, per-year ledger row.

    ``remaining_days`` is a stored snapshot that every engine mutation keeps
    equal to :attr:`available_balance`.

    ``last_accrual_period`` (``YYYY-MM``) marks the month the row last received
    a monthly accrual, so a period is never credited twice.
    """

    __tablename__ = "leave_balance"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "leave_type_id", "year", name="uq_leave_balance_user_type_year"),
        sa.Index("ix_leave_balance_type_year", "leave_type_id", "year"),
    )

    user_id: uuid.UUID = Field(index=True)
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), nullable=False),
    )
    year: int
    total_allocated: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    used_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    pending_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    carried_forward_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    remaining_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    last_accrual_period: str | None = Field(default=None, max_length=7)
    organization_id: uuid.UUID | None = Field(default=None, index=True)

    @property
    def available_balance(self) -> int:
        return self.total_allocated + self.carried_forward_days - self.used_days - self.pending_days
