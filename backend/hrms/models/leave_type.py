# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from hrms.models.base import TimestampMixin, UUIDBase
from hrms.models.enums import DEFAULT_APPLICABLE_ROLES, AccrualType


def _default_roles() -> list[str]:
    return [role.value for role in DEFAULT_APPLICABLE_ROLES]


class LeaveType(UUIDBase, TimestampMixin, table=True):
    """Entitlement policy: allocation, accrual cadence, carry-forward cap and eligible roles."""

    __tablename__ = "leave_type"
    __table_args__ = (sa.Index("ix_leave_type_active_accrual", "is_active", "accrual_type"),)

    name: str = Field(max_length=255, index=True)
    description: str | None = Field(default=None, sa_type=sa.Text)
    annual_allocation: int
    carry_forward_allowed: bool = False
    max_carry_forward_days: int | None = None
    max_consecutive_days: int | None = None
    approval_required: bool = True
    accrual_type: str = Field(
        default=AccrualType.YEARLY, max_length=50, sa_column_kwargs={"server_default": AccrualType.YEARLY.value}
    )
    applicable_roles: list[str] = Field(default_factory=_default_roles, sa_type=sa.JSON)
    is_active: bool = True
    is_system_default: bool = False
    has_balance_restriction: bool = True
    organization_id: uuid.UUID | None = Field(default=None, index=True)

    def applies_to(self, role: str) -> bool:
        """Return True if users holding ``role`` are eligible for this leave type."""
        return role in self.applicable_roles
