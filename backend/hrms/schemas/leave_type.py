# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from hrms.models.enums import DEFAULT_APPLICABLE_ROLES, AccrualType, Role

# Fields that may be omitted from an update but never explicitly cleared.
_NON_NULLABLE_UPDATE_FIELDS = frozenset(
    {
        "name",
        "annual_allocation",
        "carry_forward_allowed",
        "approval_required",
        "accrual_type",
        "applicable_roles",
        "has_balance_restriction",
        "is_active",
    }
)


class CreateLeaveTypeRequest(BaseModel):
    """Request body for creating a leave type."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    annual_allocation: int = Field(ge=0, description="Days granted per full year")
    carry_forward_allowed: bool = False
    max_carry_forward_days: int | None = Field(default=None, ge=0)
    max_consecutive_days: int | None = Field(default=None, ge=1)
    approval_required: bool = True
    accrual_type: AccrualType = AccrualType.YEARLY
    applicable_roles: list[Role] = Field(default_factory=lambda: list(DEFAULT_APPLICABLE_ROLES), min_length=1)
    has_balance_restriction: bool = True
    organization_id: uuid.UUID | None = None


class UpdateLeaveTypeRequest(BaseModel):
    """Partial update: only the fields present in the payload are merged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    annual_allocation: int | None = Field(default=None, ge=0)
    carry_forward_allowed: bool | None = None
    max_carry_forward_days: int | None = Field(default=None, ge=0)
    max_consecutive_days: int | None = Field(default=None, ge=1)
    approval_required: bool | None = None
    accrual_type: AccrualType | None = None
    applicable_roles: list[Role] | None = Field(default=None, min_length=1)
    has_balance_restriction: bool | None = None
    is_active: bool | None = None
    organization_id: uuid.UUID | None = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> Self:
        cleared = sorted(f for f in self.model_fields_set & _NON_NULLABLE_UPDATE_FIELDS if getattr(self, f) is None)
        if cleared:
            msg = f"Fields cannot be null: {', '.join(cleared)}"
            raise ValueError(msg)
        return self


class LeaveTypeResponse(BaseModel):
    """Response schema for a leave type."""

    id: uuid.UUID
    name: str
    description: str | None
    annual_allocation: int
    carry_forward_allowed: bool
    max_carry_forward_days: int | None
    max_consecutive_days: int | None
    approval_required: bool
    accrual_type: AccrualType
    applicable_roles: list[Role]
    is_active: bool
    is_system_default: bool
    has_balance_restriction: bool
    organization_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class LeaveTypeListResponse(BaseModel):
    """List of leave types."""

    items: list[LeaveTypeResponse]
    total: int
