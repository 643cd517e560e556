# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from hrms.schemas.leave_type import LeaveTypeResponse

# ---------------------------------------------------------------------------
# Balance response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    """A single ledger row with its derived available balance."""

    id: uuid.UUID
    user_id: uuid.UUID
    leave_type_id: uuid.UUID
    leave_type: LeaveTypeResponse | None = None
    total_allocated: int
    used_days: int
    pending_days: int
    carried_forward_days: int
    remaining_days: int
    last_accrual_period: str | None = None
    available_balance: int
    year: int
    organization_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class BalanceListResponse(BaseModel):
    """Ledger rows for one user or one assignment run."""

    items: list[BalanceResponse]
    total: int


# ---------------------------------------------------------------------------
# Assignment request schemas
# ---------------------------------------------------------------------------


class AssignLeaveTypeRequest(BaseModel):
    """Request body for assigning one leave type to several users."""

    user_ids: list[uuid.UUID] = Field(min_length=1)
    organization_id: uuid.UUID | None = None


class BulkAssignLeaveTypesRequest(BaseModel):
    """Request body for assigning several leave types to several users."""

    user_ids: list[uuid.UUID] = Field(min_length=1)
    leave_type_ids: list[uuid.UUID] = Field(min_length=1)
    organization_id: uuid.UUID | None = None
