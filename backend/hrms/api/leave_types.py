# ruff: noqa: B008, TC001, TC003
"""Leave type registry, default bootstrap and assignment endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from hrms.api.deps import AdminDep, UserDirectoryDep
from hrms.db import SessionDep
from hrms.models.enums import Role
from hrms.schemas.balance import AssignLeaveTypeRequest, BalanceListResponse, BulkAssignLeaveTypesRequest
from hrms.schemas.leave_type import (
    CreateLeaveTypeRequest,
    LeaveTypeListResponse,
    LeaveTypeResponse,
    UpdateLeaveTypeRequest,
)
from hrms.services import assignment as assignment_service
from hrms.services import defaults as defaults_service
from hrms.services import leave_type as leave_type_service

router = APIRouter(prefix="/leave-config", tags=["leave-types"])


@router.post("/leave-types", response_model=LeaveTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_type(
    payload: CreateLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    """Create a custom leave type."""
    return await leave_type_service.create_leave_type(session, payload)


@router.get("/leave-types", response_model=LeaveTypeListResponse)
async def list_leave_types(
    session: SessionDep,
    auth: AdminDep,
    include_inactive: bool = Query(default=False),
) -> LeaveTypeListResponse:
    items = await leave_type_service.list_leave_types(session, include_inactive)
    return LeaveTypeListResponse(items=items, total=len(items))


@router.get("/leave-types/by-role/{role}", response_model=LeaveTypeListResponse)
async def list_leave_types_by_role(
    role: Role,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeListResponse:
    """Active leave types that apply to ``role``."""
    items = await leave_type_service.list_leave_types_by_role(session, role)
    return LeaveTypeListResponse(items=items, total=len(items))


@router.post(
    "/leave-types/bulk-assign",
    response_model=BalanceListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def bulk_assign_leave_types(
    payload: BulkAssignLeaveTypesRequest,
    session: SessionDep,
    auth: AdminDep,
    directory: UserDirectoryDep,
) -> BalanceListResponse:
    """Assign several active leave types to several users; only new rows are returned."""
    items = await assignment_service.bulk_assign(
        session,
        payload.user_ids,
        payload.leave_type_ids,
        payload.organization_id or auth.organization_id,
        directory=directory,
    )
    return BalanceListResponse(items=items, total=len(items))


@router.get("/leave-types/{leave_type_id}", response_model=LeaveTypeResponse)
async def get_leave_type(
    leave_type_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    return await leave_type_service.get_leave_type(session, leave_type_id)


@router.put("/leave-types/{leave_type_id}", response_model=LeaveTypeResponse)
async def update_leave_type(
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    """Partially update a leave type; omitted fields keep their stored values."""
    return await leave_type_service.update_leave_type(session, leave_type_id, payload)


@router.delete("/leave-types/{leave_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_leave_type(
    leave_type_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Soft-delete: the leave type is marked inactive, balances are kept."""
    await leave_type_service.deactivate_leave_type(session, leave_type_id)


@router.post(
    "/leave-types/{leave_type_id}/assign",
    response_model=BalanceListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_leave_type(
    leave_type_id: uuid.UUID,
    payload: AssignLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
    directory: UserDirectoryDep,
) -> BalanceListResponse:
    """Grant the leave type's annual allocation to eligible users for the current year."""
    items = await assignment_service.assign_to_users(
        session,
        leave_type_id,
        payload.user_ids,
        payload.organization_id or auth.organization_id,
        directory=directory,
    )
    return BalanceListResponse(items=items, total=len(items))


@router.post(
    "/default-leave-types",
    response_model=LeaveTypeListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def bootstrap_default_leave_types(
    session: SessionDep,
    auth: AdminDep,
    organization_id: uuid.UUID | None = Query(default=None),
) -> LeaveTypeListResponse:
    """Seed the system-default leave types; names that already exist are skipped."""
    items = await defaults_service.bootstrap_default_leave_types(session, organization_id or auth.organization_id)
    return LeaveTypeListResponse(items=items, total=len(items))
