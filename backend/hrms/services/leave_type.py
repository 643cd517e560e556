# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlmodel import col

from hrms.exceptions import DuplicateNameError, InvalidConfigError, NotFoundError
from hrms.models.enums import AccrualType, Role
from hrms.models.leave_type import LeaveType
from hrms.schemas.leave_type import LeaveTypeResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hrms.schemas.leave_type import CreateLeaveTypeRequest, UpdateLeaveTypeRequest

logger = logging.getLogger(__name__)


def build_leave_type_response(leave_type: LeaveType) -> LeaveTypeResponse:
    """Build a LeaveTypeResponse from a DB model."""
    return LeaveTypeResponse(
        id=leave_type.id,
        name=leave_type.name,
        description=leave_type.description,
        annual_allocation=leave_type.annual_allocation,
        carry_forward_allowed=leave_type.carry_forward_allowed,
        max_carry_forward_days=leave_type.max_carry_forward_days,
        max_consecutive_days=leave_type.max_consecutive_days,
        approval_required=leave_type.approval_required,
        accrual_type=AccrualType(leave_type.accrual_type),
        applicable_roles=[Role(r) for r in leave_type.applicable_roles],
        is_active=leave_type.is_active,
        is_system_default=leave_type.is_system_default,
        has_balance_restriction=leave_type.has_balance_restriction,
        organization_id=leave_type.organization_id,
        created_at=leave_type.created_at,
        updated_at=leave_type.updated_at,
    )


def validate_carry_forward(values: dict[str, Any]) -> dict[str, Any]:
    """Enforce that an allowed carry-forward always has a cap.

    When carry-forward is disabled the cap is cleared, so the two fields can
    never disagree. Returns the (possibly normalised) values.
    """
    if values.get("carry_forward_allowed"):
        if values.get("max_carry_forward_days") is None:
            raise InvalidConfigError("Max carry forward days is required when carry forward is allowed")
    else:
        values["max_carry_forward_days"] = None
    return values


async def find_leave_type_by_name(
    session: AsyncSession,
    name: str,
    *,
    active_only: bool = False,
    exclude_id: uuid.UUID | None = None,
) -> LeaveType | None:
    """Return the leave type called ``name``, or None.

    Renaming onto a deactivated leave type's name is allowed, so a name can
    match several rows. The active row wins, then the oldest.
    """
    query = select(LeaveType).where(col(LeaveType.name) == name)
    if active_only:
        query = query.where(col(LeaveType.is_active).is_(True))
    if exclude_id is not None:
        query = query.where(col(LeaveType.id) != exclude_id)
    query = query.order_by(col(LeaveType.is_active).desc(), col(LeaveType.created_at), col(LeaveType.id))
    result = await session.execute(query.limit(1))
    return result.scalar_one_or_none()


async def load_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType:
    """Fetch a leave type regardless of its active flag. Raises NotFoundError if missing."""
    result = await session.execute(select(LeaveType).where(col(LeaveType.id) == leave_type_id))
    leave_type = result.scalar_one_or_none()
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


async def create_leave_type(
    session: AsyncSession,
    payload: CreateLeaveTypeRequest,
) -> LeaveTypeResponse:
    """Create a new leave type."""
    if await find_leave_type_by_name(session, payload.name) is not None:
        raise DuplicateNameError("Leave type with this name already exists")

    values = validate_carry_forward(payload.model_dump())
    leave_type = LeaveType(
        **values,
        is_active=True,
        is_system_default=False,
    )
    session.add(leave_type)
    await session.commit()
    await session.refresh(leave_type)

    logger.info("Created leave type %s (%s)", leave_type.name, leave_type.id)
    return build_leave_type_response(leave_type)


async def update_leave_type(
    session: AsyncSession,
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
) -> LeaveTypeResponse:
    """Merge the fields set in ``payload`` over the stored leave type and re-validate."""
    leave_type = await load_leave_type(session, leave_type_id)
    patch = payload.model_dump(exclude_unset=True)

    new_name = patch.get("name")
    if new_name is not None and new_name != leave_type.name:
        clash = await find_leave_type_by_name(session, new_name, active_only=True, exclude_id=leave_type.id)
        if clash is not None:
            raise DuplicateNameError("Leave type with this name already exists")

    merged = leave_type.model_dump(exclude={"id", "created_at", "updated_at"}) | patch
    merged = validate_carry_forward(merged)

    for field_name, value in merged.items():
        setattr(leave_type, field_name, value)
    await session.commit()
    await session.refresh(leave_type)

    logger.info("Updated leave type %s fields=%s", leave_type.id, sorted(patch))
    return build_leave_type_response(leave_type)


async def deactivate_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> None:
    """Soft-disable a leave type. Existing ledger rows are left as they are."""
    leave_type = await load_leave_type(session, leave_type_id)
    leave_type.is_active = False
    await session.commit()
    logger.info("Deactivated leave type %s", leave_type_id)


async def list_leave_types(
    session: AsyncSession,
    include_inactive: bool = False,
) -> list[LeaveTypeResponse]:
    query = select(LeaveType).order_by(col(LeaveType.created_at), col(LeaveType.name))
    if not include_inactive:
        query = query.where(col(LeaveType.is_active).is_(True))
    result = await session.execute(query)
    return [build_leave_type_response(lt) for lt in result.scalars().all()]


async def get_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveTypeResponse:
    return build_leave_type_response(await load_leave_type(session, leave_type_id))


async def list_leave_types_by_role(session: AsyncSession, role: Role) -> list[LeaveTypeResponse]:
    """List active leave types whose applicable roles include ``role``."""
    # applicable_roles is a JSON column; membership is checked in Python.
    active = await list_leave_types(session)
    return [lt for lt in active if role in lt.applicable_roles]
