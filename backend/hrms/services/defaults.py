"""System-default leave types seeded per deployment."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from hrms.models.enums import DEFAULT_APPLICABLE_ROLES, AccrualType
from hrms.models.leave_type import LeaveType
from hrms.services.leave_type import build_leave_type_response, find_leave_type_by_name

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hrms.schemas.leave_type import LeaveTypeResponse

logger = logging.getLogger(__name__)

CASUAL_LEAVE = "Casual Leave"
MEDICAL_LEAVE = "Medical Leave"
LOSS_OF_PAY = "Loss of Pay (LOP)"
OPTIONAL_LEAVE = "Optional Leave"

DEFAULT_LEAVE_TYPES: tuple[dict[str, Any], ...] = (
    {
        "name": CASUAL_LEAVE,
        "description": "Casual leave for personal matters",
        "annual_allocation": 12,
        "carry_forward_allowed": True,
        "max_carry_forward_days": 6,
        "max_consecutive_days": 5,
        "accrual_type": AccrualType.MONTHLY,
        "has_balance_restriction": True,
    },
    {
        "name": MEDICAL_LEAVE,
        "description": "Medical leave for health-related issues",
        "annual_allocation": 15,
        "carry_forward_allowed": False,
        "max_carry_forward_days": None,
        "max_consecutive_days": 30,
        "accrual_type": AccrualType.YEARLY,
        "has_balance_restriction": True,
    },
    {
        "name": LOSS_OF_PAY,
        "description": "Loss of Pay leave - no balance restriction",
        "annual_allocation": 0,
        "carry_forward_allowed": False,
        "max_carry_forward_days": None,
        "max_consecutive_days": None,
        "accrual_type": AccrualType.YEARLY,
        "has_balance_restriction": False,
    },
    {
        "name": OPTIONAL_LEAVE,
        "description": "Optional leave for special occasions",
        "annual_allocation": 5,
        "carry_forward_allowed": False,
        "max_carry_forward_days": None,
        "max_consecutive_days": 3,
        "accrual_type": AccrualType.YEARLY,
        "has_balance_restriction": True,
    },
)


async def bootstrap_default_leave_types(
    session: AsyncSession,
    organization_id: uuid.UUID | None = None,
) -> list[LeaveTypeResponse]:
    """Create each system-default leave type whose name is not taken yet.

    Safe to re-run: names that already exist are skipped, so a second call
    returns an empty list.
    """
    created: list[LeaveType] = []
    for definition in DEFAULT_LEAVE_TYPES:
        if await find_leave_type_by_name(session, definition["name"]) is not None:
            continue
        leave_type = LeaveType(
            **definition,
            approval_required=True,
            applicable_roles=[role.value for role in DEFAULT_APPLICABLE_ROLES],
            is_active=True,
            is_system_default=True,
            organization_id=organization_id,
        )
        session.add(leave_type)
        await session.flush()
        created.append(leave_type)

    await session.commit()
    for leave_type in created:
        await session.refresh(leave_type)

    if created:
        logger.info("Seeded default leave types: %s", ", ".join(lt.name for lt in created))
    return [build_leave_type_response(lt) for lt in created]
