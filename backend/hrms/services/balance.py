# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrms.exceptions import NotFoundError
from hrms.models.leave_balance import LeaveBalance
from hrms.models.leave_type import LeaveType
from hrms.schemas.balance import BalanceResponse
from hrms.services.leave_type import build_leave_type_response

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def build_balance_response(balance: LeaveBalance, leave_type: LeaveType | None = None) -> BalanceResponse:
    """Map a ledger row (and optionally its leave type) to the response schema."""
    return BalanceResponse(
        id=balance.id,
        user_id=balance.user_id,
        leave_type_id=balance.leave_type_id,
        leave_type=build_leave_type_response(leave_type) if leave_type is not None else None,
        total_allocated=balance.total_allocated,
        used_days=balance.used_days,
        pending_days=balance.pending_days,
        carried_forward_days=balance.carried_forward_days,
        remaining_days=balance.remaining_days,
        last_accrual_period=balance.last_accrual_period,
        available_balance=balance.available_balance,
        year=balance.year,
        organization_id=balance.organization_id,
        created_at=balance.created_at,
        updated_at=balance.updated_at,
    )


async def get_user_balances(
    session: AsyncSession,
    user_id: uuid.UUID,
    year: int | None = None,
) -> list[BalanceResponse]:
    """All ledger rows of a user for ``year`` (default: current year)."""
    target_year = year or date.today().year
    result = await session.execute(
        select(LeaveBalance, LeaveType)
        .join(LeaveType, col(LeaveBalance.leave_type_id) == col(LeaveType.id))
        .where(
            col(LeaveBalance.user_id) == user_id,
            col(LeaveBalance.year) == target_year,
        )
        .order_by(col(LeaveType.name))
    )
    return [build_balance_response(balance, leave_type) for balance, leave_type in result.all()]


async def get_user_balance_by_type(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int | None = None,
) -> BalanceResponse:
    """One ledger row. Raises NotFoundError if the user holds none for the year."""
    target_year = year or date.today().year
    result = await session.execute(
        select(LeaveBalance, LeaveType)
        .join(LeaveType, col(LeaveBalance.leave_type_id) == col(LeaveType.id))
        .where(
            col(LeaveBalance.user_id) == user_id,
            col(LeaveBalance.leave_type_id) == leave_type_id,
            col(LeaveBalance.year) == target_year,
        )
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Leave balance not found")
    balance, leave_type = row
    return build_balance_response(balance, leave_type)
