"""Ledger primitives shared by assignment and accrual.

Every engine write goes through these helpers so that the
``(user_id, leave_type_id, year)`` key stays unique and ``remaining_days``
always matches the derived available balance.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from hrms.models.leave_balance import LeaveBalance

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hrms.models.leave_type import LeaveType


def compute_available(total_allocated: int, carried_forward_days: int, used_days: int, pending_days: int) -> int:
    return total_allocated + carried_forward_days - used_days - pending_days


def recompute(balance: LeaveBalance) -> LeaveBalance:
    """Resync ``remaining_days`` from the stored fields and return the row."""
    balance.remaining_days = compute_available(
        balance.total_allocated,
        balance.carried_forward_days,
        balance.used_days,
        balance.pending_days,
    )
    return balance


def new_balance(
    leave_type: LeaveType,
    user_id: uuid.UUID,
    year: int,
    organization_id: uuid.UUID | None,
) -> LeaveBalance:
    """Build an unsaved row granting the leave type's full annual allocation."""
    return recompute(
        LeaveBalance(
            user_id=user_id,
            leave_type_id=leave_type.id,
            year=year,
            total_allocated=leave_type.annual_allocation,
            used_days=0,
            pending_days=0,
            carried_forward_days=0,
            organization_id=organization_id,
        )
    )


async def balance_exists(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int,
) -> bool:
    result = await session.execute(
        select(col(LeaveBalance.id)).where(
            col(LeaveBalance.user_id) == user_id,
            col(LeaveBalance.leave_type_id) == leave_type_id,
            col(LeaveBalance.year) == year,
        )
    )
    return result.scalar_one_or_none() is not None


async def lock_balance(
    session: AsyncSession,
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    year: int,
) -> LeaveBalance | None:
    """Read a row fresh from the database with a FOR UPDATE lock."""
    result = await session.execute(
        select(LeaveBalance)
        .where(
            col(LeaveBalance.user_id) == user_id,
            col(LeaveBalance.leave_type_id) == leave_type_id,
            col(LeaveBalance.year) == year,
        )
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def insert_if_absent(session: AsyncSession, balance: LeaveBalance) -> LeaveBalance | None:
    """Insert ``balance`` unless its key already exists.

    The insert runs inside a savepoint so a unique-constraint conflict (a
    concurrent writer got there first) only discards this row. Returns the
    inserted row, or None if the key was already taken.
    """
    try:
        async with session.begin_nested():
            session.add(balance)
            await session.flush()
    except IntegrityError:
        return None
    return balance
