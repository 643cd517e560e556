# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrms.exceptions import NoEligibleUsersError, NoValidUsersError, NotFoundError
from hrms.models.leave_type import LeaveType
from hrms.services.balance import build_balance_response
from hrms.services.leave_type import load_leave_type
from hrms.services.ledger import balance_exists, insert_if_absent, new_balance
from hrms.services.users import get_user_directory, resolve_assignable_users

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hrms.models.leave_balance import LeaveBalance
    from hrms.schemas.balance import BalanceResponse
    from hrms.services.users import UserDirectory, UserInfo

logger = logging.getLogger(__name__)


async def _create_missing_balances(
    session: AsyncSession,
    leave_type: LeaveType,
    users: list[UserInfo],
    year: int,
    organization_id: uuid.UUID | None,
) -> list[LeaveBalance]:
    """Insert a row for each user that has none for ``year``; existing rows are never touched."""
    created: list[LeaveBalance] = []
    for user in users:
        if await balance_exists(session, user.id, leave_type.id, year):
            continue
        balance = new_balance(leave_type, user.id, year, organization_id or leave_type.organization_id)
        inserted = await insert_if_absent(session, balance)
        if inserted is None:
            logger.info(
                "Balance for user=%s leave_type=%s year=%d created concurrently; skipping",
                user.id,
                leave_type.id,
                year,
            )
            continue
        created.append(inserted)
    return created


async def assign_to_users(
    session: AsyncSession,
    leave_type_id: uuid.UUID,
    user_ids: list[uuid.UUID],
    organization_id: uuid.UUID | None = None,
    *,
    as_of: date | None = None,
    directory: UserDirectory | None = None,
) -> list[BalanceResponse]:
    """Grant a leave type's annual allocation to users for the current year.

    The leave type must exist but need not be active. Users who already hold
    a row for the year are skipped and left out of the result.

    Raises:
        NotFoundError: unknown leave type.
        NoValidUsersError: no ID resolved to an active, non-deleted user.
        NoEligibleUsersError: no resolved user holds an applicable role.
    """
    year = (as_of or date.today()).year
    leave_type = await load_leave_type(session, leave_type_id)

    users = await resolve_assignable_users(directory or get_user_directory(), user_ids)
    if not users:
        raise NoValidUsersError("No valid users found")

    eligible = [u for u in users if leave_type.applies_to(u.role)]
    if not eligible:
        raise NoEligibleUsersError("No users match the applicable roles for this leave type")

    created = await _create_missing_balances(session, leave_type, eligible, year, organization_id)
    await session.commit()

    logger.info(
        "Assigned leave type %s for %d: created=%d skipped=%d",
        leave_type.id,
        year,
        len(created),
        len(eligible) - len(created),
    )
    return [build_balance_response(b, leave_type) for b in created]


async def bulk_assign(
    session: AsyncSession,
    user_ids: list[uuid.UUID],
    leave_type_ids: list[uuid.UUID],
    organization_id: uuid.UUID | None = None,
    *,
    as_of: date | None = None,
    directory: UserDirectory | None = None,
) -> list[BalanceResponse]:
    """Assign every active leave type in ``leave_type_ids`` to every eligible user.

    Pairs that are ineligible by role or already assigned for the year are
    skipped silently.
    """
    year = (as_of or date.today()).year

    result = await session.execute(
        select(LeaveType)
        .where(
            col(LeaveType.id).in_(leave_type_ids),
            col(LeaveType.is_active).is_(True),
        )
        .order_by(col(LeaveType.name))
    )
    leave_types = list(result.scalars().all())
    if not leave_types:
        raise NotFoundError("No valid leave types found")

    users = await resolve_assignable_users(directory or get_user_directory(), user_ids)
    if not users:
        raise NoValidUsersError("No valid users found")

    responses: list[BalanceResponse] = []
    for leave_type in leave_types:
        eligible = [u for u in users if leave_type.applies_to(u.role)]
        created = await _create_missing_balances(session, leave_type, eligible, year, organization_id)
        responses.extend(build_balance_response(b, leave_type) for b in created)
    await session.commit()

    logger.info(
        "Bulk assigned %d leave types to %d users for %d: created=%d",
        len(leave_types),
        len(users),
        year,
        len(responses),
    )
    return responses
