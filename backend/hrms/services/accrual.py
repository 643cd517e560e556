"""Accrual engine: monthly allocation top-ups and year-end carry-forward.

Both runs are plain coroutines triggered by an external scheduler (see
``hrms.worker``) or the admin endpoint. Each ledger row is handled in its
own transaction: a fresh locked read, the mutation, ``recompute`` and a
commit. A failing row is rolled back and counted; the run moves on. Cancelling
the task between rows leaves every committed row intact.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrms.models.enums import AccrualType
from hrms.models.leave_balance import LeaveBalance
from hrms.models.leave_type import LeaveType
from hrms.services.ledger import insert_if_absent, lock_balance, recompute

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass
class AccrualRunResult:
    """Summary of a monthly accrual run."""

    as_of: date
    leave_types: int = 0
    processed: int = 0
    accrued: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def year(self) -> int:
        return self.as_of.year


@dataclass
class CarryForwardRunResult:
    """Summary of a year-end carry-forward run."""

    as_of: date
    processed: int = 0
    carried_forward: int = 0
    created: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def from_year(self) -> int:
        return self.as_of.year - 1

    @property
    def to_year(self) -> int:
        return self.as_of.year


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def accrual_period(as_of: date) -> str:
    """Calendar month key stored on a row once it has been accrued for that month."""
    return f"{as_of.year:04d}-{as_of.month:02d}"


def monthly_allocation(annual_allocation: int) -> int:
    """Days credited per monthly run; the remainder of the division is never granted."""
    return annual_allocation // 12


def remaining_from_previous_year(total_allocated: int, carried_forward_days: int, used_days: int) -> int:
    """Unused days of a closed year. Pending requests do not reduce it."""
    return total_allocated + carried_forward_days - used_days


def carry_forward_amount(remaining: int, max_carry_forward_days: int | None) -> int:
    """Clamp ``remaining`` to the leave type's cap, if one is configured."""
    if max_carry_forward_days is None:
        return remaining
    return min(remaining, max_carry_forward_days)


# ---------------------------------------------------------------------------
# DB-backed helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _PolicyInfo:
    """Plain copy of the leave type fields a run needs.

    Rolling back a failed row expires ORM instances, so runs never hold on to
    them across rows.
    """

    id: uuid.UUID
    annual_allocation: int
    max_carry_forward_days: int | None


async def _find_policies(session: AsyncSession, *filters: object) -> list[_PolicyInfo]:
    result = await session.execute(
        select(  # type: ignore[call-overload]
            LeaveType.id,
            LeaveType.annual_allocation,
            LeaveType.max_carry_forward_days,
        )
        .where(col(LeaveType.is_active).is_(True), *filters)
        .order_by(col(LeaveType.name))
    )
    return [
        _PolicyInfo(id=row.id, annual_allocation=row.annual_allocation, max_carry_forward_days=row.max_carry_forward_days)
        for row in result.all()
    ]


async def _find_user_ids(session: AsyncSession, leave_type_id: uuid.UUID, year: int) -> list[uuid.UUID]:
    result = await session.execute(
        select(col(LeaveBalance.user_id))
        .where(
            col(LeaveBalance.leave_type_id) == leave_type_id,
            col(LeaveBalance.year) == year,
        )
        .order_by(col(LeaveBalance.user_id))
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Monthly accrual
# ---------------------------------------------------------------------------


async def run_monthly_accrual(session: AsyncSession, as_of: date | None = None) -> AccrualRunResult:
    """Credit one month of allocation to every current-year row of MONTHLY leave types.

    Adds ``annual_allocation // 12`` to ``total_allocated``, resyncs
    ``remaining_days`` and stamps ``last_accrual_period`` with the month of
    ``as_of``. Rows already stamped for that month are skipped, so repeated
    runs within a month (worker restarts, manual triggers) credit it once.
    """
    if as_of is None:
        as_of = date.today()

    period = accrual_period(as_of)
    result = AccrualRunResult(as_of=as_of)
    policies = await _find_policies(session, col(LeaveType.accrual_type) == AccrualType.MONTHLY.value)
    result.leave_types = len(policies)

    for policy in policies:
        amount = monthly_allocation(policy.annual_allocation)
        user_ids = await _find_user_ids(session, policy.id, as_of.year)

        for user_id in user_ids:
            result.processed += 1
            if amount <= 0:
                result.skipped += 1
                continue
            try:
                balance = await lock_balance(session, user_id, policy.id, as_of.year)
                if balance is None or balance.last_accrual_period == period:
                    # Release the row lock.
                    await session.commit()
                    result.skipped += 1
                    continue
                balance.total_allocated += amount
                balance.last_accrual_period = period
                recompute(balance)
                await session.commit()
                result.accrued += 1
            except Exception:
                await session.rollback()
                logger.exception(
                    "Monthly accrual failed for user=%s leave_type=%s period=%s",
                    user_id,
                    policy.id,
                    period,
                )
                result.errors += 1

    logger.info(
        "Monthly accrual for %s: leave_types=%d processed=%d accrued=%d skipped=%d errors=%d",
        as_of,
        result.leave_types,
        result.processed,
        result.accrued,
        result.skipped,
        result.errors,
    )
    return result


# ---------------------------------------------------------------------------
# Year-end carry-forward
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _ClosedBalance:
    user_id: uuid.UUID
    total_allocated: int
    carried_forward_days: int
    used_days: int
    organization_id: uuid.UUID | None


async def _find_closed_balances(session: AsyncSession, leave_type_id: uuid.UUID, year: int) -> list[_ClosedBalance]:
    result = await session.execute(
        select(  # type: ignore[call-overload]
            LeaveBalance.user_id,
            LeaveBalance.total_allocated,
            LeaveBalance.carried_forward_days,
            LeaveBalance.used_days,
            LeaveBalance.organization_id,
        )
        .where(
            col(LeaveBalance.leave_type_id) == leave_type_id,
            col(LeaveBalance.year) == year,
        )
        .order_by(col(LeaveBalance.user_id))
    )
    return [
        _ClosedBalance(
            user_id=row.user_id,
            total_allocated=row.total_allocated,
            carried_forward_days=row.carried_forward_days,
            used_days=row.used_days,
            organization_id=row.organization_id,
        )
        for row in result.all()
    ]


async def _lock_or_create_current(
    session: AsyncSession,
    policy: _PolicyInfo,
    closed: _ClosedBalance,
    year: int,
) -> tuple[LeaveBalance, bool]:
    """Return the locked row for ``year``, creating it if absent. The flag is True when created."""
    balance = await lock_balance(session, closed.user_id, policy.id, year)
    if balance is not None:
        return balance, False

    fresh = LeaveBalance(
        user_id=closed.user_id,
        leave_type_id=policy.id,
        year=year,
        total_allocated=policy.annual_allocation,
        used_days=0,
        pending_days=0,
        carried_forward_days=0,
        organization_id=closed.organization_id,
    )
    inserted = await insert_if_absent(session, recompute(fresh))
    if inserted is not None:
        return inserted, True

    # Lost a race with an assignment: the row exists now, so lock that one.
    balance = await lock_balance(session, closed.user_id, policy.id, year)
    if balance is None:
        msg = f"Balance for user={closed.user_id} leave_type={policy.id} year={year} vanished after conflict"
        raise RuntimeError(msg)
    return balance, False


async def run_year_end_carry_forward(session: AsyncSession, as_of: date | None = None) -> CarryForwardRunResult:
    """Move unused days of the previous year into the current year's rows.

    For each active leave type that allows carry-forward, every row of
    ``as_of.year - 1`` with ``total + carried - used > 0`` sets the current
    year's ``carried_forward_days`` to that amount, capped by
    ``max_carry_forward_days``. The value is overwritten, not added, and is
    always derived from the closed year, so re-running for the same year is
    idempotent. Rows with nothing left over are not touched.
    """
    if as_of is None:
        as_of = date.today()

    result = CarryForwardRunResult(as_of=as_of)
    policies = await _find_policies(session, col(LeaveType.carry_forward_allowed).is_(True))

    for policy in policies:
        closed_balances = await _find_closed_balances(session, policy.id, result.from_year)

        for closed in closed_balances:
            result.processed += 1
            remaining = remaining_from_previous_year(
                closed.total_allocated, closed.carried_forward_days, closed.used_days
            )
            if remaining <= 0:
                result.skipped += 1
                continue

            carried = carry_forward_amount(remaining, policy.max_carry_forward_days)
            try:
                balance, created = await _lock_or_create_current(session, policy, closed, result.to_year)
                balance.carried_forward_days = carried
                recompute(balance)
                await session.commit()
                result.carried_forward += 1
                if created:
                    result.created += 1
            except Exception:
                await session.rollback()
                logger.exception(
                    "Carry-forward failed for user=%s leave_type=%s %d->%d",
                    closed.user_id,
                    policy.id,
                    result.from_year,
                    result.to_year,
                )
                result.errors += 1

    logger.info(
        "Carry-forward %d->%d: processed=%d carried=%d created=%d skipped=%d errors=%d",
        result.from_year,
        result.to_year,
        result.processed,
        result.carried_forward,
        result.created,
        result.skipped,
        result.errors,
    )
    return result
