"""Tests for the balance ledger primitives and the balance read endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

import pytest

from hrms.exceptions import NotFoundError
from hrms.models.leave_balance import LeaveBalance
from hrms.models.leave_type import LeaveType
from hrms.services import balance as balance_service
from hrms.services.ledger import (
    balance_exists,
    compute_available,
    insert_if_absent,
    lock_balance,
    new_balance,
    recompute,
)

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

USER_ID = uuid.uuid4()
OTHER_USER_ID = uuid.uuid4()
CURRENT_YEAR = date.today().year


async def _add_leave_type(session: AsyncSession, name: str = "Casual Leave", annual_allocation: int = 12) -> LeaveType:
    leave_type = LeaveType(name=name, annual_allocation=annual_allocation)
    session.add(leave_type)
    await session.commit()
    return leave_type


async def _add_balance(
    session: AsyncSession,
    leave_type: LeaveType,
    user_id: uuid.UUID = USER_ID,
    year: int = CURRENT_YEAR,
    **counters: int,
) -> LeaveBalance:
    balance = LeaveBalance(
        user_id=user_id,
        leave_type_id=leave_type.id,
        year=year,
        total_allocated=counters.get("total_allocated", leave_type.annual_allocation),
        used_days=counters.get("used_days", 0),
        pending_days=counters.get("pending_days", 0),
        carried_forward_days=counters.get("carried_forward_days", 0),
    )
    session.add(recompute(balance))
    await session.commit()
    return balance


# ---------------------------------------------------------------------------
# Pure ledger helpers
# ---------------------------------------------------------------------------


def test_compute_available() -> None:
    assert compute_available(12, 3, 4, 2) == 9
    assert compute_available(0, 0, 2, 0) == -2


def test_recompute_syncs_remaining() -> None:
    balance = LeaveBalance(
        user_id=USER_ID,
        leave_type_id=uuid.uuid4(),
        year=2026,
        total_allocated=12,
        used_days=2,
        pending_days=1,
        carried_forward_days=6,
        remaining_days=99,
    )
    assert recompute(balance) is balance
    assert balance.remaining_days == 15
    assert balance.remaining_days == balance.available_balance


def test_new_balance_grants_annual_allocation() -> None:
    leave_type = LeaveType(name="Medical Leave", annual_allocation=15)
    org_id = uuid.uuid4()
    balance = new_balance(leave_type, USER_ID, 2026, org_id)
    assert balance.leave_type_id == leave_type.id
    assert balance.total_allocated == 15
    assert balance.remaining_days == 15
    assert balance.organization_id == org_id


# ---------------------------------------------------------------------------
# DB-backed ledger helpers
# ---------------------------------------------------------------------------


async def test_balance_exists(db_session: AsyncSession) -> None:
    leave_type = await _add_leave_type(db_session)
    await _add_balance(db_session, leave_type, year=2026)

    assert await balance_exists(db_session, USER_ID, leave_type.id, 2026) is True
    assert await balance_exists(db_session, USER_ID, leave_type.id, 2025) is False
    assert await balance_exists(db_session, OTHER_USER_ID, leave_type.id, 2026) is False


async def test_lock_balance_returns_row(db_session: AsyncSession) -> None:
    leave_type = await _add_leave_type(db_session)
    await _add_balance(db_session, leave_type, year=2026, used_days=3)

    locked = await lock_balance(db_session, USER_ID, leave_type.id, 2026)
    assert locked is not None
    assert locked.used_days == 3
    assert await lock_balance(db_session, USER_ID, leave_type.id, 2024) is None


async def test_insert_if_absent_inserts(db_session: AsyncSession) -> None:
    leave_type = await _add_leave_type(db_session)
    inserted = await insert_if_absent(db_session, new_balance(leave_type, USER_ID, 2026, None))
    await db_session.commit()
    assert inserted is not None
    assert await balance_exists(db_session, USER_ID, leave_type.id, 2026)


async def test_insert_if_absent_conflict_returns_none(db_session: AsyncSession) -> None:
    leave_type = await _add_leave_type(db_session)
    existing = await _add_balance(db_session, leave_type, year=2026, used_days=4)

    duplicate = new_balance(leave_type, USER_ID, 2026, None)
    assert await insert_if_absent(db_session, duplicate) is None

    # The session stays usable and the original row is untouched.
    await db_session.commit()
    locked = await lock_balance(db_session, USER_ID, leave_type.id, 2026)
    assert locked is not None
    assert locked.id == existing.id
    assert locked.used_days == 4


# ---------------------------------------------------------------------------
# Read services
# ---------------------------------------------------------------------------


async def test_get_user_balances_filters_year_and_user(db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    medical = await _add_leave_type(db_session, "Medical Leave", 15)
    await _add_balance(db_session, medical, year=2026)
    await _add_balance(db_session, casual, year=2026, used_days=2)
    await _add_balance(db_session, casual, year=2025)
    await _add_balance(db_session, casual, user_id=OTHER_USER_ID, year=2026)

    balances = await balance_service.get_user_balances(db_session, USER_ID, 2026)
    assert [b.leave_type.name for b in balances if b.leave_type] == ["Casual Leave", "Medical Leave"]
    casual_balance = balances[0]
    assert casual_balance.used_days == 2
    assert casual_balance.remaining_days == 10
    assert casual_balance.available_balance == 10


async def test_get_user_balances_defaults_to_current_year(db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=CURRENT_YEAR)
    await _add_balance(db_session, casual, year=CURRENT_YEAR - 1)

    balances = await balance_service.get_user_balances(db_session, USER_ID)
    assert [b.year for b in balances] == [CURRENT_YEAR]


async def test_get_user_balances_empty(db_session: AsyncSession) -> None:
    assert await balance_service.get_user_balances(db_session, USER_ID, 2026) == []


async def test_get_user_balance_by_type(db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=2026, carried_forward_days=6)

    balance = await balance_service.get_user_balance_by_type(db_session, USER_ID, casual.id, 2026)
    assert balance.carried_forward_days == 6
    assert balance.remaining_days == 18


async def test_get_user_balance_by_type_missing(db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    with pytest.raises(NotFoundError, match="Leave balance not found"):
        await balance_service.get_user_balance_by_type(db_session, USER_ID, casual.id, 2026)


async def test_balances_of_inactive_leave_type_still_listed(db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=2026)
    casual.is_active = False
    await db_session.commit()

    balances = await balance_service.get_user_balances(db_session, USER_ID, 2026)
    assert len(balances) == 1
    assert balances[0].leave_type is not None
    assert balances[0].leave_type.is_active is False


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


async def test_http_my_balances(async_client: AsyncClient, db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=CURRENT_YEAR)
    await _add_balance(db_session, casual, user_id=OTHER_USER_ID, year=CURRENT_YEAR)

    resp = await async_client.get("/leave-config/balances/my", headers={"X-User-Id": str(USER_ID)})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["user_id"] == str(USER_ID)
    assert data["items"][0]["leave_type"]["name"] == "Casual Leave"


async def test_http_my_balances_for_year(async_client: AsyncClient, db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=2024)

    resp = await async_client.get(
        "/leave-config/balances/my", params={"year": 2024}, headers={"X-User-Id": str(USER_ID)}
    )
    assert resp.json()["total"] == 1


@pytest.mark.parametrize("role", ["HR_ADMIN", "SUPER_ADMIN", "REPORTING_MANAGER"])
async def test_http_user_balances_viewer_roles(async_client: AsyncClient, db_session: AsyncSession, role: str) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=CURRENT_YEAR)

    resp = await async_client.get(
        f"/leave-config/balances/user/{USER_ID}", headers={"X-User-Id": str(OTHER_USER_ID), "X-Role": role}
    )
    assert resp.status_code == 200
    assert resp.json()["total"] == 1


async def test_http_user_balances_employee_forbidden(async_client: AsyncClient) -> None:
    resp = await async_client.get(
        f"/leave-config/balances/user/{USER_ID}", headers={"X-User-Id": str(OTHER_USER_ID), "X-Role": "EMPLOYEE"}
    )
    assert resp.status_code == 403


async def test_http_user_balance_by_type(async_client: AsyncClient, db_session: AsyncSession) -> None:
    casual = await _add_leave_type(db_session)
    await _add_balance(db_session, casual, year=CURRENT_YEAR, used_days=1, pending_days=2)

    headers = {"X-User-Id": str(OTHER_USER_ID), "X-Role": "HR_ADMIN"}
    resp = await async_client.get(f"/leave-config/balances/user/{USER_ID}/leave-type/{casual.id}", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["remaining_days"] == 9
    assert data["available_balance"] == 9

    resp = await async_client.get(
        f"/leave-config/balances/user/{OTHER_USER_ID}/leave-type/{casual.id}", headers=headers
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "NotFoundError"
