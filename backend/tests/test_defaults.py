"""Tests for seeding the system-default leave types."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from hrms.exceptions import DuplicateNameError
from hrms.models.enums import AccrualType, Role
from hrms.schemas.leave_type import CreateLeaveTypeRequest
from hrms.services import leave_type as leave_type_service
from hrms.services.defaults import (
    CASUAL_LEAVE,
    LOSS_OF_PAY,
    MEDICAL_LEAVE,
    OPTIONAL_LEAVE,
    bootstrap_default_leave_types,
)

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

ADMIN_HEADERS = {"X-User-Id": str(uuid.uuid4()), "X-Role": "HR_ADMIN"}
DEFAULTS_URL = "/leave-config/default-leave-types"


async def test_bootstrap_creates_four_defaults(db_session: AsyncSession) -> None:
    created = await bootstrap_default_leave_types(db_session)
    by_name = {lt.name: lt for lt in created}
    assert set(by_name) == {CASUAL_LEAVE, MEDICAL_LEAVE, LOSS_OF_PAY, OPTIONAL_LEAVE}

    for leave_type in created:
        assert leave_type.is_system_default is True
        assert leave_type.is_active is True
        assert leave_type.approval_required is True
        assert leave_type.applicable_roles == [Role.EMPLOYEE, Role.REPORTING_MANAGER, Role.HR_ADMIN]

    casual = by_name[CASUAL_LEAVE]
    assert casual.annual_allocation == 12
    assert casual.carry_forward_allowed is True
    assert casual.max_carry_forward_days == 6
    assert casual.max_consecutive_days == 5
    assert casual.accrual_type == AccrualType.MONTHLY
    assert casual.description == "Casual leave for personal matters"

    medical = by_name[MEDICAL_LEAVE]
    assert medical.annual_allocation == 15
    assert medical.carry_forward_allowed is False
    assert medical.max_carry_forward_days is None
    assert medical.max_consecutive_days == 30
    assert medical.accrual_type == AccrualType.YEARLY

    lop = by_name[LOSS_OF_PAY]
    assert lop.annual_allocation == 0
    assert lop.has_balance_restriction is False
    assert lop.max_consecutive_days is None

    optional = by_name[OPTIONAL_LEAVE]
    assert optional.annual_allocation == 5
    assert optional.max_consecutive_days == 3
    assert optional.has_balance_restriction is True


async def test_bootstrap_is_idempotent(db_session: AsyncSession) -> None:
    await bootstrap_default_leave_types(db_session)
    assert await bootstrap_default_leave_types(db_session) == []
    assert len(await leave_type_service.list_leave_types(db_session, include_inactive=True)) == 4


async def test_bootstrap_skips_existing_custom_name(db_session: AsyncSession) -> None:
    await leave_type_service.create_leave_type(
        db_session, CreateLeaveTypeRequest(name=MEDICAL_LEAVE, annual_allocation=10)
    )
    created = await bootstrap_default_leave_types(db_session)
    assert {lt.name for lt in created} == {CASUAL_LEAVE, LOSS_OF_PAY, OPTIONAL_LEAVE}

    everything = await leave_type_service.list_leave_types(db_session)
    medical = next(lt for lt in everything if lt.name == MEDICAL_LEAVE)
    assert medical.annual_allocation == 10
    assert medical.is_system_default is False


async def test_bootstrap_sets_organization(db_session: AsyncSession) -> None:
    org_id = uuid.uuid4()
    created = await bootstrap_default_leave_types(db_session, org_id)
    assert all(lt.organization_id == org_id for lt in created)


async def test_create_after_bootstrap_duplicate_name(db_session: AsyncSession) -> None:
    await bootstrap_default_leave_types(db_session)
    with pytest.raises(DuplicateNameError):
        await leave_type_service.create_leave_type(
            db_session, CreateLeaveTypeRequest(name=CASUAL_LEAVE, annual_allocation=12)
        )


async def test_http_bootstrap(async_client: AsyncClient) -> None:
    org_id = uuid.uuid4()
    resp = await async_client.post(DEFAULTS_URL, params={"organization_id": str(org_id)}, headers=ADMIN_HEADERS)
    assert resp.status_code == 201
    data = resp.json()
    assert data["total"] == 4
    assert {lt["organization_id"] for lt in data["items"]} == {str(org_id)}

    again = await async_client.post(DEFAULTS_URL, headers=ADMIN_HEADERS)
    assert again.status_code == 201
    assert again.json() == {"items": [], "total": 0}


async def test_http_bootstrap_requires_admin(async_client: AsyncClient) -> None:
    headers = {"X-User-Id": str(uuid.uuid4()), "X-Role": "REPORTING_MANAGER"}
    resp = await async_client.post(DEFAULTS_URL, headers=headers)
    assert resp.status_code == 403
