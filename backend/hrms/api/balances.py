# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from hrms.api.deps import AuthDep, BalanceViewerDep
from hrms.db import SessionDep
from hrms.schemas.balance import BalanceListResponse, BalanceResponse
from hrms.services import balance as balance_service

router = APIRouter(prefix="/leave-config/balances", tags=["balances"])


@router.get("/my", response_model=BalanceListResponse)
async def get_my_balances(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> BalanceListResponse:
    """Balances of the calling user; defaults to the current year."""
    items = await balance_service.get_user_balances(session, auth.user_id, year)
    return BalanceListResponse(items=items, total=len(items))


@router.get("/user/{user_id}", response_model=BalanceListResponse)
async def get_user_balances(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: BalanceViewerDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> BalanceListResponse:
    items = await balance_service.get_user_balances(session, user_id, year)
    return BalanceListResponse(items=items, total=len(items))


@router.get("/user/{user_id}/leave-type/{leave_type_id}", response_model=BalanceResponse)
async def get_user_balance_by_type(
    user_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    session: SessionDep,
    auth: BalanceViewerDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> BalanceResponse:
    return await balance_service.get_user_balance_by_type(session, user_id, leave_type_id, year)
