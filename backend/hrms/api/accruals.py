# ruff: noqa: B008, TC001, TC003
"""Admin triggers for the accrual engine.

The scheduled worker (``hrms.worker``) calls the same service functions;
these endpoints exist for backfills and manual runs.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from hrms.api.deps import AdminDep
from hrms.db import SessionDep
from hrms.schemas.accrual import AccrualRunResponse, CarryForwardRunResponse
from hrms.services.accrual import run_monthly_accrual, run_year_end_carry_forward

router = APIRouter(prefix="/leave-config/accrual", tags=["accruals"])


@router.post("/monthly", response_model=AccrualRunResponse)
async def trigger_monthly_accrual(
    session: SessionDep,
    auth: AdminDep,
    as_of: date | None = Query(default=None),
) -> AccrualRunResponse:
    """Run the monthly accrual for the month of ``as_of``. Rows already accrued that month are skipped."""
    result = await run_monthly_accrual(session, as_of)
    return AccrualRunResponse(
        as_of=result.as_of,
        year=result.year,
        leave_types=result.leave_types,
        processed=result.processed,
        accrued=result.accrued,
        skipped=result.skipped,
        errors=result.errors,
    )


@router.post("/year-end-carry-forward", response_model=CarryForwardRunResponse)
async def trigger_year_end_carry_forward(
    session: SessionDep,
    auth: AdminDep,
    as_of: date | None = Query(default=None),
) -> CarryForwardRunResponse:
    """Carry unused days of ``as_of.year - 1`` into ``as_of.year``. Safe to re-run."""
    result = await run_year_end_carry_forward(session, as_of)
    return CarryForwardRunResponse(
        as_of=result.as_of,
        from_year=result.from_year,
        to_year=result.to_year,
        processed=result.processed,
        carried_forward=result.carried_forward,
        created=result.created,
        skipped=result.skipped,
        errors=result.errors,
    )
