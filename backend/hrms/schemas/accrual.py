from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class AccrualRunResponse(BaseModel):
    """Response from the monthly accrual trigger."""

    as_of: date
    year: int
    leave_types: int
    processed: int
    accrued: int
    skipped: int
    errors: int


class CarryForwardRunResponse(BaseModel):
    """Response from the year-end carry-forward trigger."""

    as_of: date
    from_year: int
    to_year: int
    processed: int
    carried_forward: int
    created: int
    skipped: int
    errors: int
