from fastapi import APIRouter

from hrms.api.accruals import router as accruals_router
from hrms.api.balances import router as balances_router
from hrms.api.leave_types import router as leave_types_router

api_router = APIRouter()
api_router.include_router(leave_types_router)
api_router.include_router(balances_router)
api_router.include_router(accruals_router)
