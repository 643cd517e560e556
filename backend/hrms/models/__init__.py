from sqlmodel import SQLModel

from hrms.models.base import TimestampMixin, UUIDBase
from hrms.models.enums import ADMIN_ROLES, DEFAULT_APPLICABLE_ROLES, AccrualType, Role
from hrms.models.leave_balance import LeaveBalance
from hrms.models.leave_type import LeaveType

__all__ = [
    "ADMIN_ROLES",
    "DEFAULT_APPLICABLE_ROLES",
    "AccrualType",
    "LeaveBalance",
    "LeaveType",
    "Role",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
