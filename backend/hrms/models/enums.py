from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Organisational role of a user."""

    EMPLOYEE = "EMPLOYEE"
    REPORTING_MANAGER = "REPORTING_MANAGER"
    HR_ADMIN = "HR_ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class AccrualType(enum.StrEnum):
    """How a leave type's annual allocation is distributed over the year."""

    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


DEFAULT_APPLICABLE_ROLES: tuple[Role, ...] = (Role.EMPLOYEE, Role.REPORTING_MANAGER, Role.HR_ADMIN)

ADMIN_ROLES: tuple[Role, ...] = (Role.HR_ADMIN, Role.SUPER_ADMIN)
