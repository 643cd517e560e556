# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, status

from hrms.exceptions import AppError
from hrms.models.enums import ADMIN_ROLES, Role
from hrms.schemas.auth import AuthContext
from hrms.services.users import UserDirectory, get_user_directory


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: Role = Header(default=Role.EMPLOYEE),
    x_organization_id: uuid.UUID | None = Header(default=None),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id, role=x_role, organization_id=x_organization_id)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


def require_roles(*roles: Role) -> Callable[[AuthContext], Awaitable[AuthContext]]:
    """Build a dependency that rejects callers whose role is not in ``roles``."""

    async def _check(auth: AuthDep) -> AuthContext:
        if auth.role not in roles:
            raise AppError("Insufficient role for this operation", status_code=status.HTTP_403_FORBIDDEN)
        return auth

    return _check


AdminDep = Annotated[AuthContext, Depends(require_roles(*ADMIN_ROLES))]

BalanceViewerDep = Annotated[
    AuthContext,
    Depends(require_roles(Role.HR_ADMIN, Role.SUPER_ADMIN, Role.REPORTING_MANAGER)),
]

UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
