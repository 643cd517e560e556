# ruff: noqa: TC003
"""User directory collaborator.

Employee records are owned by the organisation/employee service; the leave
engine only needs to resolve IDs to role and account status.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from hrms.models.enums import Role


class UserInfo(BaseModel):
    """User metadata from the user directory."""

    id: uuid.UUID
    role: Role
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    organization_id: uuid.UUID | None = None
    is_active: bool = True
    is_deleted: bool = False

    @property
    def is_assignable(self) -> bool:
        return self.is_active and not self.is_deleted


@runtime_checkable
class UserDirectory(Protocol):
    """Interface for the user directory."""

    async def get_users(self, user_ids: Iterable[uuid.UUID]) -> list[UserInfo]:
        """Fetch the users that exist among ``user_ids``; unknown IDs are omitted."""
        ...


class InMemoryUserDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserInfo] = {}

    def seed(self, *users: UserInfo) -> None:
        """Seed users for testing."""
        for user in users:
            self._users[user.id] = user

    async def get_users(self, user_ids: Iterable[uuid.UUID]) -> list[UserInfo]:
        return [self._users[uid] for uid in dict.fromkeys(user_ids) if uid in self._users]


async def resolve_assignable_users(directory: UserDirectory, user_ids: Iterable[uuid.UUID]) -> list[UserInfo]:
    """Resolve IDs to active, non-deleted users."""
    users = await directory.get_users(user_ids)
    return [u for u in users if u.is_assignable]


_user_directory: UserDirectory = InMemoryUserDirectory()


def get_user_directory() -> UserDirectory:
    """FastAPI dependency for the user directory."""
    return _user_directory


def set_user_directory(directory: UserDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _user_directory
    _user_directory = directory
