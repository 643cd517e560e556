"""Shared test fixtures: in-memory database, HTTP client and user directory.

Each test gets its own SQLite database (aiosqlite, single shared connection)
with the schema created from the SQLModel metadata. Services commit for real,
so isolation comes from the throwaway database rather than an outer
transaction.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hrms.db import get_session
from hrms.main import app
from hrms.models import SQLModel
from hrms.models.enums import Role
from hrms.services.users import InMemoryUserDirectory, UserInfo, set_user_directory

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def _enable_savepoints(engine: AsyncEngine) -> None:
    """Let pysqlite emit BEGIN itself so SAVEPOINT / begin_nested() work."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _enable_savepoints(_engine)
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def user_directory() -> Iterator[InMemoryUserDirectory]:
    """A fresh in-memory user directory wired in for the duration of the test."""
    directory = InMemoryUserDirectory()
    set_user_directory(directory)
    yield directory
    set_user_directory(InMemoryUserDirectory())


@pytest.fixture
def make_user(user_directory: InMemoryUserDirectory) -> Callable[..., UserInfo]:
    """Factory that creates a user and seeds it into the directory."""

    def _make(role: Role = Role.EMPLOYEE, **overrides: Any) -> UserInfo:
        fields: dict[str, Any] = {
            "id": uuid.uuid4(),
            "role": role,
            "first_name": "Test",
            "last_name": role.value.title(),
            "email": f"{role.value.lower()}@example.com",
        }
        fields.update(overrides)
        user = UserInfo(**fields)
        user_directory.seed(user)
        return user

    return _make
