from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterator

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from instructormatch.api.deps import get_db_session
from instructormatch.api.main import app
from instructormatch.infrastructure.db.base import Base
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tests.utils import auth_headers

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _create_engine() -> AsyncEngine:
    # One shared connection so every session sees the same in-memory database
    return create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = _create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the in-memory database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def test_client() -> Iterator[TestClient]:
    """Synchronous client; the schema is created lazily on the app's own loop."""
    engine = _create_engine()
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    schema_ready = False

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        nonlocal schema_ready
        if not schema_ready:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            schema_ready = True
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)
    asyncio.run(engine.dispose())


@pytest.fixture()
def company_headers() -> dict[str, str]:
    return auth_headers("company-user", email="hr@acme.example")


@pytest.fixture()
def instructor_headers() -> dict[str, str]:
    return auth_headers("instructor-user", email="ada@trainers.example")
