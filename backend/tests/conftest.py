"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite) with the
schema created from Base.metadata. StaticPool keeps the single
connection alive for the lifetime of the engine.
"""

from __future__ import annotations

import os

# Settings are read at import time — point them at SQLite before any app import.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import project_access.models.contributor  # noqa: F401
import project_access.models.project  # noqa: F401
from project_access.access.lifecycle import ContributorLifecycleManager
from project_access.access.store import MembershipStore
from project_access.core.database import Base, get_db_session
from project_access.services.projects import ProjectService

OWNER = "user-owner"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session) -> MembershipStore:
    return MembershipStore(session)


@pytest.fixture
def lifecycle(store) -> ContributorLifecycleManager:
    return ContributorLifecycleManager(store)


@pytest.fixture
def projects(store) -> ProjectService:
    return ProjectService(store)


@pytest_asyncio.fixture
async def project(projects):
    """A fresh ACTIVE project owned by OWNER."""
    return await projects.create_project(owner_id=OWNER, name="Apollo")


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, sharing the test database."""
    from project_access.main import app

    async def _test_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _test_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def project_id(project):
    """Plain id of `project`; survives the instance expiring on rollback."""
    return project.id
