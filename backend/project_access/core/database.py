"""
Async engine, session factory and ORM base for the membership tables.

Lifecycle writes are check-then-write: read the contributor, count the
ADMIN rows, then delete. MembershipStore.lock_project() makes that safe
with SELECT … FOR UPDATE on PostgreSQL. SQLite ignores FOR UPDATE, so
build_engine() makes every SQLite transaction open with BEGIN IMMEDIATE:
the database write lock is taken by the first statement and held until
commit or rollback, and a second writer waits for it (busy timeout).
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from project_access.core.config import settings


def configure_sqlite_locking(engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself, as BEGIN IMMEDIATE."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _record: Any) -> None:
        # The driver must not open transactions on its own.
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str, **kwargs: Any) -> AsyncEngine:
    engine = create_async_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        configure_sqlite_locking(engine)
    return engine


# pool_pre_ping drops connections the server closed while idle
engine = build_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # services return rows after the store commits
)


class Base(DeclarativeBase):
    """Metadata root for `projects` and `project_contributors`."""


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; MembershipStore.transaction() owns commits."""
    async with async_session_factory() as session:
        yield session
