"""
MembershipStore — SQLAlchemy repository over projects and contributors.

Only primitive reads and writes live here (find, list, count, insert,
update, delete). Every business rule belongs to the services that call
it; the one translation done here is a unique-index violation on
insert, which is reported as AlreadyMember.

Atomicity:
  • transaction() wraps a unit of work. Blocks nest: only the outermost
    block commits (or rolls back on any exception).
  • lock_project() takes a row lock on the project (SELECT … FOR UPDATE)
    so that lifecycle checks and writes are serialized per project.
    SQLite ignores FOR UPDATE; engines from core.database.build_engine()
    open every SQLite transaction with BEGIN IMMEDIATE instead, which
    serializes writers across the whole database.

Failure model:
  • Every call is bounded by STORE_TIMEOUT_SECONDS.
  • Timeouts and connectivity errors surface as StoreUnavailable —
    never as "not found" or "permission denied".
"""

from __future__ import annotations

import asyncio
import functools
import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from project_access.access.errors import AlreadyMember, StoreUnavailable
from project_access.access.roles import ProjectRole
from project_access.core.config import settings
from project_access.models.contributor import Contributor
from project_access.models.project import Project, ProjectStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_ERRORS = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    asyncio.TimeoutError,
)


def _store_call(
    fn: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Bound a store method by the configured timeout and map transient failures."""

    @functools.wraps(fn)
    async def wrapper(self: MembershipStore, *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.wait_for(fn(self, *args, **kwargs), self.timeout)
        except _TRANSIENT_ERRORS as exc:
            logger.warning("Store call %s failed: %r", fn.__name__, exc)
            raise StoreUnavailable(fn.__name__) from exc

    return wrapper


# PostgreSQL names the violated index; SQLite lists the indexed columns.
_DUPLICATE_MEMBERSHIP_MARKERS = (
    "ux_project_contributors_project_user",
    "project_contributors.project_id, project_contributors.user_id",
)


def _is_duplicate_membership(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _DUPLICATE_MEMBERSHIP_MARKERS)


class MembershipStore:
    """Request-scoped repository bound to one AsyncSession."""

    def __init__(
        self,
        session: AsyncSession,
        timeout: float | None = None,
    ) -> None:
        self.session = session
        self.timeout = timeout if timeout is not None else settings.STORE_TIMEOUT_SECONDS
        self._depth = 0

    # ── Unit of work ────────────────────────────────────────
    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit on success, roll back on error. Nested blocks join the outer one."""
        self._depth += 1
        outermost = self._depth == 1
        try:
            yield
            if outermost:
                await self._commit()
        except BaseException:
            if outermost:
                await self.session.rollback()
            raise
        finally:
            self._depth -= 1

    @_store_call
    async def _commit(self) -> None:
        await self.session.commit()

    # ── Projects ────────────────────────────────────────────
    @_store_call
    async def find_project(self, project_id: uuid.UUID) -> Project | None:
        return await self.session.get(Project, project_id)

    @_store_call
    async def lock_project(self, project_id: uuid.UUID) -> Project | None:
        """Load a project with a row lock held until the transaction ends."""
        stmt = select(Project).where(Project.id == project_id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @_store_call
    async def insert_project(self, project: Project) -> Project:
        self.session.add(project)
        await self.session.flush()  # assigns defaults, surfaces constraint errors
        return project

    @_store_call
    async def update_project(self, project: Project, **fields: Any) -> Project:
        for name, value in fields.items():
            setattr(project, name, value)
        await self.session.flush()
        return project

    @_store_call
    async def delete_project(self, project_id: uuid.UUID) -> None:
        # Explicit child delete — not every dialect enforces ON DELETE CASCADE.
        await self.session.execute(
            delete(Contributor).where(Contributor.project_id == project_id)
        )
        await self.session.execute(delete(Project).where(Project.id == project_id))

    @_store_call
    async def owned_project_ids(self, user_id: str) -> set[uuid.UUID]:
        result = await self.session.execute(
            select(Project.id).where(Project.owner_id == user_id)
        )
        return set(result.scalars().all())

    @_store_call
    async def list_projects(
        self,
        project_ids: Iterable[uuid.UUID],
        query: str | None = None,
        status: ProjectStatus | None = None,
    ) -> list[Project]:
        """Projects among `project_ids`, newest first, optionally filtered."""
        ids = list(project_ids)
        if not ids:
            return []

        stmt = select(Project).where(Project.id.in_(ids))
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(Project.name.ilike(pattern), Project.description.ilike(pattern))
            )
        if status is not None:
            stmt = stmt.where(Project.status == status)
        stmt = stmt.order_by(Project.created_at.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ── Contributors ────────────────────────────────────────
    @_store_call
    async def find_contributor(
        self,
        project_id: uuid.UUID,
        contributor_id: uuid.UUID,
    ) -> Contributor | None:
        stmt = select(Contributor).where(
            Contributor.id == contributor_id,
            Contributor.project_id == project_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @_store_call
    async def find_contributor_by_user(
        self,
        project_id: uuid.UUID,
        user_id: str,
    ) -> Contributor | None:
        stmt = select(Contributor).where(
            Contributor.project_id == project_id,
            Contributor.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @_store_call
    async def list_contributors(self, project_id: uuid.UUID) -> list[Contributor]:
        stmt = (
            select(Contributor)
            .where(Contributor.project_id == project_id)
            .order_by(Contributor.joined_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @_store_call
    async def contributed_project_ids(self, user_id: str) -> set[uuid.UUID]:
        result = await self.session.execute(
            select(Contributor.project_id).where(Contributor.user_id == user_id)
        )
        return set(result.scalars().all())

    @_store_call
    async def contributors_for_user(
        self,
        user_id: str,
        project_ids: Iterable[uuid.UUID],
    ) -> list[Contributor]:
        ids = list(project_ids)
        if not ids:
            return []
        stmt = select(Contributor).where(
            Contributor.user_id == user_id,
            Contributor.project_id.in_(ids),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @_store_call
    async def count_by_role(self, project_id: uuid.UUID, role: ProjectRole) -> int:
        stmt = (
            select(func.count())
            .select_from(Contributor)
            .where(Contributor.project_id == project_id, Contributor.role == role)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    @_store_call
    async def count_by_project(
        self,
        project_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, int]:
        ids = list(project_ids)
        if not ids:
            return {}
        stmt = (
            select(Contributor.project_id, func.count().label("contributor_count"))
            .where(Contributor.project_id.in_(ids))
            .group_by(Contributor.project_id)
        )
        result = await self.session.execute(stmt)
        return {row.project_id: row.contributor_count for row in result.all()}

    @_store_call
    async def count_roles(
        self,
        project_ids: Iterable[uuid.UUID],
    ) -> dict[ProjectRole, int]:
        ids = list(project_ids)
        if not ids:
            return {}
        stmt = (
            select(Contributor.role, func.count().label("role_count"))
            .where(Contributor.project_id.in_(ids))
            .group_by(Contributor.role)
        )
        result = await self.session.execute(stmt)
        return {ProjectRole(row.role): row.role_count for row in result.all()}

    @_store_call
    async def insert_contributor(
        self,
        project_id: uuid.UUID,
        user_id: str,
        role: ProjectRole,
    ) -> Contributor:
        contributor = Contributor(project_id=project_id, user_id=user_id, role=role)
        self.session.add(contributor)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if not _is_duplicate_membership(exc):
                raise
            # Lost a race on the unique (project_id, user_id) index.
            raise AlreadyMember(project_id, user_id) from exc
        return contributor

    @_store_call
    async def update_contributor_role(
        self,
        contributor: Contributor,
        role: ProjectRole,
    ) -> Contributor:
        contributor.role = role
        await self.session.flush()
        return contributor

    @_store_call
    async def delete_contributor(self, contributor: Contributor) -> None:
        await self.session.delete(contributor)
        await self.session.flush()
