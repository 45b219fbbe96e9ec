"""
Project service — create, read, search, update, archive and delete.

Creation is the only path into the OWNER state: the project row and its
OWNER contributor are written in one transaction. Reads are always
scoped through AccessResolver; authorization for single-project
operations is the caller's job (see auth.dependencies.require_project_role).
"""

from __future__ import annotations

import logging
import uuid

from project_access.access.errors import ProjectNotFound
from project_access.access.lifecycle import ContributorLifecycleManager
from project_access.access.resolver import AccessResolver
from project_access.access.store import MembershipStore
from project_access.models.project import Project, ProjectStatus

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, store: MembershipStore) -> None:
        self._store = store
        self._resolver = AccessResolver(store)
        self._lifecycle = ContributorLifecycleManager(store)

    async def create_project(
        self,
        owner_id: str,
        name: str,
        description: str | None = None,
    ) -> Project:
        """Insert an ACTIVE project owned by `owner_id` plus its OWNER row."""
        logger.debug("Creating project %r for user %s", name, owner_id)

        async with self._store.transaction():
            project = await self._store.insert_project(
                Project(
                    name=name,
                    description=description,
                    owner_id=owner_id,
                    status=ProjectStatus.ACTIVE,
                )
            )
            await self._lifecycle.create_owner_membership(project.id, owner_id)

        logger.info("Project %s created by %s", project.id, owner_id)
        return project

    async def get_project(self, project_id: uuid.UUID) -> Project:
        project = await self._store.find_project(project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    async def list_projects(self, user_id: str) -> list[Project]:
        """Every project the user can reach, newest first."""
        project_ids = await self._resolver.accessible_projects(user_id)
        return await self._store.list_projects(project_ids)

    async def search_projects(
        self,
        user_id: str,
        query: str | None = None,
        status: ProjectStatus | None = None,
    ) -> list[Project]:
        """Case-insensitive name/description match within the accessible set."""
        project_ids = await self._resolver.accessible_projects(user_id)
        query = query.strip() if query else None
        return await self._store.list_projects(project_ids, query=query, status=status)

    async def update_project(
        self,
        project_id: uuid.UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        status: ProjectStatus | None = None,
    ) -> Project:
        """Update mutable fields. `owner_id` is never touched."""
        fields = {
            key: value
            for key, value in (
                ("name", name),
                ("description", description),
                ("status", status),
            )
            if value is not None
        }

        async with self._store.transaction():
            project = await self._store.lock_project(project_id)
            if project is None:
                raise ProjectNotFound(project_id)
            if fields:
                project = await self._store.update_project(project, **fields)

        logger.info("Project %s updated (%s)", project_id, ", ".join(sorted(fields)) or "no changes")
        return project

    async def archive_project(self, project_id: uuid.UUID) -> Project:
        return await self.update_project(project_id, status=ProjectStatus.ARCHIVED)

    async def activate_project(self, project_id: uuid.UUID) -> Project:
        return await self.update_project(project_id, status=ProjectStatus.ACTIVE)

    async def delete_project(self, project_id: uuid.UUID) -> None:
        async with self._store.transaction():
            project = await self._store.lock_project(project_id)
            if project is None:
                raise ProjectNotFound(project_id)
            await self._store.delete_project(project_id)

        logger.info("Project %s deleted", project_id)
