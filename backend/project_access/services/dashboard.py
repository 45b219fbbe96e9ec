"""
Dashboard aggregation — per-user overview of reachable projects.

Visibility comes exclusively from AccessResolver; this module never
decides on its own which projects a user may see. Counting is done in
SQL (GROUP BY) through the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from project_access.access.resolver import AccessResolver
from project_access.access.roles import ProjectRole
from project_access.access.store import MembershipStore
from project_access.models.project import Project, ProjectStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    total_projects: int = 0
    active_projects: int = 0
    archived_projects: int = 0
    contributors_by_role: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DashboardProject:
    project: Project
    user_role: ProjectRole
    contributor_count: int


class DashboardService:
    def __init__(self, store: MembershipStore) -> None:
        self._store = store
        self._resolver = AccessResolver(store)

    async def summary(self, user_id: str) -> DashboardSummary:
        project_ids = await self._resolver.accessible_projects(user_id)
        if not project_ids:
            return DashboardSummary(
                contributors_by_role={role.value: 0 for role in ProjectRole},
            )

        projects = await self._store.list_projects(project_ids)
        role_counts = await self._store.count_roles(project_ids)

        active = sum(1 for p in projects if p.status == ProjectStatus.ACTIVE)
        summary = DashboardSummary(
            total_projects=len(projects),
            active_projects=active,
            archived_projects=len(projects) - active,
            contributors_by_role={
                role.value: role_counts.get(role, 0) for role in ProjectRole
            },
        )
        logger.debug("Dashboard summary for %s: %s", user_id, summary)
        return summary

    async def user_projects(self, user_id: str) -> list[DashboardProject]:
        """Reachable projects with the caller's role, newest first."""
        project_ids = await self._resolver.accessible_projects(user_id)
        projects = await self._store.list_projects(project_ids)
        if not projects:
            return []

        memberships = {
            c.project_id: ProjectRole(c.role)
            for c in await self._store.contributors_for_user(user_id, project_ids)
        }
        counts = await self._store.count_by_project(project_ids)

        return [
            DashboardProject(
                project=project,
                # Owner without an OWNER row yet still reads as OWNER.
                user_role=memberships.get(project.id, ProjectRole.OWNER),
                contributor_count=counts.get(project.id, 0),
            )
            for project in projects
        ]
