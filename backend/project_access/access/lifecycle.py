"""
ContributorLifecycleManager — the only writer of contributor rows.

Per (project, user) the membership moves absent → member(role) → absent.
The OWNER state is entered once, together with project creation, and
is never left through these operations.

Invariants kept after every mutation:
  1. Exactly one OWNER contributor per project, and it is the owner.
  2. At most one contributor row per (project, user).
  3. update_role never assigns or replaces OWNER.
  4. The last ADMIN-role contributor cannot be removed.
     OWNER does not count towards the ADMIN pool.

Each mutation runs in one transaction that starts by locking the
project row, so concurrent removals cannot both observe "2 admins".
"""

from __future__ import annotations

import logging
import uuid

from project_access.access.errors import (
    AlreadyMember,
    CannotModifyOwner,
    CannotRemoveLastAdmin,
    CannotRemoveOwner,
    ContributorNotFound,
    InvalidRole,
    ProjectNotFound,
)
from project_access.access.roles import ProjectRole
from project_access.access.store import MembershipStore
from project_access.models.contributor import Contributor

logger = logging.getLogger(__name__)


class ContributorLifecycleManager:
    def __init__(self, store: MembershipStore) -> None:
        self._store = store

    # ── Owner membership ────────────────────────────────────
    async def create_owner_membership(
        self,
        project_id: uuid.UUID,
        user_id: str,
    ) -> Contributor:
        """
        Create the OWNER row for a freshly inserted project.

        Must run inside the transaction that inserts the project;
        ProjectService.create_project does exactly that.
        """
        async with self._store.transaction():
            existing = await self._store.find_contributor_by_user(project_id, user_id)
            if existing is not None:
                raise AlreadyMember(project_id, user_id)

            contributor = await self._store.insert_contributor(
                project_id, user_id, ProjectRole.OWNER,
            )

        logger.info("Owner %s registered for project %s", user_id, project_id)
        return contributor

    # ── Add ─────────────────────────────────────────────────
    async def add_contributor(
        self,
        project_id: uuid.UUID,
        user_id: str,
        role: ProjectRole,
    ) -> Contributor:
        """
        Grant `role` on a project to a user who is not yet a member.

        Raises:
            ProjectNotFound: the project does not exist.
            InvalidRole:     `role` is OWNER.
            AlreadyMember:   the user already has a row for this project.
        """
        role = ProjectRole(role)

        async with self._store.transaction():
            project = await self._store.lock_project(project_id)
            if project is None:
                raise ProjectNotFound(project_id)

            if role is ProjectRole.OWNER:
                raise InvalidRole(role.value)

            existing = await self._store.find_contributor_by_user(project_id, user_id)
            if existing is not None:
                raise AlreadyMember(project_id, user_id)

            contributor = await self._store.insert_contributor(project_id, user_id, role)

        logger.info(
            "Added contributor %s to project %s as %s",
            user_id, project_id, role.value,
        )
        return contributor

    # ── Update role ─────────────────────────────────────────
    async def update_role(
        self,
        project_id: uuid.UUID,
        contributor_id: uuid.UUID,
        new_role: ProjectRole,
    ) -> Contributor:
        """
        Change a non-owner contributor's role. `joined_at` is untouched.

        Raises:
            ContributorNotFound: no such contributor under this project.
            CannotModifyOwner:   the contributor is the owner, or `new_role`
                                 is OWNER.
        """
        new_role = ProjectRole(new_role)

        async with self._store.transaction():
            await self._store.lock_project(project_id)

            contributor = await self._store.find_contributor(project_id, contributor_id)
            if contributor is None:
                raise ContributorNotFound(project_id, contributor_id)

            if contributor.role is ProjectRole.OWNER or new_role is ProjectRole.OWNER:
                raise CannotModifyOwner(project_id, contributor_id)

            previous = contributor.role
            contributor = await self._store.update_contributor_role(contributor, new_role)

        logger.info(
            "Contributor %s of project %s changed role %s -> %s",
            contributor_id, project_id, previous.value, new_role.value,
        )
        return contributor

    # ── Remove ──────────────────────────────────────────────
    async def remove_contributor(
        self,
        project_id: uuid.UUID,
        contributor_id: uuid.UUID,
    ) -> None:
        """
        Delete a contributor row.

        Raises:
            ContributorNotFound:   no such contributor under this project.
            CannotRemoveOwner:     the contributor is the owner.
            CannotRemoveLastAdmin: the contributor is the only ADMIN row.
        """
        async with self._store.transaction():
            await self._store.lock_project(project_id)

            contributor = await self._store.find_contributor(project_id, contributor_id)
            if contributor is None:
                raise ContributorNotFound(project_id, contributor_id)

            if contributor.role is ProjectRole.OWNER:
                raise CannotRemoveOwner(project_id, contributor_id)

            if contributor.role is ProjectRole.ADMIN:
                admin_count = await self._store.count_by_role(project_id, ProjectRole.ADMIN)
                if admin_count <= 1:
                    raise CannotRemoveLastAdmin(project_id, contributor_id)

            await self._store.delete_contributor(contributor)

        logger.info("Removed contributor %s from project %s", contributor_id, project_id)

    # ── List ────────────────────────────────────────────────
    async def list_contributors(self, project_id: uuid.UUID) -> list[Contributor]:
        """All contributors of a project, oldest membership first."""
        return await self._store.list_contributors(project_id)
