"""PermissionEvaluator — does a user's role in a project meet a requirement?"""

from __future__ import annotations

import uuid

from project_access.access.roles import ProjectRole, meets
from project_access.access.store import MembershipStore


class PermissionEvaluator:
    """
    Read-only role lookups.

    "No role" is a normal outcome (None / False), never an exception.
    Callers guarding a mutating action turn False into a denial.
    """

    def __init__(self, store: MembershipStore) -> None:
        self._store = store

    async def user_role_for(
        self,
        user_id: str,
        project_id: uuid.UUID,
    ) -> ProjectRole | None:
        contributor = await self._store.find_contributor_by_user(project_id, user_id)
        if contributor is None:
            return None
        return ProjectRole(contributor.role)

    async def has_permission(
        self,
        user_id: str,
        project_id: uuid.UUID,
        required_role: ProjectRole,
    ) -> bool:
        role = await self.user_role_for(user_id, project_id)
        if role is None:
            return False
        return meets(role, required_role)
