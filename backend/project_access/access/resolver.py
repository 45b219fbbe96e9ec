"""
AccessResolver — which projects may a user reach?

accessible = owned projects ∪ projects with a contributor row for the user

Ownership and contribution are read independently so that a project
whose OWNER contributor row is not (yet) present still resolves for
its owner. Every listing, search, detail and reporting path scopes
through this set.
"""

from __future__ import annotations

import logging
import uuid

from project_access.access.store import MembershipStore

logger = logging.getLogger(__name__)


class AccessResolver:
    def __init__(self, store: MembershipStore) -> None:
        self._store = store

    async def accessible_projects(self, user_id: str) -> set[uuid.UUID]:
        """Project ids the user owns or contributes to. Empty set if none."""
        owned = await self._store.owned_project_ids(user_id)
        contributed = await self._store.contributed_project_ids(user_id)
        accessible = owned | contributed
        logger.debug(
            "User %s reaches %d project(s) (%d owned, %d contributed)",
            user_id, len(accessible), len(owned), len(contributed),
        )
        return accessible
