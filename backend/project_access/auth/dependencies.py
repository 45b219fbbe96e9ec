"""
FastAPI dependencies for caller identity and the project authorization gate.

Flow:
  1. Read the caller's user id from the identity header
     (authentication happens upstream; the id is trusted as-is)
  2. Build the request-scoped MembershipStore on the request's session
  3. For project routes, require_project_role(role) asks
     PermissionEvaluator.has_permission and turns False into 403

Order in request pipeline: IDENTITY → ROLE GATE → ROUTER LOGIC.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from project_access.access.permissions import PermissionEvaluator
from project_access.access.roles import ProjectRole
from project_access.access.store import MembershipStore
from project_access.core.config import settings
from project_access.core.database import get_db_session

logger = logging.getLogger(__name__)

_IDENTITY_MISSING = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Caller identity is missing.",
)


async def get_current_user_id(request: Request) -> str:
    """Resolve the authenticated caller id. Raises 401 when absent or blank."""
    user_id = request.headers.get(settings.USER_ID_HEADER, "").strip()
    if not user_id:
        raise _IDENTITY_MISSING
    return user_id


async def get_membership_store(
    session: AsyncSession = Depends(get_db_session),
) -> MembershipStore:
    """One store per request; FastAPI caches it across dependencies."""
    return MembershipStore(session)


CurrentUser = Annotated[str, Depends(get_current_user_id)]
Store = Annotated[MembershipStore, Depends(get_membership_store)]


def require_project_role(
    required_role: ProjectRole,
) -> Callable[..., Awaitable[str]]:
    """
    Build a dependency that admits the caller only if their role in
    `{project_id}` meets `required_role`.

    Usage in routers:
        dependencies=[Depends(require_project_role(ProjectRole.ADMIN))]

    Returns the caller id so routes can also take it as a parameter.
    """

    async def gate(project_id: uuid.UUID, user_id: CurrentUser, store: Store) -> str:
        evaluator = PermissionEvaluator(store)
        if not await evaluator.has_permission(user_id, project_id, required_role):
            logger.info(
                "Denied: user=%s project=%s required=%s",
                user_id, project_id, required_role.value,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions - {required_role.value} role required",
            )
        return user_id

    return gate
