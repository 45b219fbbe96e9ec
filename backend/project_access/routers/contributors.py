"""
Contributors router — membership management for one project.

Every route is gated by require_project_role; the lifecycle manager
then enforces the membership invariants and raises structured errors
that main.py maps to HTTP responses.
"""

import uuid

from fastapi import APIRouter, Depends, status

from project_access.access.lifecycle import ContributorLifecycleManager
from project_access.access.roles import ProjectRole
from project_access.auth.dependencies import Store, require_project_role
from project_access.models.contributor import Contributor
from project_access.schemas.contributor import (
    ContributorCreate,
    ContributorResponse,
    ContributorRoleUpdate,
)

router = APIRouter(tags=["Contributors"])


@router.get(
    "/{project_id}/contributors",
    response_model=list[ContributorResponse],
    dependencies=[Depends(require_project_role(ProjectRole.READ))],
    summary="List contributors, oldest membership first",
)
async def list_contributors(project_id: uuid.UUID, store: Store) -> list[Contributor]:
    return await ContributorLifecycleManager(store).list_contributors(project_id)


@router.post(
    "/{project_id}/contributors",
    response_model=ContributorResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_project_role(ProjectRole.ADMIN))],
    summary="Add a contributor",
)
async def add_contributor(
    project_id: uuid.UUID,
    payload: ContributorCreate,
    store: Store,
) -> Contributor:
    return await ContributorLifecycleManager(store).add_contributor(
        project_id, payload.user_id, payload.role,
    )


@router.put(
    "/{project_id}/contributors/{contributor_id}/role",
    response_model=ContributorResponse,
    dependencies=[Depends(require_project_role(ProjectRole.ADMIN))],
    summary="Change a contributor's role",
)
async def update_contributor_role(
    project_id: uuid.UUID,
    contributor_id: uuid.UUID,
    payload: ContributorRoleUpdate,
    store: Store,
) -> Contributor:
    return await ContributorLifecycleManager(store).update_role(
        project_id, contributor_id, payload.role,
    )


@router.delete(
    "/{project_id}/contributors/{contributor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_project_role(ProjectRole.ADMIN))],
    summary="Remove a contributor",
)
async def remove_contributor(
    project_id: uuid.UUID,
    contributor_id: uuid.UUID,
    store: Store,
) -> None:
    await ContributorLifecycleManager(store).remove_contributor(project_id, contributor_id)
