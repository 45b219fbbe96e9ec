"""
Projects router.

Endpoints:
  POST   /projects                         — create (caller becomes OWNER)
  GET    /projects                         — every reachable project
  GET    /projects/search                  — filter reachable projects
  GET    /projects/{project_id}            — READ
  PUT    /projects/{project_id}            — WRITE
  DELETE /projects/{project_id}            — ADMIN
  PUT    /projects/{project_id}/archive    — ADMIN
  PUT    /projects/{project_id}/activate   — ADMIN
"""

import uuid

from fastapi import APIRouter, Depends, Query, status

from project_access.access.roles import ProjectRole
from project_access.auth.dependencies import CurrentUser, Store, require_project_role
from project_access.models.project import Project, ProjectStatus
from project_access.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from project_access.services.projects import ProjectService

router = APIRouter(tags=["Projects"])

CanRead = Depends(require_project_role(ProjectRole.READ))
CanWrite = Depends(require_project_role(ProjectRole.WRITE))
CanAdmin = Depends(require_project_role(ProjectRole.ADMIN))


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project owned by the caller",
)
async def create_project(
    payload: ProjectCreate,
    user_id: CurrentUser,
    store: Store,
) -> Project:
    return await ProjectService(store).create_project(
        owner_id=user_id,
        name=payload.name,
        description=payload.description,
    )


@router.get(
    "",
    response_model=list[ProjectResponse],
    summary="List every project the caller owns or contributes to",
)
async def list_projects(user_id: CurrentUser, store: Store) -> list[Project]:
    return await ProjectService(store).list_projects(user_id)


@router.get(
    "/search",
    response_model=list[ProjectResponse],
    summary="Search reachable projects by text and status",
)
async def search_projects(
    user_id: CurrentUser,
    store: Store,
    query: str | None = Query(default=None, max_length=100),
    project_status: ProjectStatus | None = Query(default=None, alias="status"),
) -> list[Project]:
    return await ProjectService(store).search_projects(
        user_id, query=query, status=project_status,
    )


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    dependencies=[CanRead],
    summary="Get one project",
)
async def get_project(project_id: uuid.UUID, store: Store) -> Project:
    return await ProjectService(store).get_project(project_id)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    dependencies=[CanWrite],
    summary="Update project name, description or status",
)
async def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdate,
    store: Store,
) -> Project:
    return await ProjectService(store).update_project(
        project_id,
        name=payload.name,
        description=payload.description,
        status=payload.status,
    )


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[CanAdmin],
    summary="Delete a project and its memberships",
)
async def delete_project(project_id: uuid.UUID, store: Store) -> None:
    await ProjectService(store).delete_project(project_id)


@router.put(
    "/{project_id}/archive",
    response_model=ProjectResponse,
    dependencies=[CanAdmin],
    summary="Archive a project",
)
async def archive_project(project_id: uuid.UUID, store: Store) -> Project:
    return await ProjectService(store).archive_project(project_id)


@router.put(
    "/{project_id}/activate",
    response_model=ProjectResponse,
    dependencies=[CanAdmin],
    summary="Re-activate an archived project",
)
async def activate_project(project_id: uuid.UUID, store: Store) -> Project:
    return await ProjectService(store).activate_project(project_id)
