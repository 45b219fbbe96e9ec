"""Response schemas for the dashboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from project_access.access.roles import ProjectRole
from project_access.schemas.project import ProjectResponse


class DashboardSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_projects: int
    active_projects: int
    archived_projects: int
    contributors_by_role: dict[str, int]


class DashboardProjectOut(BaseModel):
    """One reachable project plus the caller's role in it."""

    model_config = ConfigDict(from_attributes=True)

    project: ProjectResponse
    user_role: ProjectRole
    contributor_count: int
