"""
Dashboard router — overview scoped to what the caller can reach.

Endpoints:
  GET /dashboard/summary   — project counts by status, contributors by role
  GET /dashboard/projects  — reachable projects with the caller's role
"""

from fastapi import APIRouter

from project_access.auth.dependencies import CurrentUser, Store
from project_access.schemas.dashboard import DashboardProjectOut, DashboardSummaryOut
from project_access.services.dashboard import DashboardService

router = APIRouter(tags=["Dashboard"])


@router.get(
    "/summary",
    response_model=DashboardSummaryOut,
    summary="Counts across every reachable project",
)
async def get_summary(user_id: CurrentUser, store: Store) -> DashboardSummaryOut:
    summary = await DashboardService(store).summary(user_id)
    return DashboardSummaryOut.model_validate(summary)


@router.get(
    "/projects",
    response_model=list[DashboardProjectOut],
    summary="Reachable projects with the caller's role",
)
async def get_user_projects(user_id: CurrentUser, store: Store) -> list[DashboardProjectOut]:
    rows = await DashboardService(store).user_projects(user_id)
    return [DashboardProjectOut.model_validate(row) for row in rows]
