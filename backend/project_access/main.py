"""
FastAPI application entrypoint.

Lifespan:
  • On startup: verify DB connectivity.
  • On shutdown: dispose the engine cleanly.

Routers:
  • /projects — project CRUD + contributor management
  • /dashboard — per-user overview
  • /health — shallow liveness probe

Errors:
  The access core raises structured AccessError kinds. They are mapped
  to HTTP responses here, in one place, and nowhere else.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from project_access.access.errors import (
    AccessError,
    AlreadyMember,
    InvariantViolation,
    NotFound,
    StoreUnavailable,
)
from project_access.core.config import settings
from project_access.core.database import engine
from project_access.routers.contributors import router as contributors_router
from project_access.routers.dashboard import router as dashboard_router
from project_access.routers.projects import router as projects_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""

    # Startup — verify DB is reachable
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified ✓")
    except Exception:
        logger.warning(
            "Could not reach the database on startup. "
            "The app will start, but requests will fail until the DB is available."
        )

    yield  # ← application runs here

    # Shutdown — clean up connection pool
    await engine.dispose()
    logger.info("Database engine disposed ✓")


# ── App ─────────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        "Project membership and access control — "
        "owners, contributors and graded roles."
    ),
    lifespan=lifespan,
)

# Mount routers
app.include_router(projects_router, prefix="/projects")
app.include_router(contributors_router, prefix="/projects")
app.include_router(dashboard_router, prefix="/dashboard")


# ── Error mapping ───────────────────────────────────────────
def status_for(exc: AccessError) -> int:
    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, AlreadyMember):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, InvariantViolation):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, StoreUnavailable):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(AccessError)
async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


# ── Health check ────────────────────────────────────────────
@app.get(
    "/health",
    tags=["System"],
    summary="Liveness probe",
)
async def health_check() -> dict[str, str]:
    """Shallow health check — confirms the process is alive."""
    return {"status": "healthy"}
