"""
Project role hierarchy.

Single source of truth for privilege comparisons:

    OWNER > ADMIN > WRITE > READ

Pure Python logic — no FastAPI imports, no database access.
Nothing else in the package may compare roles by hand.
"""

from __future__ import annotations

from enum import Enum


class ProjectRole(str, Enum):
    """Role a user holds in one project. Exactly one per membership."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    WRITE = "WRITE"
    READ = "READ"


ROLE_RANKS: dict[ProjectRole, int] = {
    ProjectRole.OWNER: 4,
    ProjectRole.ADMIN: 3,
    ProjectRole.WRITE: 2,
    ProjectRole.READ: 1,
}


def rank(role: ProjectRole) -> int:
    """Numeric level for a role (higher = more privileged)."""
    return ROLE_RANKS[ProjectRole(role)]


def meets(actual: ProjectRole, required: ProjectRole) -> bool:
    """
    True if `actual` meets or exceeds `required`.

    Example:
        meets(ProjectRole.ADMIN, ProjectRole.WRITE) -> True
        meets(ProjectRole.READ, ProjectRole.WRITE)  -> False
    """
    return rank(actual) >= rank(required)
