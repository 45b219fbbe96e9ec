"""
Structured error kinds raised by the access-control core.

The core reports WHAT failed; the HTTP layer decides HOW to present it
(status code, message, logging). Every error carries a stable `code`
plus the identifiers involved so callers never parse messages.

Authorization outcomes are not errors: PermissionEvaluator.has_permission
returns False for "no access".
"""

from __future__ import annotations

from typing import Any


class AccessError(Exception):
    """Base class for every error the core raises."""

    code: str = "ACCESS.ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            **{key: str(value) for key, value in self.context.items()},
        }


# ── Absence ─────────────────────────────────────────────────
class NotFound(AccessError):
    """A referenced record does not exist."""


class ProjectNotFound(NotFound):
    code = "PROJECT.NOT_FOUND"

    def __init__(self, project_id: Any) -> None:
        super().__init__(f"Project {project_id} not found", project_id=project_id)


class ContributorNotFound(NotFound):
    code = "CONTRIBUTOR.NOT_FOUND"

    def __init__(self, project_id: Any, contributor_id: Any) -> None:
        super().__init__(
            f"Contributor {contributor_id} not found in project {project_id}",
            project_id=project_id,
            contributor_id=contributor_id,
        )


class AlreadyMember(AccessError):
    """Exactly one contributor row may exist per (project, user)."""

    code = "CONTRIBUTOR.ALREADY_MEMBER"

    def __init__(self, project_id: Any, user_id: str) -> None:
        super().__init__(
            f"User {user_id} is already a contributor of project {project_id}",
            project_id=project_id,
            user_id=user_id,
        )


# ── Invariant violations (terminal for the call) ────────────
class InvariantViolation(AccessError):
    """A membership mutation would break a project invariant."""


class InvalidRole(InvariantViolation):
    code = "CONTRIBUTOR.INVALID_ROLE"

    def __init__(self, role: Any) -> None:
        super().__init__(f"Role {role} cannot be assigned here", role=role)


class CannotModifyOwner(InvariantViolation):
    code = "CONTRIBUTOR.CANNOT_MODIFY_OWNER"

    def __init__(self, project_id: Any, contributor_id: Any) -> None:
        super().__init__(
            "The OWNER role cannot be granted or changed",
            project_id=project_id,
            contributor_id=contributor_id,
        )


class CannotRemoveOwner(InvariantViolation):
    code = "CONTRIBUTOR.CANNOT_REMOVE_OWNER"

    def __init__(self, project_id: Any, contributor_id: Any) -> None:
        super().__init__(
            "The project owner cannot be removed",
            project_id=project_id,
            contributor_id=contributor_id,
        )


class CannotRemoveLastAdmin(InvariantViolation):
    code = "CONTRIBUTOR.CANNOT_REMOVE_LAST_ADMIN"

    def __init__(self, project_id: Any, contributor_id: Any) -> None:
        super().__init__(
            "The last ADMIN contributor of a project cannot be removed",
            project_id=project_id,
            contributor_id=contributor_id,
        )


# ── Transient infrastructure failure ────────────────────────
class StoreUnavailable(AccessError):
    """The backing store timed out or could not be reached.

    Safe to retry idempotent reads. Lifecycle writes must re-check
    their preconditions instead of being retried blindly.
    """

    code = "STORE.UNAVAILABLE"

    def __init__(self, operation: str) -> None:
        super().__init__(f"Store unavailable during {operation}", operation=operation)
