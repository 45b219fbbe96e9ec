"""Pydantic v2 schemas for contributor endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from project_access.access.roles import ProjectRole


class ContributorCreate(BaseModel):
    """
    Payload accepted by POST /projects/{project_id}/contributors.

    OWNER passes validation here on purpose: the lifecycle manager
    rejects it with CONTRIBUTOR.INVALID_ROLE.
    """

    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(..., min_length=1, max_length=255, examples=["user-123"])
    role: ProjectRole = Field(..., examples=[ProjectRole.WRITE])


class ContributorRoleUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: ProjectRole = Field(..., examples=[ProjectRole.ADMIN])


class ContributorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    user_id: str
    role: ProjectRole
    joined_at: datetime
