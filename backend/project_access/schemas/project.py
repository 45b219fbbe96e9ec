"""
Pydantic v2 schemas for project endpoints.

  • ProjectCreate / ProjectUpdate — what the CLIENT sends.
  • ProjectResponse              — what the SERVER returns.

owner_id is never accepted from the client: the owner is the caller
at creation time and is immutable afterwards.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from project_access.models.project import ProjectStatus


class ProjectCreate(BaseModel):
    """Payload accepted by POST /projects."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        examples=["My Awesome Project"],
    )
    description: str | None = Field(
        default=None,
        max_length=1000,
        examples=["Shared planning board for the mobile release."],
    )


class ProjectUpdate(BaseModel):
    """Payload accepted by PUT /projects/{project_id}. All fields optional."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    status: ProjectStatus | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    status: ProjectStatus
    owner_id: str
    created_at: datetime
    updated_at: datetime
