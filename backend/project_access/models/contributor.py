"""
Contributor model — binds one user to one project with one role.

Notes:
  • (project_id, user_id) is unique. The lifecycle manager checks this
    before writing; the unique index catches concurrent inserts.
  • The OWNER row is created together with its project and is never
    updated or deleted through the lifecycle operations.
  • Listing order is joined_at ascending.
"""

import datetime
import uuid

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from project_access.access.roles import ProjectRole
from project_access.core.database import Base
from project_access.models.project import utcnow


class Contributor(Base):
    """Membership record for one (project, user) pair."""

    __tablename__ = "project_contributors"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[ProjectRole] = mapped_column(
        Enum(ProjectRole, name="project_role_enum"),
        nullable=False,
    )
    joined_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("ix_project_contributors_project_id", "project_id"),
        Index("ix_project_contributors_user_id", "user_id"),
        Index("ix_project_contributors_role", "role"),
        Index(
            "ux_project_contributors_project_user",
            "project_id",
            "user_id",
            unique=True,
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Contributor id={self.id!s:.8} project={self.project_id!s:.8} "
            f"user={self.user_id!r} role={self.role}>"
        )
