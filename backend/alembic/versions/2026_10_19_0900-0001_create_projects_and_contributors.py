"""create projects and project_contributors

Revision ID: 0001
Revises:
Create Date: 2026-10-19

  - projects: one row per project, owner_id immutable
  - project_contributors: one row per (project, user) with a single role
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

project_status = sa.Enum("ACTIVE", "ARCHIVED", name="project_status_enum")
project_role = sa.Enum("OWNER", "ADMIN", "WRITE", "READ", name="project_role_enum")


def upgrade() -> None:
    # ── 1. projects table ───────────────────────────────────
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", project_status, server_default="ACTIVE", nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_owner_id", "projects", ["owner_id"])
    op.create_index("ix_projects_status", "projects", ["status"])

    # ── 2. project_contributors table ───────────────────────
    op.create_table(
        "project_contributors",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("role", project_role, nullable=False),
        sa.Column("joined_at", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_project_contributors_project_id", "project_contributors", ["project_id"])
    op.create_index("ix_project_contributors_user_id", "project_contributors", ["user_id"])
    op.create_index("ix_project_contributors_role", "project_contributors", ["role"])
    # One membership per (project, user) — backstop for concurrent inserts
    op.create_index(
        "ux_project_contributors_project_user",
        "project_contributors",
        ["project_id", "user_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("ux_project_contributors_project_user", table_name="project_contributors")
    op.drop_index("ix_project_contributors_role", table_name="project_contributors")
    op.drop_index("ix_project_contributors_user_id", table_name="project_contributors")
    op.drop_index("ix_project_contributors_project_id", table_name="project_contributors")
    op.drop_table("project_contributors")
    op.drop_index("ix_projects_status", table_name="projects")
    op.drop_index("ix_projects_owner_id", table_name="projects")
    op.drop_table("projects")
    project_role.drop(op.get_bind(), checkfirst=True)
    project_status.drop(op.get_bind(), checkfirst=True)
