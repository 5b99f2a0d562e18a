"""Create profiles, tasks, shares, invitations and notifications tables.

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-03-02 00:00:00.000000

"""

from __future__ import annotations

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision = "1a2b3c4d5e6f"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the initial schema."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clerk_user_id", sqlmodel.AutoString(), nullable=False),
        sa.Column("email", sqlmodel.AutoString(), nullable=True),
        sa.Column("full_name", sqlmodel.AutoString(), nullable=True),
        sa.Column("avatar_url", sqlmodel.AutoString(), nullable=True),
        sa.Column("timezone", sqlmodel.AutoString(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_clerk_user_id", "profiles", ["clerk_user_id"], unique=True)
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("title", sqlmodel.AutoString(), nullable=False),
        sa.Column("description", sqlmodel.AutoString(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("priority", sqlmodel.AutoString(), nullable=False),
        sa.Column("status", sqlmodel.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("owner_id", "due_date", "priority", "status", "created_at"):
        op.create_index(f"ix_tasks_{column}", "tasks", [column], unique=False)

    op.create_table(
        "task_shares",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("shared_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("shared_with_user_id", sa.Uuid(), nullable=False),
        sa.Column("permission", sqlmodel.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"]),
        sa.ForeignKeyConstraint(["shared_by_user_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["shared_with_user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "task_id",
            "shared_with_user_id",
            name="uq_task_shares_task_recipient",
        ),
    )
    for column in ("task_id", "shared_by_user_id", "shared_with_user_id"):
        op.create_index(f"ix_task_shares_{column}", "task_shares", [column], unique=False)

    op.create_table(
        "task_invitations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("invited_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("invited_user_id", sa.Uuid(), nullable=False),
        sa.Column("permission", sqlmodel.AutoString(), nullable=False),
        sa.Column("status", sqlmodel.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("responded_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"]),
        sa.ForeignKeyConstraint(["invited_by_user_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["invited_user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("task_id", "invited_by_user_id", "invited_user_id", "status"):
        op.create_index(
            f"ix_task_invitations_{column}",
            "task_invitations",
            [column],
            unique=False,
        )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("type", sqlmodel.AutoString(), nullable=False),
        sa.Column("title", sqlmodel.AutoString(), nullable=False),
        sa.Column("message", sqlmodel.AutoString(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in ("user_id", "type", "read", "created_at"):
        op.create_index(f"ix_notifications_{column}", "notifications", [column], unique=False)


def downgrade() -> None:
    """Drop the initial schema."""
    op.drop_table("notifications")
    op.drop_table("task_invitations")
    op.drop_table("task_shares")
    op.drop_table("tasks")
    op.drop_table("profiles")
