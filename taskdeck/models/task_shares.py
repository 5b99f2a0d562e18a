"""Share rows granting view/edit rights on a task to a non-owner."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from taskdeck.core.time import utcnow
from taskdeck.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)

SHARE_PERMISSIONS = ("view", "edit")


class TaskShare(QueryModel, table=True):
    """Grant linking a task to a recipient profile with a permission level."""

    __tablename__ = "task_shares"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        UniqueConstraint(
            "task_id",
            "shared_with_user_id",
            name="uq_task_shares_task_recipient",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    task_id: UUID = Field(foreign_key="tasks.id", index=True)
    shared_by_user_id: UUID = Field(foreign_key="profiles.id", index=True)
    shared_with_user_id: UUID = Field(foreign_key="profiles.id", index=True)
    permission: str = Field(default="view")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
