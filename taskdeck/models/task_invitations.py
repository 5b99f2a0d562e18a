"""Task invitation model for the accept/reject sharing flow."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from taskdeck.core.time import utcnow
from taskdeck.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)

INVITATION_STATUSES = ("pending", "accepted", "rejected")


class TaskInvitation(QueryModel, table=True):
    """Pending offer to share a task; accepting it creates the share row."""

    __tablename__ = "task_invitations"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    task_id: UUID = Field(foreign_key="tasks.id", index=True)
    invited_by_user_id: UUID = Field(foreign_key="profiles.id", index=True)
    invited_user_id: UUID = Field(foreign_key="profiles.id", index=True)
    permission: str = Field(default="view")
    status: str = Field(default="pending", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    responded_at: datetime | None = None
