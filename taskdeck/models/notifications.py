"""In-app notification model."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field

from taskdeck.core.time import utcnow
from taskdeck.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)

NOTIFICATION_TASK_INVITATION = "task_invitation"
NOTIFICATION_INVITATION_ACCEPTED = "invitation_accepted"
NOTIFICATION_INVITATION_REJECTED = "invitation_rejected"


class Notification(QueryModel, table=True):
    """Per-user notification; `data` carries ids for actionable types."""

    __tablename__ = "notifications"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="profiles.id", index=True)
    type: str = Field(index=True)
    title: str
    message: str = Field(default="")
    data: dict[str, object] | None = Field(default=None, sa_column=Column(JSON))
    read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
