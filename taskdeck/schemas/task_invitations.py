"""Task invitation API schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig

from taskdeck.schemas.task_shares import SharePermission

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class TaskInvitationCreate(SQLModel):
    """Invite a user to a task; access is granted once they accept."""

    model_config = SQLModelConfig(extra="forbid")

    email: str = Field(min_length=3, max_length=320, examples=["sam@example.com"])
    permission: SharePermission = "view"


class TaskInvitationRead(SQLModel):
    id: UUID
    task_id: UUID
    invited_by_user_id: UUID
    invited_user_id: UUID
    permission: str
    status: str
    created_at: datetime
    updated_at: datetime
    responded_at: datetime | None = None
