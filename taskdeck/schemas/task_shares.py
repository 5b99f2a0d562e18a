"""Task share API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)

SharePermission = Literal["view", "edit"]


class TaskShareCreate(SQLModel):
    """Share a task with another signed-up user, identified by email."""

    model_config = SQLModelConfig(extra="forbid")

    email: str = Field(min_length=3, max_length=320, examples=["sam@example.com"])
    permission: SharePermission = "view"


class TaskSharePermissionUpdate(SQLModel):
    model_config = SQLModelConfig(extra="forbid")

    permission: SharePermission


class TaskShareRead(SQLModel):
    """Share row with the recipient's display details."""

    id: UUID
    task_id: UUID
    shared_by_user_id: UUID
    shared_with_user_id: UUID
    permission: str
    created_at: datetime
    updated_at: datetime
    recipient_email: str | None = None
    recipient_name: str | None = None
