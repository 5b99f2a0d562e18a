"""Notification API schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class NotificationRead(SQLModel):
    """Notification payload; `data` holds `task_id`/`invitation_id` when actionable."""

    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    data: dict[str, object] | None = None
    read: bool
    created_at: datetime


class UnreadCountRead(SQLModel):
    count: int


class MarkAllReadResponse(SQLModel):
    updated: int
