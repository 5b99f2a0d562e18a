"""Task model representing a single owned to-do item."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from taskdeck.core.time import utcnow
from taskdeck.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)

TASK_STATUSES = ("pending", "in-progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")


class Task(QueryModel, table=True):
    """To-do item owned by exactly one profile; ownership never changes."""

    __tablename__ = "tasks"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(foreign_key="profiles.id", index=True)

    title: str
    description: str = Field(default="")
    due_date: datetime = Field(default_factory=utcnow, index=True)
    priority: str = Field(default="medium", index=True)
    status: str = Field(default="pending", index=True)

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)
