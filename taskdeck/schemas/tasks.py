"""Task API schemas: create/update payloads and per-viewer read models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]
TaskScope = Literal["all", "owned", "shared"]
TaskSidebarView = Literal["all", "today", "overdue", "completed"]
TaskSortKey = Literal["due_date", "priority", "status", "title", "created_at"]


def _clean_title(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Title is required.")
    return cleaned


class TaskCreate(SQLModel):
    """Payload for creating a task; the caller becomes its owner."""

    model_config = SQLModelConfig(extra="forbid")

    title: str = Field(max_length=500)
    description: str = Field(default="", max_length=10_000)
    due_date: datetime = Field(
        description="Due instant; naive values are interpreted as UTC.",
        examples=["2026-05-01T17:00:00Z"],
    )
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        return _clean_title(value)


class TaskUpdate(SQLModel):
    """Partial task update. Ownership, ids and derived flags are not writable."""

    model_config = SQLModelConfig(extra="forbid")

    title: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=10_000)
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _clean_title(value)


class TaskStatusUpdate(SQLModel):
    """Payload for a direct status change; any status may follow any other."""

    model_config = SQLModelConfig(extra="forbid")

    status: TaskStatus


class TaskViewRead(SQLModel):
    """Task as seen by one viewer, annotated with derived capability flags."""

    id: UUID
    owner_id: UUID
    title: str
    description: str
    due_date: datetime
    priority: str
    status: str
    created_at: datetime
    updated_at: datetime
    can_edit: bool = Field(description="Whether the viewer may mutate this task.")
    is_shared: bool = Field(description="True when the task reached the viewer via a share.")
    permission: str | None = Field(
        default=None,
        description="Share permission for shared tasks; null for owned tasks.",
    )


class TaskViewPage(SQLModel):
    """One page of filtered and sorted task views."""

    items: list[TaskViewRead]
    total: int
    page: int
    size: int
    pages: int


class TaskCounters(SQLModel):
    """Dashboard and sidebar counters over the viewer's visible tasks."""

    total: int = 0
    due_today: int = 0
    overdue: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    shared_with_me: int = 0


class NextStatusRead(SQLModel):
    """Suggested next status for the status-cycling control."""

    status: TaskStatus
    next_status: TaskStatus
