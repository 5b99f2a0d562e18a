"""Per-viewer task visibility and the capability gate for every task mutation.

A viewer sees the union of tasks they own and tasks shared with them. Each
visible task is annotated with `can_edit`/`is_shared` at read time; the flags
are never persisted and never accepted from callers. Every mutation re-derives
the view from the store before deciding whether it may proceed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from taskdeck.core.errors import (
    AccessDeniedError,
    NotFoundError,
    StoreError,
    TaskIntegrityError,
)
from taskdeck.core.logging import get_logger
from taskdeck.core.time import to_naive_utc, utcnow
from taskdeck.db import crud
from taskdeck.models.task_invitations import TaskInvitation
from taskdeck.models.task_shares import TaskShare
from taskdeck.models.tasks import Task

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.schemas.tasks import TaskCreate, TaskUpdate

logger = get_logger(__name__)

COMPLETED = "completed"
PENDING = "pending"
UPDATABLE_FIELDS = frozenset({"title", "description", "due_date", "priority", "status"})


@dataclass(frozen=True)
class EffectiveTaskView:
    """A task as one viewer sees it."""

    task: Task
    can_edit: bool
    is_shared: bool
    permission: str | None = None

    @classmethod
    def owned(cls, task: Task) -> EffectiveTaskView:
        return cls(task=task, can_edit=True, is_shared=False)

    @classmethod
    def shared(cls, task: Task, share: TaskShare) -> EffectiveTaskView:
        return cls(
            task=task,
            can_edit=share.permission == "edit",
            is_shared=True,
            permission=share.permission,
        )

    def snapshot(self) -> EffectiveTaskView:
        """Detach the view from the session so later writes do not show through."""
        return replace(self, task=Task.model_validate(self.task.model_dump()))


class MutationKind(str, Enum):
    """Mutation paths a client can request on a task. Every kind requires edit capability."""

    UPDATE = "update"
    CHANGE_STATUS = "change_status"
    TOGGLE_COMPLETION = "toggle_completion"
    DELETE = "delete"


@dataclass(frozen=True)
class TaskMutation:
    """A requested change to a task, checked against the actor's capability."""

    kind: MutationKind
    changes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def update(cls, payload: TaskUpdate) -> TaskMutation:
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not writable: {', '.join(sorted(unknown))}")
        return cls(kind=MutationKind.UPDATE, changes=changes)

    @classmethod
    def change_status(cls, status: str) -> TaskMutation:
        return cls(kind=MutationKind.CHANGE_STATUS, changes={"status": status})

    @classmethod
    def toggle_completion(cls) -> TaskMutation:
        return cls(kind=MutationKind.TOGGLE_COMPLETION)

    @classmethod
    def delete(cls) -> TaskMutation:
        return cls(kind=MutationKind.DELETE)


def toggled_status(status: str) -> str:
    """Completed tasks reopen as pending; anything else becomes completed."""
    return PENDING if status == COMPLETED else COMPLETED


def _next_updated_at(previous: datetime | None) -> datetime:
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


async def fetch_visible_tasks(session: AsyncSession, viewer_id: UUID) -> list[EffectiveTaskView]:
    """Return every task the viewer owns or has been shared, annotated per viewer.

    Owned tasks come first, newest first; no ordering is promised across the
    union. A task that appears both as owned and as shared to the same viewer,
    or twice through shares, raises `TaskIntegrityError`.
    """
    try:
        owned = (
            await Task.objects.filter_by(owner_id=viewer_id)
            .order_by(col(Task.created_at).desc())
            .all(session)
        )
        shared_rows = (
            await session.exec(
                select(TaskShare, Task)
                .join(Task, col(Task.id) == col(TaskShare.task_id))
                .where(col(TaskShare.shared_with_user_id) == viewer_id)
                .order_by(col(Task.created_at).desc()),
            )
        ).all()
    except SQLAlchemyError as exc:
        logger.exception("task.visibility.read_failed viewer_id=%s", viewer_id)
        raise StoreError() from exc

    views = [EffectiveTaskView.owned(task) for task in owned]
    seen: set[UUID] = {task.id for task in owned}
    for share, task in shared_rows:
        if task.id in seen or task.owner_id == viewer_id:
            logger.error(
                "task.visibility.integrity_violation viewer_id=%s task_id=%s share_id=%s",
                viewer_id,
                task.id,
                share.id,
            )
            raise TaskIntegrityError(
                f"Task {task.id} is visible to the viewer through more than one path.",
            )
        seen.add(task.id)
        views.append(EffectiveTaskView.shared(task, share))
    return [view.snapshot() for view in views]


async def resolve_task_view(
    session: AsyncSession,
    viewer_id: UUID,
    task_id: UUID,
) -> EffectiveTaskView:
    """Re-derive the single-task view for `viewer_id`; `NotFoundError` when not visible."""
    try:
        task = await Task.objects.by_id(task_id).first(session)
        share = await TaskShare.objects.filter_by(
            task_id=task_id,
            shared_with_user_id=viewer_id,
        ).first(session)
    except SQLAlchemyError as exc:
        logger.exception(
            "task.visibility.read_failed viewer_id=%s task_id=%s",
            viewer_id,
            task_id,
        )
        raise StoreError() from exc
    if task is None:
        raise NotFoundError("Task not found.")
    if task.owner_id == viewer_id:
        if share is not None:
            logger.error(
                "task.visibility.integrity_violation viewer_id=%s task_id=%s share_id=%s",
                viewer_id,
                task_id,
                share.id,
            )
            raise TaskIntegrityError(f"Task {task_id} is shared with its own owner.")
        return EffectiveTaskView.owned(task)
    if share is None:
        raise NotFoundError("Task not found.")
    return EffectiveTaskView.shared(task, share)


async def require_task_owner(session: AsyncSession, actor_id: UUID, task_id: UUID) -> Task:
    """Return the task when `actor_id` owns it.

    Tasks the actor cannot see are `NotFoundError`; tasks merely shared with
    them are `AccessDeniedError`.
    """
    view = await resolve_task_view(session, actor_id, task_id)
    if view.is_shared:
        logger.warning("task.owner_check.denied actor_id=%s task_id=%s", actor_id, task_id)
        raise AccessDeniedError("Only the task owner can manage sharing.")
    return view.task


async def create_task(
    session: AsyncSession,
    owner_id: UUID,
    payload: TaskCreate,
) -> EffectiveTaskView:
    """Insert a task owned by `owner_id`."""
    data = payload.model_dump()
    data["due_date"] = to_naive_utc(payload.due_date)
    now = utcnow()
    task = Task(owner_id=owner_id, created_at=now, updated_at=now, **data)
    task = await crud.save(session, task)
    logger.info("task.created task_id=%s owner_id=%s", task.id, owner_id)
    return EffectiveTaskView.owned(task).snapshot()


async def _delete_task(session: AsyncSession, task: Task) -> None:
    await crud.delete_where(
        session,
        TaskShare,
        col(TaskShare.task_id) == task.id,
        commit=False,
    )
    await crud.delete_where(
        session,
        TaskInvitation,
        col(TaskInvitation.task_id) == task.id,
        commit=False,
    )
    await crud.delete(session, task)


async def apply_mutation(
    session: AsyncSession,
    actor_id: UUID,
    task_id: UUID,
    mutation: TaskMutation,
) -> EffectiveTaskView | None:
    """Run `mutation` for `actor_id` after re-checking their capability.

    Returns the refreshed view, or `None` for deletes. Denied mutations raise
    `AccessDeniedError` before anything is written.
    """
    view = await resolve_task_view(session, actor_id, task_id)
    if not view.can_edit:
        logger.warning(
            "task.mutation.denied actor_id=%s task_id=%s kind=%s",
            actor_id,
            task_id,
            mutation.kind.value,
        )
        raise AccessDeniedError()

    task = view.task
    if mutation.kind is MutationKind.DELETE:
        await _delete_task(session, task)
        logger.info("task.deleted task_id=%s actor_id=%s", task_id, actor_id)
        return None

    if mutation.kind is MutationKind.TOGGLE_COMPLETION:
        changes: dict[str, Any] = {"status": toggled_status(task.status)}
    else:
        changes = dict(mutation.changes)
    if "due_date" in changes:
        changes["due_date"] = to_naive_utc(changes["due_date"])
    if not changes:
        return view.snapshot()

    changes["updated_at"] = _next_updated_at(task.updated_at)
    task = await crud.patch(session, task, changes)
    logger.info(
        "task.mutated task_id=%s actor_id=%s kind=%s fields=%s",
        task_id,
        actor_id,
        mutation.kind.value,
        ",".join(sorted(k for k in changes if k != "updated_at")),
    )
    return replace(view, task=task).snapshot()
