"""Task endpoints: per-viewer listing, counters and capability-gated mutations."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from taskdeck.api.deps import PROFILE_DEP, SESSION_DEP, viewer_timezone
from taskdeck.core.config import settings
from taskdeck.schemas.common import OkResponse
from taskdeck.schemas.errors import ErrorResponse
from taskdeck.schemas.tasks import (
    NextStatusRead,
    TaskCounters,
    TaskCreate,
    TaskPriority,
    TaskScope,
    TaskSidebarView,
    TaskSortKey,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
    TaskViewPage,
    TaskViewRead,
)
from taskdeck.services import task_access, task_views
from taskdeck.services.task_access import EffectiveTaskView, TaskMutation

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.models.profiles import Profile

router = APIRouter(prefix="/tasks", tags=["tasks"])

SEARCH_QUERY = Query(default=None, alias="q", max_length=200)
PRIORITY_QUERY = Query(default=None)
STATUS_QUERY = Query(default=None, alias="status")
SCOPE_QUERY = Query(default="all")
VIEW_QUERY = Query(default="all")
SORT_QUERY = Query(default="due_date")
PAGE_QUERY = Query(default=1, ge=1)
SIZE_QUERY = Query(default=None, ge=1, le=100)

MUTATION_ERRORS: dict[int | str, dict[str, object]] = {
    status.HTTP_403_FORBIDDEN: {
        "model": ErrorResponse,
        "description": "The task is shared with the caller without edit permission.",
    },
    status.HTTP_404_NOT_FOUND: {
        "model": ErrorResponse,
        "description": "The task does not exist or is not visible to the caller.",
    },
}


def _task_query(
    search: str | None = SEARCH_QUERY,
    priority: TaskPriority | None = PRIORITY_QUERY,
    status_filter: TaskStatus | None = STATUS_QUERY,
    scope: TaskScope = SCOPE_QUERY,
    view: TaskSidebarView = VIEW_QUERY,
    sort: TaskSortKey = SORT_QUERY,
) -> task_views.TaskQuery:
    return task_views.TaskQuery(
        search=search.strip() if search else None,
        priority=priority,
        status=status_filter,
        scope=scope,
        view=view,
        sort=sort,
    )


TASK_QUERY_DEP = Depends(_task_query)


def to_task_view_read(view: EffectiveTaskView) -> TaskViewRead:
    task = view.task
    return TaskViewRead(
        id=task.id,
        owner_id=task.owner_id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        priority=task.priority,
        status=task.status,
        created_at=task.created_at,
        updated_at=task.updated_at,
        can_edit=view.can_edit,
        is_shared=view.is_shared,
        permission=view.permission,
    )


@router.get("", response_model=TaskViewPage)
async def list_tasks(
    query: task_views.TaskQuery = TASK_QUERY_DEP,
    page: int = PAGE_QUERY,
    size: int | None = SIZE_QUERY,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskViewPage:
    """List owned and shared tasks with search, filters, sorting and paging."""
    views = await task_access.fetch_visible_tasks(session, profile.id)
    result = task_views.query_tasks(
        views,
        query,
        page=page,
        size=size or settings.tasks_page_size,
        now=task_views.current_instant(),
        tz=viewer_timezone(profile),
    )
    return TaskViewPage(
        items=[to_task_view_read(view) for view in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        pages=result.pages,
    )


@router.get("/counters", response_model=TaskCounters)
async def get_task_counters(
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskCounters:
    """Dashboard counters over every task visible to the caller."""
    views = await task_access.fetch_visible_tasks(session, profile.id)
    counts = task_views.count_tasks(
        views,
        now=task_views.current_instant(),
        tz=viewer_timezone(profile),
    )
    return TaskCounters.model_validate(counts, from_attributes=True)


@router.get("/next-status/{current}", response_model=NextStatusRead)
def get_next_status(current: TaskStatus) -> NextStatusRead:
    """Suggested next status for a cycling status button. Not enforced on writes."""
    return NextStatusRead(status=current, next_status=task_views.next_status(current))


@router.post("", response_model=TaskViewRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskViewRead:
    view = await task_access.create_task(session, profile.id, payload)
    return to_task_view_read(view)


@router.get(
    "/{task_id}",
    response_model=TaskViewRead,
    responses={status.HTTP_404_NOT_FOUND: MUTATION_ERRORS[status.HTTP_404_NOT_FOUND]},
)
async def get_task(
    task_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskViewRead:
    view = await task_access.resolve_task_view(session, profile.id, task_id)
    return to_task_view_read(view)


async def _mutate(
    session: AsyncSession,
    profile: Profile,
    task_id: UUID,
    mutation: TaskMutation,
) -> TaskViewRead:
    view = await task_access.apply_mutation(session, profile.id, task_id, mutation)
    if view is None:  # pragma: no cover
        raise RuntimeError("Non-delete mutation returned no task.")
    return to_task_view_read(view)


@router.patch("/{task_id}", response_model=TaskViewRead, responses=MUTATION_ERRORS)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskViewRead:
    """Edit task fields. Requires ownership or an edit share."""
    return await _mutate(session, profile, task_id, TaskMutation.update(payload))


@router.post("/{task_id}/status", response_model=TaskViewRead, responses=MUTATION_ERRORS)
async def change_task_status(
    task_id: UUID,
    payload: TaskStatusUpdate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskViewRead:
    """Move a task to any status. Requires ownership or an edit share."""
    return await _mutate(session, profile, task_id, TaskMutation.change_status(payload.status))


@router.post(
    "/{task_id}/toggle-completion",
    response_model=TaskViewRead,
    responses=MUTATION_ERRORS,
)
async def toggle_task_completion(
    task_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskViewRead:
    """Complete an open task, or reopen a completed one as pending."""
    return await _mutate(session, profile, task_id, TaskMutation.toggle_completion())


@router.delete("/{task_id}", response_model=OkResponse, responses=MUTATION_ERRORS)
async def delete_task(
    task_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> OkResponse:
    """Delete a task together with its shares and invitations."""
    await task_access.apply_mutation(session, profile.id, task_id, TaskMutation.delete())
    return OkResponse()
