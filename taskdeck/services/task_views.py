"""Pure list operations over a viewer's tasks: search, filters, sorting, paging, counters.

Nothing here touches the database. Callers pass the already-fetched
`EffectiveTaskView` list together with the current instant and the viewer's
timezone, which keeps day-boundary behaviour deterministic under test.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Generic, TypeVar

from taskdeck.core.time import as_aware_utc

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from zoneinfo import ZoneInfo

    from taskdeck.services.task_access import EffectiveTaskView

T = TypeVar("T")

STATUS_CYCLE = {
    "pending": "in-progress",
    "in-progress": "completed",
    "completed": "pending",
}
PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}
SORT_KEYS = ("due_date", "priority", "status", "title", "created_at")


@dataclass(frozen=True)
class TaskQuery:
    """Search, filter and sort options for a task list."""

    search: str | None = None
    priority: str | None = None
    status: str | None = None
    scope: str = "all"
    view: str = "all"
    sort: str = "due_date"


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int
    pages: int


@dataclass(frozen=True)
class TaskCounts:
    total: int = 0
    due_today: int = 0
    overdue: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    shared_with_me: int = 0


def next_status(status: str) -> str:
    """Suggested follow-up status for the cycling status control."""
    try:
        return STATUS_CYCLE[status]
    except KeyError:
        raise ValueError(f"Unknown task status {status!r}.") from None


def _local_day(value: datetime, tz: ZoneInfo) -> date:
    return as_aware_utc(value).astimezone(tz).date()


def is_due_today(view: EffectiveTaskView, *, now: datetime, tz: ZoneInfo) -> bool:
    """Due on the viewer's current calendar day and not completed."""
    if view.task.status == "completed":
        return False
    return _local_day(view.task.due_date, tz) == _local_day(now, tz)


def is_overdue(view: EffectiveTaskView, *, now: datetime, tz: ZoneInfo) -> bool:
    """Due instant has passed, the due day is over, and the task is open.

    A task due earlier today stays "today" until the viewer's day ends.
    """
    task = view.task
    if task.status == "completed":
        return False
    due = as_aware_utc(task.due_date)
    if due >= as_aware_utc(now):
        return False
    return _local_day(due, tz) != _local_day(now, tz)


def matches_search(view: EffectiveTaskView, search: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    task = view.task
    return needle in task.title.lower() or needle in (task.description or "").lower()


def _matches_scope(view: EffectiveTaskView, scope: str) -> bool:
    if scope == "owned":
        return not view.is_shared
    if scope == "shared":
        return view.is_shared
    return True


def _matches_view(view: EffectiveTaskView, name: str, *, now: datetime, tz: ZoneInfo) -> bool:
    if name == "today":
        return is_due_today(view, now=now, tz=tz)
    if name == "overdue":
        return is_overdue(view, now=now, tz=tz)
    if name == "completed":
        return view.task.status == "completed"
    return True


def filter_tasks(
    views: Iterable[EffectiveTaskView],
    query: TaskQuery,
    *,
    now: datetime,
    tz: ZoneInfo,
) -> list[EffectiveTaskView]:
    return [
        view
        for view in views
        if matches_search(view, query.search)
        and (query.priority is None or view.task.priority == query.priority)
        and (query.status is None or view.task.status == query.status)
        and _matches_scope(view, query.scope)
        and _matches_view(view, query.view, now=now, tz=tz)
    ]


def _sort_spec(key: str) -> tuple[Callable[[EffectiveTaskView], object], bool]:
    if key == "due_date":
        return (lambda v: as_aware_utc(v.task.due_date)), False
    if key == "priority":
        return (lambda v: PRIORITY_RANK.get(v.task.priority, 0)), True
    if key == "status":
        return (lambda v: v.task.status), False
    if key == "title":
        return (lambda v: v.task.title.lower()), False
    if key == "created_at":
        return (lambda v: as_aware_utc(v.task.created_at)), True
    raise ValueError(f"Unknown sort key {key!r}.")


def sort_tasks(views: Iterable[EffectiveTaskView], key: str) -> list[EffectiveTaskView]:
    """Stable sort by one of `SORT_KEYS`."""
    sort_key, reverse = _sort_spec(key)
    # sorted(reverse=True) keeps equal elements in their original order.
    return sorted(views, key=sort_key, reverse=reverse)


def paginate_items(items: Sequence[T], *, page: int, size: int) -> Page[T]:
    """Slice one page (1-based). Pages past the end are empty."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if size < 1:
        raise ValueError("size must be >= 1")
    total = len(items)
    start = (page - 1) * size
    return Page(
        items=list(items[start : start + size]),
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size),
    )


def query_tasks(
    views: Iterable[EffectiveTaskView],
    query: TaskQuery,
    *,
    page: int,
    size: int,
    now: datetime,
    tz: ZoneInfo,
) -> Page[EffectiveTaskView]:
    """Filter, sort and page a viewer's tasks in one call."""
    filtered = filter_tasks(views, query, now=now, tz=tz)
    return paginate_items(sort_tasks(filtered, query.sort), page=page, size=size)


def count_tasks(
    views: Iterable[EffectiveTaskView],
    *,
    now: datetime,
    tz: ZoneInfo,
) -> TaskCounts:
    """Dashboard counters, evaluated in the viewer's timezone."""
    counts = {
        "total": 0,
        "due_today": 0,
        "overdue": 0,
        "completed": 0,
        "pending": 0,
        "in_progress": 0,
        "shared_with_me": 0,
    }
    for view in views:
        counts["total"] += 1
        status = view.task.status
        if status == "completed":
            counts["completed"] += 1
        elif status == "pending":
            counts["pending"] += 1
        elif status == "in-progress":
            counts["in_progress"] += 1
        if is_due_today(view, now=now, tz=tz):
            counts["due_today"] += 1
        if is_overdue(view, now=now, tz=tz):
            counts["overdue"] += 1
        if view.is_shared:
            counts["shared_with_me"] += 1
    return TaskCounts(**counts)


def current_instant() -> datetime:
    return datetime.now(UTC)
