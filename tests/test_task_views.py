# ruff: noqa: INP001
"""Pure list-operation tests: search, filters, sorting, paging and counters."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from taskdeck.models.tasks import Task
from taskdeck.services import task_views
from taskdeck.services.task_access import EffectiveTaskView
from taskdeck.services.task_views import TaskQuery

LOS_ANGELES = ZoneInfo("America/Los_Angeles")
# 23:30 on 2026-03-10 in Los Angeles (PDT, UTC-7).
LATE_EVENING = datetime(2026, 3, 11, 6, 30, tzinfo=UTC)


def _view(
    title: str,
    *,
    due: datetime,
    status: str = "pending",
    priority: str = "medium",
    description: str = "",
    created: datetime | None = None,
    shared: bool = False,
    permission: str = "view",
) -> EffectiveTaskView:
    created_at = created or datetime(2026, 3, 1, 9, 0)
    task = Task(
        id=uuid4(),
        owner_id=uuid4(),
        title=title,
        description=description,
        due_date=due,
        priority=priority,
        status=status,
        created_at=created_at,
        updated_at=created_at,
    )
    if not shared:
        return EffectiveTaskView(task=task, can_edit=True, is_shared=False)
    return EffectiveTaskView(
        task=task,
        can_edit=permission == "edit",
        is_shared=True,
        permission=permission,
    )


def _titles(views: list[EffectiveTaskView]) -> list[str]:
    return [view.task.title for view in views]


def test_next_status_cycles_and_rejects_unknown_values() -> None:
    assert task_views.next_status("pending") == "in-progress"
    assert task_views.next_status("in-progress") == "completed"
    assert task_views.next_status("completed") == "pending"
    with pytest.raises(ValueError, match="archived"):
        task_views.next_status("archived")


def test_search_matches_title_or_description_case_insensitively() -> None:
    due = datetime(2026, 3, 12, 12, 0)
    views = [
        _view("Write Report", due=due),
        _view("Groceries", due=due, description="milk, eggs, REPORT paper"),
        _view("Gym", due=due),
    ]
    now = LATE_EVENING

    found = task_views.filter_tasks(views, TaskQuery(search="report"), now=now, tz=UTC)
    everything = task_views.filter_tasks(views, TaskQuery(search=""), now=now, tz=UTC)

    assert _titles(found) == ["Write Report", "Groceries"]
    assert len(everything) == 3


def test_filters_combine_priority_status_and_scope() -> None:
    due = datetime(2026, 3, 12, 12, 0)
    views = [
        _view("Mine high", due=due, priority="high"),
        _view("Mine low", due=due, priority="low", status="completed"),
        _view("Shared high", due=due, priority="high", shared=True),
        _view("Shared high done", due=due, priority="high", status="completed", shared=True),
    ]
    now = LATE_EVENING

    high_shared = task_views.filter_tasks(
        views,
        TaskQuery(priority="high", scope="shared"),
        now=now,
        tz=UTC,
    )
    owned_completed = task_views.filter_tasks(
        views,
        TaskQuery(status="completed", scope="owned"),
        now=now,
        tz=UTC,
    )

    assert _titles(high_shared) == ["Shared high", "Shared high done"]
    assert _titles(owned_completed) == ["Mine low"]


def test_sort_orders_follow_each_key() -> None:
    views = [
        _view(
            "banana",
            due=datetime(2026, 3, 20),
            priority="low",
            status="pending",
            created=datetime(2026, 3, 2),
        ),
        _view(
            "Apple",
            due=datetime(2026, 3, 15),
            priority="high",
            status="completed",
            created=datetime(2026, 3, 1),
        ),
        _view(
            "cherry",
            due=datetime(2026, 3, 18),
            priority="high",
            status="in-progress",
            created=datetime(2026, 3, 3),
        ),
    ]

    assert _titles(task_views.sort_tasks(views, "due_date")) == ["Apple", "cherry", "banana"]
    assert _titles(task_views.sort_tasks(views, "title")) == ["Apple", "banana", "cherry"]
    assert _titles(task_views.sort_tasks(views, "created_at")) == ["cherry", "banana", "Apple"]
    assert _titles(task_views.sort_tasks(views, "status")) == ["Apple", "cherry", "banana"]
    # Equal priorities keep their input order.
    assert _titles(task_views.sort_tasks(views, "priority")) == ["Apple", "cherry", "banana"]
    with pytest.raises(ValueError, match="owner"):
        task_views.sort_tasks(views, "owner")


def test_pagination_reports_totals_and_empty_trailing_pages() -> None:
    items = list(range(45))

    third = task_views.paginate_items(items, page=3, size=20)
    beyond = task_views.paginate_items(items, page=4, size=20)
    empty = task_views.paginate_items([], page=1, size=20)

    assert third.items == list(range(40, 45))
    assert (third.total, third.pages) == (45, 3)
    assert beyond.items == []
    assert beyond.pages == 3
    assert (empty.total, empty.pages) == (0, 0)
    with pytest.raises(ValueError):
        task_views.paginate_items(items, page=0, size=20)
    with pytest.raises(ValueError):
        task_views.paginate_items(items, page=1, size=0)


def test_counters_respect_the_viewers_day_boundary() -> None:
    views = [
        # 09:00 PDT today: already past, but still today for a Los Angeles viewer.
        _view("Earlier today", due=datetime(2026, 3, 10, 16, 0)),
        # 09:00 PDT yesterday.
        _view("Yesterday", due=datetime(2026, 3, 9, 16, 0), status="in-progress"),
        _view("Tomorrow", due=datetime(2026, 3, 11, 20, 0), shared=True),
        _view("Done late", due=datetime(2026, 3, 8, 16, 0), status="completed", shared=True),
    ]

    local = task_views.count_tasks(views, now=LATE_EVENING, tz=LOS_ANGELES)
    utc = task_views.count_tasks(views, now=LATE_EVENING, tz=UTC)

    assert local.total == 4
    assert local.due_today == 1
    assert local.overdue == 1
    assert local.completed == 1
    assert local.pending == 2
    assert local.in_progress == 1
    assert local.shared_with_me == 2

    # In UTC it is already the 11th, so "Earlier today" has become overdue and
    # "Tomorrow" is due today.
    assert utc.overdue == 2
    assert utc.due_today == 1


def test_query_tasks_applies_sidebar_views_then_pages() -> None:
    views = [
        _view("Earlier today", due=datetime(2026, 3, 10, 16, 0)),
        _view("Yesterday", due=datetime(2026, 3, 9, 16, 0)),
        _view("Done", due=datetime(2026, 3, 10, 17, 0), status="completed"),
    ]
    now = LATE_EVENING

    today = task_views.query_tasks(
        views, TaskQuery(view="today"), page=1, size=10, now=now, tz=LOS_ANGELES
    )
    overdue = task_views.query_tasks(
        views, TaskQuery(view="overdue"), page=1, size=10, now=now, tz=LOS_ANGELES
    )
    completed = task_views.query_tasks(
        views, TaskQuery(view="completed"), page=1, size=10, now=now, tz=LOS_ANGELES
    )

    assert _titles(today.items) == ["Earlier today"]
    assert _titles(overdue.items) == ["Yesterday"]
    assert _titles(completed.items) == ["Done"]


def test_future_due_date_is_never_overdue() -> None:
    view = _view("Later", due=(LATE_EVENING + timedelta(hours=1)).replace(tzinfo=None))

    assert task_views.is_overdue(view, now=LATE_EVENING, tz=LOS_ANGELES) is False
    assert task_views.is_due_today(view, now=LATE_EVENING, tz=LOS_ANGELES) is False
    assert task_views.is_due_today(view, now=LATE_EVENING, tz=UTC) is True
