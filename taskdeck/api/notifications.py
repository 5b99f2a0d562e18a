"""Notification feed endpoints for the signed-in user."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Query

from taskdeck.api.deps import PROFILE_DEP, SESSION_DEP
from taskdeck.db.pagination import paginate
from taskdeck.schemas.notifications import (
    MarkAllReadResponse,
    NotificationRead,
    UnreadCountRead,
)
from taskdeck.schemas.pagination import DefaultLimitOffsetPage
from taskdeck.schemas.task_invitations import TaskInvitationRead
from taskdeck.services import notifications as notification_service

if TYPE_CHECKING:
    from fastapi_pagination.limit_offset import LimitOffsetPage
    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.models.profiles import Profile

router = APIRouter(prefix="/notifications", tags=["notifications"])
LIMIT_QUERY = Query(default=None, ge=1, le=100)


@router.get("", response_model=list[NotificationRead])
async def list_notifications(
    limit: int | None = LIMIT_QUERY,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> list[NotificationRead]:
    """Most recent notifications, newest first."""
    rows = await notification_service.list_notifications(session, profile.id, limit)
    return [NotificationRead.model_validate(row, from_attributes=True) for row in rows]


@router.get("/history", response_model=DefaultLimitOffsetPage[NotificationRead])
async def list_notification_history(
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> LimitOffsetPage[NotificationRead]:
    """Full notification history with limit/offset paging."""
    statement = notification_service.notification_history_statement(profile.id)
    return await paginate(session, statement)


@router.get("/unread-count", response_model=UnreadCountRead)
async def get_unread_count(
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> UnreadCountRead:
    count = await notification_service.unread_count(session, profile.id)
    return UnreadCountRead(count=count)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> MarkAllReadResponse:
    updated = await notification_service.mark_all_read(session, profile.id)
    return MarkAllReadResponse(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(
    notification_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> NotificationRead:
    """Mark a notification read. Repeating the call is a no-op."""
    notification = await notification_service.mark_read(session, profile.id, notification_id)
    return NotificationRead.model_validate(notification, from_attributes=True)


@router.post("/{notification_id}/accept", response_model=TaskInvitationRead)
async def accept_from_notification(
    notification_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskInvitationRead:
    """Accept the task invitation referenced by a notification."""
    invitation = await notification_service.act_on_notification(
        session,
        profile.id,
        notification_id,
        accept=True,
    )
    return TaskInvitationRead.model_validate(invitation, from_attributes=True)


@router.post("/{notification_id}/reject", response_model=TaskInvitationRead)
async def reject_from_notification(
    notification_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskInvitationRead:
    """Reject the task invitation referenced by a notification."""
    invitation = await notification_service.act_on_notification(
        session,
        profile.id,
        notification_id,
        accept=False,
    )
    return TaskInvitationRead.model_validate(invitation, from_attributes=True)
