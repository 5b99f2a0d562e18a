"""Per-user notification feed: create, list, mark read and act on invitations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from taskdeck.core.config import settings
from taskdeck.core.errors import NotFoundError, NotificationNotActionableError
from taskdeck.core.logging import get_logger
from taskdeck.core.time import utcnow
from taskdeck.db import crud
from taskdeck.models.notifications import NOTIFICATION_TASK_INVITATION, Notification

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession
    from sqlmodel.sql.expression import SelectOfScalar

    from taskdeck.models.task_invitations import TaskInvitation

logger = get_logger(__name__)


async def create_notification(
    session: AsyncSession,
    *,
    user_id: UUID,
    type: str,
    title: str,
    message: str = "",
    data: dict[str, Any] | None = None,
    commit: bool = True,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data,
        created_at=utcnow(),
    )
    notification = await crud.save(session, notification, commit=commit)
    logger.info(
        "notification.created notification_id=%s user_id=%s type=%s",
        notification.id,
        user_id,
        type,
    )
    return notification


def notification_history_statement(user_id: UUID) -> SelectOfScalar[Notification]:
    """All of a user's notifications, newest first, for paginated reads."""
    return (
        select(Notification)
        .where(col(Notification.user_id) == user_id)
        .order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
    )


async def list_notifications(
    session: AsyncSession,
    user_id: UUID,
    limit: int | None = None,
) -> list[Notification]:
    """Most recent notifications, capped at the configured feed size."""
    cap = settings.notifications_page_size
    limit = cap if limit is None else max(1, min(limit, cap))
    return list(await session.exec(notification_history_statement(user_id).limit(limit)))


async def get_notification(
    session: AsyncSession,
    user_id: UUID,
    notification_id: UUID,
) -> Notification:
    notification = await Notification.objects.by_id(notification_id).first(session)
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found.")
    return notification


async def mark_read(session: AsyncSession, user_id: UUID, notification_id: UUID) -> Notification:
    """Mark one notification read. Already-read notifications are returned untouched."""
    notification = await get_notification(session, user_id, notification_id)
    if notification.read:
        return notification
    return await crud.patch(session, notification, {"read": True})


async def mark_all_read(session: AsyncSession, user_id: UUID) -> int:
    """Mark every unread notification read; returns how many changed."""
    updated = await crud.update_where(
        session,
        Notification,
        col(Notification.user_id) == user_id,
        col(Notification.read).is_(False),
        values={"read": True},
    )
    logger.info("notification.read_all user_id=%s count=%s", user_id, updated)
    return updated


async def unread_count(session: AsyncSession, user_id: UUID) -> int:
    statement = (
        select(func.count())
        .select_from(Notification)
        .where(col(Notification.user_id) == user_id)
        .where(col(Notification.read).is_(False))
    )
    return int((await session.exec(statement)).one())


def _invitation_id(notification: Notification) -> UUID:
    if notification.type != NOTIFICATION_TASK_INVITATION:
        raise NotificationNotActionableError()
    raw = (notification.data or {}).get("invitation_id")
    try:
        return UUID(str(raw))
    except ValueError as exc:
        raise NotificationNotActionableError(
            "Notification does not reference an invitation.",
        ) from exc


async def act_on_notification(
    session: AsyncSession,
    user_id: UUID,
    notification_id: UUID,
    *,
    accept: bool,
) -> TaskInvitation:
    """Accept or reject the invitation behind a `task_invitation` notification."""
    from taskdeck.services.task_invitations import respond_to_invitation

    notification = await get_notification(session, user_id, notification_id)
    invitation_id = _invitation_id(notification)
    invitation = await respond_to_invitation(session, user_id, invitation_id, accept=accept)
    if not notification.read:
        await crud.patch(session, notification, {"read": True})
    return invitation
