"""Direct task sharing: grant, list, re-permission and revoke share rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from taskdeck.core.errors import (
    AccessDeniedError,
    AlreadySharedError,
    NotFoundError,
    SelfShareRejectedError,
    UserNotFoundError,
)
from taskdeck.core.logging import get_logger
from taskdeck.core.time import utcnow
from taskdeck.db import crud
from taskdeck.models.profiles import Profile
from taskdeck.models.task_shares import TaskShare
from taskdeck.models.tasks import Task
from taskdeck.services.profiles import find_profile_by_email
from taskdeck.services.task_access import require_task_owner

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class ShareWithRecipient:
    """Share row paired with the recipient profile for display."""

    share: TaskShare
    recipient: Profile | None


async def resolve_recipient(
    session: AsyncSession,
    *,
    owner_id: UUID,
    email: str,
) -> Profile:
    """Resolve a recipient email to a profile other than the owner."""
    recipient = await find_profile_by_email(session, email)
    if recipient is None:
        raise UserNotFoundError()
    if recipient.id == owner_id:
        raise SelfShareRejectedError()
    return recipient


async def is_shared_with(session: AsyncSession, task_id: UUID, recipient_id: UUID) -> bool:
    return await TaskShare.objects.filter_by(
        task_id=task_id,
        shared_with_user_id=recipient_id,
    ).exists(session)


async def create_share(
    session: AsyncSession,
    *,
    task: Task,
    recipient_id: UUID,
    permission: str,
    commit: bool = True,
) -> TaskShare:
    """Insert a share row for an already-authorized owner and resolved recipient."""
    now = utcnow()
    share = TaskShare(
        task_id=task.id,
        shared_by_user_id=task.owner_id,
        shared_with_user_id=recipient_id,
        permission=permission,
        created_at=now,
        updated_at=now,
    )
    try:
        share = await crud.save(session, share, commit=commit)
    except IntegrityError as exc:
        # Lost a race with a concurrent share of the same pair.
        await session.rollback()
        raise AlreadySharedError() from exc
    logger.info(
        "share.created share_id=%s task_id=%s recipient_id=%s permission=%s",
        share.id,
        task.id,
        recipient_id,
        permission,
    )
    return share


async def share_task(
    session: AsyncSession,
    owner_id: UUID,
    task_id: UUID,
    recipient_email: str,
    permission: str = "view",
) -> TaskShare:
    """Grant `permission` on an owned task to the user registered under `recipient_email`."""
    task = await require_task_owner(session, owner_id, task_id)
    recipient = await resolve_recipient(session, owner_id=owner_id, email=recipient_email)
    if await is_shared_with(session, task.id, recipient.id):
        raise AlreadySharedError()
    return await create_share(
        session,
        task=task,
        recipient_id=recipient.id,
        permission=permission,
    )


async def _owned_share(session: AsyncSession, actor_id: UUID, share_id: UUID) -> TaskShare:
    row = (
        await session.exec(
            select(TaskShare, Task)
            .join(Task, col(Task.id) == col(TaskShare.task_id))
            .where(col(TaskShare.id) == share_id),
        )
    ).first()
    if row is None:
        raise NotFoundError("Share not found.")
    share, task = row
    if task.owner_id != actor_id:
        logger.warning(
            "share.manage.denied actor_id=%s share_id=%s task_id=%s",
            actor_id,
            share_id,
            task.id,
        )
        if share.shared_with_user_id == actor_id:
            raise AccessDeniedError("Only the task owner can manage sharing.")
        raise NotFoundError("Share not found.")
    return share


async def revoke_share(session: AsyncSession, actor_id: UUID, share_id: UUID) -> None:
    """Delete a share; only the owner of the underlying task may do so."""
    share = await _owned_share(session, actor_id, share_id)
    await crud.delete(session, share)
    logger.info("share.revoked share_id=%s task_id=%s", share_id, share.task_id)


async def update_share_permission(
    session: AsyncSession,
    actor_id: UUID,
    share_id: UUID,
    permission: str,
) -> TaskShare:
    """Switch an existing share between view and edit."""
    share = await _owned_share(session, actor_id, share_id)
    if share.permission == permission:
        return share
    share = await crud.patch(session, share, {"permission": permission, "updated_at": utcnow()})
    logger.info("share.permission_changed share_id=%s permission=%s", share_id, permission)
    return share


async def list_task_shares(
    session: AsyncSession,
    owner_id: UUID,
    task_id: UUID,
) -> list[ShareWithRecipient]:
    """Shares of an owned task, oldest first, with recipient profiles."""
    await require_task_owner(session, owner_id, task_id)
    shares = (
        await TaskShare.objects.filter_by(task_id=task_id)
        .order_by(col(TaskShare.created_at).asc())
        .all(session)
    )
    if not shares:
        return []
    recipients = await Profile.objects.by_ids(s.shared_with_user_id for s in shares).all(session)
    by_id = {profile.id: profile for profile in recipients}
    return [ShareWithRecipient(share=s, recipient=by_id.get(s.shared_with_user_id)) for s in shares]
