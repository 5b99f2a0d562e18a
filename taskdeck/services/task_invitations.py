"""Consent-based sharing: invitations that become share rows once accepted."""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskdeck.core.errors import (
    AlreadySharedError,
    InvitationStateError,
    NotFoundError,
    StoreError,
)
from taskdeck.core.logging import get_logger
from taskdeck.core.time import utcnow
from taskdeck.db import crud
from taskdeck.models.notifications import (
    NOTIFICATION_INVITATION_ACCEPTED,
    NOTIFICATION_INVITATION_REJECTED,
    NOTIFICATION_TASK_INVITATION,
)
from taskdeck.models.profiles import Profile
from taskdeck.models.task_invitations import TaskInvitation
from taskdeck.models.tasks import Task
from taskdeck.services.notifications import create_notification
from taskdeck.services.task_access import require_task_owner
from taskdeck.services.task_sharing import create_share, is_shared_with, resolve_recipient

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

logger = get_logger(__name__)

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"


def _display_name(profile: Profile | None) -> str:
    if profile is None:
        return "Someone"
    return profile.full_name or profile.email or "Someone"


async def invite_to_task(
    session: AsyncSession,
    owner_id: UUID,
    task_id: UUID,
    recipient_email: str,
    permission: str = "view",
) -> TaskInvitation:
    """Invite a user to an owned task and notify them."""
    task = await require_task_owner(session, owner_id, task_id)
    recipient = await resolve_recipient(session, owner_id=owner_id, email=recipient_email)
    if await is_shared_with(session, task.id, recipient.id):
        raise AlreadySharedError()
    if await TaskInvitation.objects.filter_by(
        task_id=task.id,
        invited_user_id=recipient.id,
        status=PENDING,
    ).exists(session):
        raise AlreadySharedError("An invitation for this user is already pending.")

    inviter = await Profile.objects.by_id(owner_id).first(session)
    now = utcnow()
    invitation = TaskInvitation(
        task_id=task.id,
        invited_by_user_id=owner_id,
        invited_user_id=recipient.id,
        permission=permission,
        status=PENDING,
        created_at=now,
        updated_at=now,
    )
    await crud.save(session, invitation, commit=False)
    await create_notification(
        session,
        user_id=recipient.id,
        type=NOTIFICATION_TASK_INVITATION,
        title="Task invitation",
        message=f'{_display_name(inviter)} invited you to collaborate on "{task.title}".',
        data={
            "task_id": str(task.id),
            "invitation_id": str(invitation.id),
            "permission": permission,
        },
        commit=False,
    )
    await crud.commit_session(session)
    await session.refresh(invitation)
    logger.info(
        "invitation.created invitation_id=%s task_id=%s recipient_id=%s",
        invitation.id,
        task.id,
        recipient.id,
    )
    return invitation


async def _notify_inviter(
    session: AsyncSession,
    invitation: TaskInvitation,
    *,
    accepted: bool,
    task_title: str,
) -> None:
    responder = await Profile.objects.by_id(invitation.invited_user_id).first(session)
    verb = "accepted" if accepted else "declined"
    try:
        await create_notification(
            session,
            user_id=invitation.invited_by_user_id,
            type=NOTIFICATION_INVITATION_ACCEPTED if accepted else NOTIFICATION_INVITATION_REJECTED,
            title="Invitation Accepted" if accepted else "Invitation Declined",
            message=f'{_display_name(responder)} {verb} your invitation to "{task_title}".',
            data={"task_id": str(invitation.task_id), "invitation_id": str(invitation.id)},
        )
    except StoreError:
        logger.warning(
            "invitation.notify_inviter.failed invitation_id=%s",
            invitation.id,
            exc_info=True,
        )


async def respond_to_invitation(
    session: AsyncSession,
    actor_id: UUID,
    invitation_id: UUID,
    *,
    accept: bool,
) -> TaskInvitation:
    """Accept or reject a pending invitation addressed to `actor_id`.

    Accepting creates the share row in the same transaction as the status
    change; if a share already exists it is kept as is.
    """
    invitation = await TaskInvitation.objects.by_id(invitation_id).first(session)
    if invitation is None or invitation.invited_user_id != actor_id:
        raise NotFoundError("Invitation not found.")
    if invitation.status != PENDING:
        raise InvitationStateError()
    task = await Task.objects.by_id(invitation.task_id).first(session)
    if task is None:
        raise NotFoundError("Task not found.")

    if accept and not await is_shared_with(session, task.id, actor_id):
        await create_share(
            session,
            task=task,
            recipient_id=actor_id,
            permission=invitation.permission,
            commit=False,
        )
    now = utcnow()
    invitation = await crud.patch(
        session,
        invitation,
        {
            "status": ACCEPTED if accept else REJECTED,
            "updated_at": now,
            "responded_at": now,
        },
    )
    logger.info(
        "invitation.responded invitation_id=%s status=%s",
        invitation.id,
        invitation.status,
    )
    await _notify_inviter(session, invitation, accepted=accept, task_title=task.title)
    return invitation
