"""Invitation endpoints: invite by email, then accept or reject as the invitee."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, status

from taskdeck.api.deps import PROFILE_DEP, SESSION_DEP
from taskdeck.schemas.task_invitations import TaskInvitationCreate, TaskInvitationRead
from taskdeck.services import task_invitations

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.models.profiles import Profile

router = APIRouter(tags=["invitations"])


@router.post(
    "/tasks/{task_id}/invitations",
    response_model=TaskInvitationRead,
    status_code=status.HTTP_201_CREATED,
)
async def invite_to_task(
    task_id: UUID,
    payload: TaskInvitationCreate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskInvitationRead:
    """Invite a user to an owned task; they gain access once they accept."""
    invitation = await task_invitations.invite_to_task(
        session,
        profile.id,
        task_id,
        payload.email,
        payload.permission,
    )
    return TaskInvitationRead.model_validate(invitation, from_attributes=True)


@router.post("/invitations/{invitation_id}/accept", response_model=TaskInvitationRead)
async def accept_invitation(
    invitation_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskInvitationRead:
    invitation = await task_invitations.respond_to_invitation(
        session,
        profile.id,
        invitation_id,
        accept=True,
    )
    return TaskInvitationRead.model_validate(invitation, from_attributes=True)


@router.post("/invitations/{invitation_id}/reject", response_model=TaskInvitationRead)
async def reject_invitation(
    invitation_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskInvitationRead:
    invitation = await task_invitations.respond_to_invitation(
        session,
        profile.id,
        invitation_id,
        accept=False,
    )
    return TaskInvitationRead.model_validate(invitation, from_attributes=True)
