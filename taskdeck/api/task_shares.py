"""Direct sharing endpoints for task owners."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, status

from taskdeck.api.deps import PROFILE_DEP, SESSION_DEP
from taskdeck.core.auth import normalize_email
from taskdeck.schemas.common import OkResponse
from taskdeck.schemas.errors import ErrorResponse
from taskdeck.schemas.task_shares import TaskShareCreate, TaskSharePermissionUpdate, TaskShareRead
from taskdeck.services import task_sharing

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.models.profiles import Profile
    from taskdeck.models.task_shares import TaskShare

router = APIRouter(tags=["shares"])

SHARE_ERRORS: dict[int | str, dict[str, object]] = {
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse, "description": "Caller is not the owner."},
    status.HTTP_404_NOT_FOUND: {
        "model": ErrorResponse,
        "description": "Task, share or recipient not found.",
    },
    status.HTTP_409_CONFLICT: {
        "model": ErrorResponse,
        "description": "The task is already shared with this user.",
    },
}


def _share_read(
    share: TaskShare,
    *,
    email: str | None = None,
    name: str | None = None,
) -> TaskShareRead:
    return TaskShareRead.model_validate(
        {
            **share.model_dump(),
            "recipient_email": email,
            "recipient_name": name,
        },
    )


@router.get("/tasks/{task_id}/shares", response_model=list[TaskShareRead], responses=SHARE_ERRORS)
async def list_task_shares(
    task_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> list[TaskShareRead]:
    """List who a task is shared with. Owner only."""
    rows = await task_sharing.list_task_shares(session, profile.id, task_id)
    return [
        _share_read(
            row.share,
            email=row.recipient.email if row.recipient else None,
            name=row.recipient.full_name if row.recipient else None,
        )
        for row in rows
    ]


@router.post(
    "/tasks/{task_id}/shares",
    response_model=TaskShareRead,
    status_code=status.HTTP_201_CREATED,
    responses=SHARE_ERRORS,
)
async def share_task(
    task_id: UUID,
    payload: TaskShareCreate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskShareRead:
    """Share an owned task with a registered user by email."""
    share = await task_sharing.share_task(
        session,
        profile.id,
        task_id,
        payload.email,
        payload.permission,
    )
    return _share_read(share, email=normalize_email(payload.email))


@router.patch("/shares/{share_id}", response_model=TaskShareRead, responses=SHARE_ERRORS)
async def update_share_permission(
    share_id: UUID,
    payload: TaskSharePermissionUpdate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> TaskShareRead:
    share = await task_sharing.update_share_permission(
        session,
        profile.id,
        share_id,
        payload.permission,
    )
    return _share_read(share)


@router.delete("/shares/{share_id}", response_model=OkResponse, responses=SHARE_ERRORS)
async def revoke_share(
    share_id: UUID,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> OkResponse:
    """Revoke a share. Owner of the underlying task only."""
    await task_sharing.revoke_share(session, profile.id, share_id)
    return OkResponse()
