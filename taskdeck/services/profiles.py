"""Profile lookup and self-service updates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import col

from taskdeck.core.auth import normalize_email
from taskdeck.core.errors import NotFoundError
from taskdeck.core.logging import get_logger
from taskdeck.core.time import utcnow
from taskdeck.db import crud
from taskdeck.models.profiles import Profile

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.schemas.profiles import ProfileUpdate

logger = get_logger(__name__)


async def get_profile(session: AsyncSession, viewer_id: UUID) -> Profile:
    profile = await Profile.objects.by_id(viewer_id).first(session)
    if profile is None:
        raise NotFoundError("Profile not found.")
    return profile


async def find_profile_by_email(session: AsyncSession, email: str) -> Profile | None:
    """Resolve a sharing recipient by normalized email."""
    normalized = normalize_email(email)
    if normalized is None:
        return None
    return await Profile.objects.filter(col(Profile.email) == normalized).first(session)


async def update_profile(
    session: AsyncSession,
    viewer_id: UUID,
    payload: ProfileUpdate,
) -> Profile:
    """Apply the fields present in `payload` to the viewer's own profile."""
    profile = await get_profile(session, viewer_id)
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        return profile
    updates["updated_at"] = utcnow()
    profile = await crud.patch(session, profile, updates)
    logger.info(
        "profile.updated profile_id=%s fields=%s",
        profile.id,
        ",".join(sorted(k for k in updates if k != "updated_at")),
    )
    return profile
