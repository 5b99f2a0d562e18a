"""Self-service profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from taskdeck.api.deps import PROFILE_DEP, SESSION_DEP
from taskdeck.schemas.profiles import ProfileRead, ProfileUpdate
from taskdeck.services import profiles as profile_service

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from taskdeck.models.profiles import Profile

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileRead)
async def get_my_profile(profile: Profile = PROFILE_DEP) -> ProfileRead:
    return ProfileRead.model_validate(profile, from_attributes=True)


@router.patch("/me", response_model=ProfileRead)
async def update_my_profile(
    payload: ProfileUpdate,
    profile: Profile = PROFILE_DEP,
    session: AsyncSession = SESSION_DEP,
) -> ProfileRead:
    """Update display name, avatar or timezone of the signed-in user."""
    updated = await profile_service.update_profile(session, profile.id, payload)
    return ProfileRead.model_validate(updated, from_attributes=True)
