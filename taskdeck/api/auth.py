"""Authentication bootstrap endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status

from taskdeck.api.deps import AUTH_DEP
from taskdeck.core.auth import AuthContext
from taskdeck.schemas.errors import ErrorResponse
from taskdeck.schemas.profiles import ProfileRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/bootstrap",
    response_model=ProfileRead,
    summary="Bootstrap Authenticated Profile",
    description=(
        "Resolve the caller from the Authorization header, creating or syncing "
        "their profile, and return it. This endpoint does not accept a request body."
    ),
    responses={
        status.HTTP_401_UNAUTHORIZED: {
            "model": ErrorResponse,
            "description": "Caller is not authenticated.",
        },
    },
)
async def bootstrap_profile(auth: AuthContext = AUTH_DEP) -> ProfileRead:
    """Return the authenticated profile."""
    return ProfileRead.model_validate(auth.profile, from_attributes=True)
