"""Shared FastAPI dependencies for the task API.

Routers resolve the signed-in profile once through `AUTH_DEP` and pass its id
explicitly into the service layer; no service reads identity from ambient state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends

from taskdeck.core.auth import AuthContext, get_auth_context
from taskdeck.core.config import settings
from taskdeck.core.time import resolve_timezone
from taskdeck.db.session import get_session

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from taskdeck.models.profiles import Profile

AUTH_DEP = Depends(get_auth_context)
SESSION_DEP = Depends(get_session)


def viewer_timezone(profile: Profile) -> ZoneInfo:
    """Timezone used for the viewer's "today", falling back to the server default."""
    return resolve_timezone(profile.timezone, default=settings.default_timezone)


def require_profile(auth: AuthContext = AUTH_DEP) -> Profile:
    return auth.profile


PROFILE_DEP = Depends(require_profile)
