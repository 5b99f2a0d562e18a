"""Profile model for signed-in users and sharing recipients."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from taskdeck.core.time import utcnow
from taskdeck.models.base import QueryModel

RUNTIME_ANNOTATION_TYPES = (datetime,)


class Profile(QueryModel, table=True):
    """User profile keyed by a stable id and linked to the identity provider."""

    __tablename__ = "profiles"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    clerk_user_id: str = Field(index=True, unique=True)
    email: str | None = Field(default=None, index=True, unique=True)
    full_name: str | None = None
    avatar_url: str | None = None
    timezone: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
