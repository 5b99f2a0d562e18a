"""Profile API schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator
from sqlmodel import SQLModel
from sqlmodel._compat import SQLModelConfig

from taskdeck.core.time import is_valid_timezone

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class ProfileRead(SQLModel):
    """Profile payload returned to the signed-in user."""

    id: UUID
    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    timezone: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(SQLModel):
    """Partial profile update; identity fields are managed by the auth provider."""

    model_config = SQLModelConfig(extra="forbid")

    full_name: str | None = Field(default=None, max_length=200)
    avatar_url: str | None = Field(default=None, max_length=2048)
    timezone: str | None = Field(
        default=None,
        description="IANA timezone used for today/overdue classification.",
        examples=["Europe/Berlin"],
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone {value!r}.")
        return value

