"""Structured error payload schema used by API responses."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class ErrorResponse(SQLModel):
    """Standard error envelope returned by every failing request."""

    detail: str | dict[str, object] | list[object] = Field(
        description="Human-readable message or validation error list.",
        examples=["This task is already shared with this user."],
    )
    request_id: str | None = Field(
        default=None,
        description="Request correlation identifier injected by middleware.",
    )
    code: str | None = Field(
        default=None,
        description="Machine-readable error code.",
        examples=["access_denied", "not_found", "already_shared"],
    )
    retryable: bool | None = Field(
        default=None,
        description="Whether the client may retry the same call later.",
    )
