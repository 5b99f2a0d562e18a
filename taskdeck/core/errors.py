"""Domain errors raised by the task access, sharing and notification services.

Each error carries the HTTP status and machine-readable code used when it
reaches the API boundary (see `taskdeck.core.error_handling`).
"""

from __future__ import annotations

from fastapi import status


class TaskdeckError(Exception):
    """Base class for expected, user-visible failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Request failed."
    retryable: bool = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AccessDeniedError(TaskdeckError):
    """The actor lacks the capability required for the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "access_denied"
    default_message = "You do not have permission to modify this task."


class NotFoundError(TaskdeckError):
    """The referenced row is absent or not visible to the actor."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found."


class UserNotFoundError(NotFoundError):
    """A sharing recipient could not be resolved to a profile."""

    code = "user_not_found"
    default_message = (
        "User not found. Please ensure the email address is correct and the user has signed up."
    )


class AlreadySharedError(TaskdeckError):
    status_code = status.HTTP_409_CONFLICT
    code = "already_shared"
    default_message = "This task is already shared with this user."


class SelfShareRejectedError(TaskdeckError):
    status_code = 422
    code = "self_share_rejected"
    default_message = "You cannot share a task with yourself."


class InvitationStateError(TaskdeckError):
    status_code = status.HTTP_409_CONFLICT
    code = "invitation_not_pending"
    default_message = "This invitation has already been answered."


class StoreError(TaskdeckError):
    """Any failure talking to the underlying data store."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_error"
    default_message = "The data store could not complete the request."
    retryable = True


class TaskIntegrityError(TaskdeckError):
    """Stored rows violate an ownership/sharing invariant."""

    code = "data_integrity_error"
    default_message = "Task data is inconsistent."


class NotificationNotActionableError(TaskdeckError):
    status_code = 422
    code = "notification_not_actionable"
    default_message = "This notification has no accept/reject action."
