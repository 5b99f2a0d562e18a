"""Public schema exports shared across API route modules."""

from taskdeck.schemas.common import OkResponse
from taskdeck.schemas.errors import ErrorResponse
from taskdeck.schemas.health import HealthStatusResponse
from taskdeck.schemas.notifications import MarkAllReadResponse, NotificationRead, UnreadCountRead
from taskdeck.schemas.profiles import ProfileRead, ProfileUpdate
from taskdeck.schemas.task_invitations import TaskInvitationCreate, TaskInvitationRead
from taskdeck.schemas.task_shares import (
    TaskShareCreate,
    TaskSharePermissionUpdate,
    TaskShareRead,
)
from taskdeck.schemas.tasks import (
    NextStatusRead,
    TaskCounters,
    TaskCreate,
    TaskStatusUpdate,
    TaskUpdate,
    TaskViewPage,
    TaskViewRead,
)

__all__ = [
    "ErrorResponse",
    "HealthStatusResponse",
    "MarkAllReadResponse",
    "NextStatusRead",
    "NotificationRead",
    "OkResponse",
    "ProfileRead",
    "ProfileUpdate",
    "TaskCounters",
    "TaskCreate",
    "TaskInvitationCreate",
    "TaskInvitationRead",
    "TaskShareCreate",
    "TaskSharePermissionUpdate",
    "TaskShareRead",
    "TaskStatusUpdate",
    "TaskUpdate",
    "TaskViewPage",
    "TaskViewRead",
]
