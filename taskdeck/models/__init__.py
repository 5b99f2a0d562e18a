"""Model exports for SQLAlchemy/SQLModel metadata discovery."""

from taskdeck.models.notifications import Notification
from taskdeck.models.profiles import Profile
from taskdeck.models.task_invitations import TaskInvitation
from taskdeck.models.task_shares import TaskShare
from taskdeck.models.tasks import Task

__all__ = [
    "Notification",
    "Profile",
    "Task",
    "TaskInvitation",
    "TaskShare",
]
