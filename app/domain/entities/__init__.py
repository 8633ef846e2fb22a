"""Domain entities exposed by the application."""

from .notification import Notification, NotificationKind
from .user import ROLE_CHILD, ROLE_PARENT, User

__all__ = [
    "Notification",
    "NotificationKind",
    "ROLE_CHILD",
    "ROLE_PARENT",
    "User",
]
