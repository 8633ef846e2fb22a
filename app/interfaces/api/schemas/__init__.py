from .auth import Token
from .notification import (
    NotificationCreate,
    NotificationList,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    UnreadCount,
)

__all__ = [
    "NotificationCreate",
    "NotificationList",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "Token",
    "UnreadCount",
]
