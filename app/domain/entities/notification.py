"""Domain entity representing a household notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationKind(str, Enum):
    """Closed set of notification kinds; affects display only, never delivery."""

    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_DUE_SOON = "TASK_DUE_SOON"
    REWARD_REQUESTED = "REWARD_REQUESTED"
    REWARD_APPROVED = "REWARD_APPROVED"
    REWARD_DENIED = "REWARD_DENIED"
    REMINDER = "REMINDER"


@dataclass
class Notification:
    """Message addressed to a single recipient.

    Every field except ``read`` is fixed once the store assigns ``id`` and
    ``created_at``. ``related_entity_id`` is advisory: the referenced task or
    reward may no longer exist.
    """

    id: str | None
    recipient_id: int
    kind: NotificationKind
    title: str
    body: str
    related_entity_id: str | None = None
    read: bool = False
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationKind"]
