"""Public helpers for creating, reading and acknowledging notifications."""

from .create_notification import notify
from .events import (
    notify_parents_of_reward_request,
    notify_reminder,
    notify_reward_approved,
    notify_reward_denied,
    notify_reward_requested,
    notify_task_assigned,
    notify_task_completed,
    notify_task_due_soon,
)
from .list_notifications import get_unread_count, list_notifications, resolve_limit
from .mark_read import mark_all_notifications_read, mark_notification_read

__all__ = [
    "get_unread_count",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify",
    "notify_parents_of_reward_request",
    "notify_reminder",
    "notify_reward_approved",
    "notify_reward_denied",
    "notify_reward_requested",
    "notify_task_assigned",
    "notify_task_completed",
    "notify_task_due_soon",
    "resolve_limit",
]
