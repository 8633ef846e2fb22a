"""Use cases for acknowledging notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.exceptions import NotificationForbiddenError, NotificationNotFoundError
from app.infrastructure.repositories import NotificationRepository


def mark_notification_read(session: Session, *, user_id: int, notification_id: str) -> bool:
    """Mark one of the caller's notifications as read.

    Returns ``True`` if the record changed and ``False`` if it was already
    read. Unknown ids raise :class:`NotificationNotFoundError`; records owned by
    someone else raise :class:`NotificationForbiddenError` and stay untouched.
    """

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(f"Notification {notification_id} not found")
    if notification.recipient_id != user_id:
        raise NotificationForbiddenError(
            f"Notification {notification_id} belongs to another member"
        )
    if notification.read:
        return False
    return repository.mark_as_read(notification_id)


def mark_all_notifications_read(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).mark_all_as_read(user_id)


__all__ = ["mark_all_notifications_read", "mark_notification_read"]
