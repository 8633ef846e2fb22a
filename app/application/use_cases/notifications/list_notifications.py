"""Catch-up and polling reads of a recipient's notification feed."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import Notification
from app.infrastructure.repositories import NotificationRepository


def resolve_limit(limit: int | None) -> int:
    """Apply the configured default and upper bound to ``limit``."""

    settings = get_settings()
    if limit is None:
        return settings.notification_default_limit
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    return min(limit, settings.notification_max_limit)


def list_notifications(
    session: Session,
    recipient_id: int,
    *,
    unread_only: bool = False,
    limit: int | None = None,
) -> Sequence[Notification]:
    """Return the newest notifications first."""

    return NotificationRepository(session).list_for_user(
        recipient_id,
        unread_only=unread_only,
        limit=resolve_limit(limit),
    )


def get_unread_count(session: Session, recipient_id: int) -> int:
    return NotificationRepository(session).count_unread(recipient_id)


__all__ = ["get_unread_count", "list_notifications", "resolve_limit"]
