"""Client-side notification state merged from pushes and catch-up fetches."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from app.domain.entities import Notification

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class NotificationFeed:
    """Local copy of a member's notifications, keyed on ``id``.

    Merging is idempotent: the same record arriving through the stream and a
    catch-up fetch produces one entry, and ``on_new`` fires at most once per id.
    """

    def __init__(self, on_new: Callable[[Notification], None] | None = None) -> None:
        self._items: dict[str, Notification] = {}
        self._announced: set[str] = set()
        self._on_new = on_new

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def get(self, notification_id: str) -> Notification | None:
        return self._items.get(notification_id)

    def items(self) -> list[Notification]:
        """Return entries newest first."""

        return sorted(
            self._items.values(),
            key=lambda item: item.created_at or _EPOCH,
            reverse=True,
        )

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items.values() if not item.read)

    def merge(self, notification: Notification, *, announce: bool = True) -> bool:
        """Add ``notification``; returns ``True`` only if its id was unseen."""

        if notification.id is None:
            raise ValueError("Cannot merge a notification without an id")

        existing = self._items.get(notification.id)
        if existing is not None:
            if notification.read and not existing.read:
                existing.read = True
            return False

        self._items[notification.id] = notification
        if announce and not notification.read:
            self._announce(notification)
        return True

    def merge_many(self, notifications: Iterable[Notification], *, announce: bool = True) -> int:
        # Oldest first so announcements follow creation order.
        ordered = sorted(notifications, key=lambda item: item.created_at or _EPOCH)
        return sum(1 for item in ordered if self.merge(item, announce=announce))

    def mark_read(self, notification_id: str) -> bool:
        item = self._items.get(notification_id)
        if item is None or item.read:
            return False
        item.read = True
        return True

    def mark_all_read(self) -> int:
        changed = 0
        for item in self._items.values():
            if not item.read:
                item.read = True
                changed += 1
        return changed

    def _announce(self, notification: Notification) -> None:
        if notification.id in self._announced:
            return
        self._announced.add(notification.id)
        if self._on_new is None:
            return
        try:
            self._on_new(notification)
        except Exception:
            logger.exception("Notification callback failed for %s", notification.id)


__all__ = ["NotificationFeed"]
