"""Tests for the client-side notification feed."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.entities import Notification, NotificationKind
from app.interfaces.client import NotificationFeed

BASE_TIME = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def _notification(notification_id: str, minutes: int = 0, read: bool = False) -> Notification:
    return Notification(
        id=notification_id,
        recipient_id=1,
        kind=NotificationKind.REMINDER,
        title="Task Reminder",
        body=notification_id,
        read=read,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


def test_merge_deduplicates_by_id_and_announces_once() -> None:
    announced = []
    feed = NotificationFeed(on_new=announced.append)

    assert feed.merge(_notification("a")) is True
    assert feed.merge(_notification("a")) is False

    assert len(feed) == 1
    assert [item.id for item in announced] == ["a"]


def test_merge_never_downgrades_read_state() -> None:
    feed = NotificationFeed()
    feed.merge(_notification("a", read=True))

    feed.merge(_notification("a", read=False))

    assert feed.get("a").read is True
    assert feed.unread_count == 0


def test_merge_upgrades_to_read() -> None:
    feed = NotificationFeed()
    feed.merge(_notification("a"))

    feed.merge(_notification("a", read=True))

    assert feed.get("a").read is True


def test_merge_many_announces_in_creation_order() -> None:
    announced = []
    feed = NotificationFeed(on_new=announced.append)

    added = feed.merge_many([_notification("late", 5), _notification("early", 1), _notification("seen", 3, read=True)])

    assert added == 3
    assert [item.id for item in announced] == ["early", "late"]
    assert [item.id for item in feed.items()] == ["late", "seen", "early"]


def test_silent_merge_is_never_announced_later() -> None:
    announced = []
    feed = NotificationFeed(on_new=announced.append)

    feed.merge(_notification("a"), announce=False)
    feed.merge(_notification("a"))

    assert announced == []


def test_callback_failure_does_not_break_merge() -> None:
    def _boom(_notification):
        raise RuntimeError("ui went away")

    feed = NotificationFeed(on_new=_boom)

    assert feed.merge(_notification("a")) is True
    assert "a" in feed


def test_mark_read_and_mark_all_read() -> None:
    feed = NotificationFeed()
    feed.merge_many([_notification("a"), _notification("b", 1), _notification("c", 2)])

    assert feed.mark_read("a") is True
    assert feed.mark_read("a") is False
    assert feed.mark_read("missing") is False
    assert feed.mark_all_read() == 2
    assert feed.unread_count == 0


def test_merge_requires_id() -> None:
    with pytest.raises(ValueError):
        NotificationFeed().merge(_notification(None))  # type: ignore[arg-type]
