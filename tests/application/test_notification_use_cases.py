"""Tests for raising, reading and acknowledging notifications."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    get_unread_count,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    notify,
    notify_parents_of_reward_request,
    notify_reminder,
    notify_task_assigned,
    notify_task_completed,
    resolve_limit,
)
from app.domain.entities import NotificationKind
from app.domain.exceptions import (
    NotificationForbiddenError,
    NotificationNotFoundError,
    NotificationStoreError,
)


class RecordingDispatcher:
    def __init__(self) -> None:
        self.dispatched = []

    def dispatch(self, notification) -> None:
        self.dispatched.append(notification)


def test_notify_persists_then_dispatches(db_session, make_user) -> None:
    child = make_user("child@example.com")
    dispatcher = RecordingDispatcher()

    saved = notify(
        db_session,
        dispatcher,
        recipient_id=child.id,
        kind=NotificationKind.REWARD_APPROVED,
        title="Reward Approved!",
        body='Dad approved your reward: "Ice cream"',
    )

    assert [item.id for item in dispatcher.dispatched] == [saved.id]
    assert [item.id for item in list_notifications(db_session, child.id)] == [saved.id]


def test_notify_without_dispatcher_still_persists(db_session, make_user) -> None:
    child = make_user("child@example.com")

    notify(
        db_session,
        None,
        recipient_id=child.id,
        kind="REMINDER",
        title="Task Reminder",
        body="Feed the cat",
    )

    assert get_unread_count(db_session, child.id) == 1


def test_notify_store_failure_propagates_and_skips_dispatch(db_session, monkeypatch) -> None:
    from app.infrastructure.repositories import NotificationRepository

    def _fail(self, **_fields):
        raise NotificationStoreError("store down")

    monkeypatch.setattr(NotificationRepository, "append", _fail)
    dispatcher = RecordingDispatcher()

    with pytest.raises(NotificationStoreError):
        notify(
            db_session,
            dispatcher,
            recipient_id=1,
            kind=NotificationKind.REMINDER,
            title="t",
            body="b",
        )
    assert dispatcher.dispatched == []


def test_domain_helpers_swallow_store_failures(db_session, monkeypatch) -> None:
    from app.infrastructure.repositories import NotificationRepository

    def _fail(self, **_fields):
        raise NotificationStoreError("store down")

    monkeypatch.setattr(NotificationRepository, "append", _fail)

    result = notify_reminder(
        db_session, None, recipient_id=1, task_title="Dishes", task_id="task-1"
    )

    assert result is None


def test_domain_helpers_build_messages(db_session, make_user) -> None:
    parent = make_user("parent@example.com", role="parent")
    child = make_user("child@example.com")

    assigned = notify_task_assigned(
        db_session,
        None,
        assignee_id=child.id,
        task_title="Dishes",
        task_id="task-1",
        assigner_name="Mom",
    )
    completed = notify_task_completed(
        db_session,
        None,
        parent_id=parent.id,
        child_name="Sam",
        task_title="Dishes",
        task_id="task-1",
        points_earned=10,
    )

    assert assigned.kind is NotificationKind.TASK_ASSIGNED
    assert assigned.body == 'Mom assigned you "Dishes"'
    assert assigned.related_entity_id == "task-1"
    assert completed.recipient_id == parent.id
    assert completed.body == 'Sam completed "Dishes" and earned 10 points!'


def test_reward_request_reaches_every_parent_in_family(db_session, make_user) -> None:
    mom = make_user("mom@example.com", role="parent", family_id=1)
    dad = make_user("dad@example.com", role="parent", family_id=1)
    make_user("other-parent@example.com", role="parent", family_id=2)
    make_user("child@example.com", family_id=1)

    created = notify_parents_of_reward_request(
        db_session, None, family_id=1, child_name="Sam", reward_title="Movie night", points=50
    )

    assert sorted(item.recipient_id for item in created) == sorted([mom.id, dad.id])
    assert all(item.kind is NotificationKind.REWARD_REQUESTED for item in created)


def test_mark_read_rejects_other_members_notification(db_session, make_user) -> None:
    owner = make_user("owner@example.com")
    intruder = make_user("intruder@example.com")
    saved = notify(
        db_session, None, recipient_id=owner.id, kind="REMINDER", title="t", body="b"
    )

    with pytest.raises(NotificationForbiddenError):
        mark_notification_read(db_session, user_id=intruder.id, notification_id=saved.id)

    assert get_unread_count(db_session, owner.id) == 1


def test_mark_read_unknown_id(db_session, make_user) -> None:
    owner = make_user("owner@example.com")

    with pytest.raises(NotificationNotFoundError):
        mark_notification_read(db_session, user_id=owner.id, notification_id="missing")


def test_mark_read_is_idempotent(db_session, make_user) -> None:
    owner = make_user("owner@example.com")
    saved = notify(
        db_session, None, recipient_id=owner.id, kind="REMINDER", title="t", body="b"
    )

    assert mark_notification_read(db_session, user_id=owner.id, notification_id=saved.id) is True
    assert mark_notification_read(db_session, user_id=owner.id, notification_id=saved.id) is False
    assert get_unread_count(db_session, owner.id) == 0


def test_mark_all_read(db_session, make_user) -> None:
    owner = make_user("owner@example.com")
    for _ in range(3):
        notify(db_session, None, recipient_id=owner.id, kind="REMINDER", title="t", body="b")

    assert mark_all_notifications_read(db_session, user_id=owner.id) == 3
    assert list_notifications(db_session, owner.id, unread_only=True) == []


def test_resolve_limit_applies_default_and_cap() -> None:
    assert resolve_limit(None) == 20
    assert resolve_limit(5) == 5
    assert resolve_limit(1000) == 100
    with pytest.raises(ValueError):
        resolve_limit(0)


def test_reward_request_survives_parent_lookup_failure(db_session, monkeypatch) -> None:
    from sqlalchemy.exc import OperationalError

    from app.infrastructure.repositories import UserRepository

    def _fail(self, family_id):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(UserRepository, "list_parents", _fail)
    dispatcher = RecordingDispatcher()

    created = notify_parents_of_reward_request(
        db_session, dispatcher, family_id=1, child_name="Sam", reward_title="Movie night", points=50
    )

    assert created == []
    assert dispatcher.dispatched == []
