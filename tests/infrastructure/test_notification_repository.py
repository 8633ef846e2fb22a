"""Tests for the durable notification store."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from app.domain.entities import NotificationKind
from app.domain.exceptions import NotificationStoreError
from app.infrastructure.repositories import NotificationRepository


def _append(repository: NotificationRepository, recipient_id: int, title: str = "Title"):
    return repository.append(
        recipient_id=recipient_id,
        kind=NotificationKind.REMINDER,
        title=title,
        body=f"Body for {title}",
    )


def test_append_returns_unread_record_visible_in_listing(db_session, make_user) -> None:
    child = make_user("child@example.com")
    repository = NotificationRepository(db_session)

    saved = repository.append(
        recipient_id=child.id,
        kind=NotificationKind.TASK_ASSIGNED,
        title="New Task Assigned",
        body='Mom assigned you "Dishes"',
        related_entity_id="task-1",
    )

    assert saved.id
    assert saved.read is False
    assert saved.created_at is not None and saved.created_at.tzinfo is not None
    listed = repository.list_for_user(child.id)
    assert [item.id for item in listed] == [saved.id]
    assert listed[0].related_entity_id == "task-1"
    assert repository.count_unread(child.id) == 1


def test_list_is_newest_first_and_limited(db_session, make_user, tick_clock) -> None:
    child = make_user("child@example.com")
    repository = NotificationRepository(db_session)
    saved = [_append(repository, child.id, f"n{index}") for index in range(5)]

    listed = repository.list_for_user(child.id, limit=3)

    assert [item.id for item in listed] == [saved[4].id, saved[3].id, saved[2].id]


def test_list_is_scoped_to_recipient(db_session, make_user) -> None:
    child = make_user("child@example.com")
    sibling = make_user("sibling@example.com")
    repository = NotificationRepository(db_session)
    _append(repository, child.id)

    assert repository.list_for_user(sibling.id) == []
    assert repository.count_unread(sibling.id) == 0


def test_unread_filter_and_mark_as_read(db_session, make_user, tick_clock) -> None:
    child = make_user("child@example.com")
    repository = NotificationRepository(db_session)
    first = _append(repository, child.id, "first")
    second = _append(repository, child.id, "second")

    assert repository.mark_as_read(first.id) is True
    assert repository.mark_as_read(first.id) is False

    unread = repository.list_for_user(child.id, unread_only=True)
    assert [item.id for item in unread] == [second.id]
    assert repository.get(first.id).read is True
    assert repository.count_unread(child.id) == 1


def test_mark_all_as_read_only_touches_recipient(db_session, make_user) -> None:
    child = make_user("child@example.com")
    sibling = make_user("sibling@example.com")
    repository = NotificationRepository(db_session)
    for title in ("a", "b", "c"):
        _append(repository, child.id, title)
    _append(repository, sibling.id)

    assert repository.mark_all_as_read(child.id) == 3
    assert repository.mark_all_as_read(child.id) == 0
    assert repository.count_unread(child.id) == 0
    assert repository.count_unread(sibling.id) == 1


def test_get_unknown_id_returns_none(db_session) -> None:
    assert NotificationRepository(db_session).get("missing") is None


class FailingSession:
    """Session stand-in whose writes fail like a lost database."""

    def __init__(self) -> None:
        self.rolled_back = False

    def add(self, _model) -> None:
        pass

    def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    def execute(self, _statement):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    def refresh(self, _model) -> None:
        pass

    def rollback(self) -> None:
        self.rolled_back = True


def test_store_failures_surface_as_store_error() -> None:
    session = FailingSession()
    repository = NotificationRepository(session)

    with pytest.raises(NotificationStoreError) as excinfo:
        _append(repository, 1)
    assert excinfo.value.retryable is True
    assert session.rolled_back

    with pytest.raises(NotificationStoreError):
        repository.mark_all_as_read(1)
