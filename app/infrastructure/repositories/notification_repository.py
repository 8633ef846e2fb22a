"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationKind
from app.domain.exceptions import NotificationStoreError
from app.infrastructure.models import NotificationModel
from app.utils import ensure_app_timezone, now_in_app_naive_datetime

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Append-only store of :class:`Notification` records.

    Every failure reported by SQLAlchemy rolls the session back and surfaces as
    :class:`NotificationStoreError`, so callers never observe a partially
    written record.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(
        self,
        *,
        recipient_id: int,
        kind: NotificationKind | str,
        title: str,
        body: str,
        related_entity_id: str | None = None,
    ) -> Notification:
        model = NotificationModel(
            recipient_id=recipient_id,
            kind=NotificationKind(kind).value,
            title=title,
            body=body,
            related_entity_id=related_entity_id,
            read=False,
            created_at=now_in_app_naive_datetime(),
        )
        with self._store_operation("append"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def get(self, notification_id: str) -> Notification | None:
        with self._store_operation("get"):
            model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        recipient_id: int,
        *,
        unread_only: bool = False,
        limit: int | None = 20,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        with self._store_operation("list"):
            models = query.all()
        return [self._to_entity(model) for model in models]

    def count_unread(self, recipient_id: int) -> int:
        with self._store_operation("count"):
            total = (
                self.session.query(func.count(NotificationModel.id))
                .filter(NotificationModel.recipient_id == recipient_id)
                .filter(NotificationModel.read.is_(False))
                .scalar()
            )
        return int(total or 0)

    def mark_as_read(self, notification_id: str) -> bool:
        """Flag one record as read; returns ``False`` if it already was."""

        statement = (
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .where(NotificationModel.read.is_(False))
            .values(read=True)
        )
        with self._store_operation("mark_as_read"):
            result = self.session.execute(statement)
            self.session.commit()
        return bool(result.rowcount)

    def mark_all_as_read(self, recipient_id: int) -> int:
        statement = (
            update(NotificationModel)
            .where(NotificationModel.recipient_id == recipient_id)
            .where(NotificationModel.read.is_(False))
            .values(read=True)
        )
        with self._store_operation("mark_all_as_read"):
            result = self.session.execute(statement)
            self.session.commit()
        return int(result.rowcount or 0)

    @contextmanager
    def _store_operation(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Notification store %s failed: %s", operation, exc)
            raise NotificationStoreError(
                f"Notification store unavailable during {operation}"
            ) from exc

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            kind=NotificationKind(model.kind),
            title=model.title,
            body=model.body,
            related_entity_id=model.related_entity_id,
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
