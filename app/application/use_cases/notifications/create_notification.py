"""Entry point used by domain logic to raise a notification."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationKind
from app.infrastructure.notifications import NotificationDispatcher
from app.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def notify(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    recipient_id: int,
    kind: NotificationKind | str,
    title: str,
    body: str,
    related_entity_id: str | None = None,
) -> Notification:
    """Persist a notification, then hand it to the live dispatcher.

    Raises :class:`~app.domain.exceptions.NotificationStoreError` when the
    append fails; in that case nothing is pushed. A failed or missing live
    connection never affects the result.
    """

    saved = NotificationRepository(session).append(
        recipient_id=recipient_id,
        kind=kind,
        title=title,
        body=body,
        related_entity_id=related_entity_id,
    )
    logger.info(
        "Notification %s (%s) stored for recipient %s",
        saved.id,
        saved.kind.value,
        recipient_id,
    )
    if dispatcher is not None:
        dispatcher.dispatch(saved)
    return saved


__all__ = ["notify"]
