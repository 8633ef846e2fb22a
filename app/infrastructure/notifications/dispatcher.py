"""Push freshly stored notifications to their recipient's live stream."""

from __future__ import annotations

import asyncio
import logging

from anyio import from_thread

from app.domain.entities import Notification
from app.domain.exceptions import ConnectionClosedError

from .events import notification_frame
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Best-effort, at-most-once delivery over the live channel.

    A missing or dead connection is an expected state: the record is already
    durable and the client recovers it with its catch-up fetch.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry
        self._pending: set[asyncio.Task[bool]] = set()

    async def push(self, notification: Notification) -> bool:
        """Write ``notification`` to the recipient's connection if one is live."""

        recipient_id = notification.recipient_id
        handle = self._registry.lookup(recipient_id)
        if handle is None:
            logger.debug(
                "No live connection for recipient %s; %s waits for catch-up",
                recipient_id,
                notification.id,
            )
            return False

        try:
            handle.send(notification_frame(notification))
        except ConnectionClosedError as exc:
            logger.info(
                "Dropping dead connection %s for recipient %s: %s",
                handle.connection_id,
                recipient_id,
                exc,
            )
            self._registry.unregister(recipient_id, handle)
            return False

        logger.debug("Pushed notification %s to recipient %s", notification.id, recipient_id)
        return True

    def dispatch(self, notification: Notification) -> None:
        """Schedule :meth:`push` from synchronous code."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self.push, notification)
            except RuntimeError:
                logger.debug(
                    "No event loop reachable; live push skipped for notification %s",
                    notification.id,
                )
        else:
            task = loop.create_task(self.push(notification))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)


__all__ = ["NotificationDispatcher"]
