"""Server side of a single long-lived notification stream."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from enum import Enum

from app.domain.exceptions import ConnectionClosedError

from .connection import ConnectionHandle
from .events import PULSE_FRAME, connected_frame
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    AUTHENTICATING = "authenticating"
    OPEN = "open"
    ALIVE = "alive"
    CLOSING = "closing"
    CLOSED = "closed"


class NotificationStream:
    """Drive one connection from registration to teardown.

    The caller authenticates the recipient before building the stream, so no
    handle exists until :meth:`open` runs. :meth:`frames` yields the handshake,
    then queued notifications, and a pulse whenever the connection has been
    idle for ``heartbeat_interval`` seconds.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        recipient_id: int,
        *,
        heartbeat_interval: float = 30.0,
        queue_size: int = 100,
    ) -> None:
        self._registry = registry
        self.recipient_id = recipient_id
        self._heartbeat_interval = heartbeat_interval
        self._queue_size = queue_size
        self.handle: ConnectionHandle | None = None
        self.state = StreamState.AUTHENTICATING

    def open(self) -> ConnectionHandle:
        if self.state is not StreamState.AUTHENTICATING:
            raise RuntimeError(f"Cannot open a stream in state {self.state.value}")
        self.handle = ConnectionHandle(self.recipient_id, max_queue_size=self._queue_size)
        self._registry.register(self.recipient_id, self.handle)
        self.state = StreamState.OPEN
        return self.handle

    async def frames(self) -> AsyncIterator[str]:
        if self.state is StreamState.AUTHENTICATING:
            self.open()
        handle = self.handle
        if handle is None or self.state is not StreamState.OPEN:
            return

        try:
            handshake = connected_frame()
            self.state = StreamState.ALIVE
            yield handshake
            handle.mark_written()
            while True:
                frame = await handle.next_frame(self._heartbeat_interval)
                yield PULSE_FRAME if frame is None else frame
                handle.mark_written()
        except ConnectionClosedError:
            logger.info(
                "Connection %s for recipient %s was closed by the server",
                handle.connection_id,
                self.recipient_id,
            )
        finally:
            self.close()

    def close(self) -> None:
        """Unregister and release the handle; later calls are no-ops."""

        if self.state in (StreamState.CLOSING, StreamState.CLOSED):
            return
        self.state = StreamState.CLOSING
        handle = self.handle
        if handle is not None:
            self._registry.unregister(self.recipient_id, handle)
            handle.close()
            logger.info("Stream %s for recipient %s closed", handle.connection_id, self.recipient_id)
        self.state = StreamState.CLOSED


__all__ = ["NotificationStream", "StreamState"]
