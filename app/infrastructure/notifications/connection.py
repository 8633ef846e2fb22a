"""Outbound handle for a single live notification stream."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from uuid import uuid4

from app.domain.exceptions import ConnectionClosedError

_CLOSE_SENTINEL = object()


class ConnectionHandle:
    """Ordered frame queue owned by one streaming response.

    Producers call :meth:`send` from the event loop; the stream generator is the
    only consumer. A full queue means the consumer stopped draining, so the
    handle closes itself and the write fails like a dead socket would.
    """

    def __init__(
        self,
        recipient_id: int,
        *,
        max_queue_size: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.recipient_id = recipient_id
        self.connection_id = uuid4().hex
        self._clock = clock
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=max_queue_size)
        self._closed = False
        self.opened_at = clock()
        self.last_write_at = self.opened_at

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<ConnectionHandle {self.connection_id} recipient={self.recipient_id} {state}>"

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, frame: str) -> None:
        """Queue ``frame`` for delivery or raise :class:`ConnectionClosedError`."""

        if self._closed:
            raise ConnectionClosedError(f"Connection {self.connection_id} is closed")
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull as exc:
            self.close()
            raise ConnectionClosedError(
                f"Connection {self.connection_id} stopped draining frames"
            ) from exc

    async def next_frame(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for a frame; ``None`` means idle."""

        if self._closed:
            raise ConnectionClosedError(f"Connection {self.connection_id} is closed")
        try:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            if self._closed:
                raise ConnectionClosedError(
                    f"Connection {self.connection_id} is closed"
                ) from None
            return None
        if item is _CLOSE_SENTINEL or self._closed:
            raise ConnectionClosedError(f"Connection {self.connection_id} is closed")
        return item  # type: ignore[return-value]

    def mark_written(self) -> None:
        """Record that a frame reached the transport."""

        self.last_write_at = self._clock()

    def idle_seconds(self) -> float:
        return self._clock() - self.last_write_at

    def close(self) -> None:
        """Close the handle and wake its consumer; safe to call repeatedly."""

        if self._closed:
            return
        self._closed = True
        while True:
            try:
                self._queue.put_nowait(_CLOSE_SENTINEL)
            except asyncio.QueueFull:
                self._queue.get_nowait()
            else:
                return


__all__ = ["ConnectionHandle"]
