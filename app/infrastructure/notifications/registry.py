"""Process-local registry of live notification streams."""

from __future__ import annotations

import asyncio
import logging
import threading

from .connection import ConnectionHandle

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Map each recipient to at most one live :class:`ConnectionHandle`.

    A single lock serializes every read and mutation. It is only held for
    dictionary work and handle closing, never across an ``await``.
    """

    def __init__(self) -> None:
        self._connections: dict[int, ConnectionHandle] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def recipients(self) -> list[int]:
        with self._lock:
            return list(self._connections)

    def register(self, recipient_id: int, handle: ConnectionHandle) -> ConnectionHandle | None:
        """Install ``handle`` for ``recipient_id``, closing any handle it replaces."""

        if handle.recipient_id != recipient_id:
            raise ValueError(
                f"Handle {handle.connection_id} belongs to recipient {handle.recipient_id}, "
                f"not {recipient_id}"
            )
        with self._lock:
            previous = self._connections.get(recipient_id)
            self._connections[recipient_id] = handle
            if previous is not None and previous is not handle:
                previous.close()
        if previous is not None and previous is not handle:
            logger.info(
                "Connection %s replaced %s for recipient %s",
                handle.connection_id,
                previous.connection_id,
                recipient_id,
            )
            return previous
        logger.info("Connection %s registered for recipient %s", handle.connection_id, recipient_id)
        return None

    def unregister(self, recipient_id: int, handle: ConnectionHandle) -> bool:
        """Remove ``handle`` only if it is still the registered one."""

        with self._lock:
            if self._connections.get(recipient_id) is not handle:
                return False
            del self._connections[recipient_id]
        logger.info("Connection %s unregistered for recipient %s", handle.connection_id, recipient_id)
        return True

    def lookup(self, recipient_id: int) -> ConnectionHandle | None:
        with self._lock:
            return self._connections.get(recipient_id)

    def reap_stale(self, max_idle_seconds: float) -> list[ConnectionHandle]:
        """Close and drop handles without a successful write in ``max_idle_seconds``."""

        with self._lock:
            stale = [
                (recipient_id, handle)
                for recipient_id, handle in self._connections.items()
                if handle.closed or handle.idle_seconds() > max_idle_seconds
            ]
            for recipient_id, handle in stale:
                del self._connections[recipient_id]
                handle.close()
        for recipient_id, handle in stale:
            logger.warning(
                "Reaped connection %s for recipient %s after %.1fs without a write",
                handle.connection_id,
                recipient_id,
                handle.idle_seconds(),
            )
        return [handle for _, handle in stale]

    def close_all(self) -> int:
        with self._lock:
            handles = list(self._connections.values())
            self._connections.clear()
            for handle in handles:
                handle.close()
        if handles:
            logger.info("Closed %s live notification connections", len(handles))
        return len(handles)


async def monitor_liveness(
    registry: ConnectionRegistry, *, interval: float, stale_after: float
) -> None:
    """Periodically reap connections whose transport silently died."""

    while True:
        await asyncio.sleep(interval)
        registry.reap_stale(stale_after)


__all__ = ["ConnectionRegistry", "monitor_liveness"]
