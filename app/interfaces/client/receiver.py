"""Long-running client that keeps a member's notification feed current."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum

import httpx

from app.config import Settings
from app.domain.exceptions import NotificationAuthError, NotificationError

from .api import NotificationApiClient, notification_from_payload, raise_for_status
from .backoff import ExponentialBackoff
from .feed import NotificationFeed
from .sse import SSEParser, ServerEvent

logger = logging.getLogger(__name__)

_STREAM_UNSUPPORTED_STATUSES = frozenset({404, 405, 501})


class ReceiverState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    POLLING = "polling"
    STOPPED = "stopped"


class StreamUnavailableError(Exception):
    """The server cannot stream to this client at all."""


@dataclass
class ReceiverOptions:
    catch_up_limit: int = 20
    poll_interval: float = 60.0
    read_timeout: float = 45.0
    reconnect_initial: float = 1.0
    reconnect_max: float = 30.0
    reconnect_factor: float = 2.0
    failures_before_polling: int = 5

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReceiverOptions":
        """Derive client timings from the server configuration.

        The read timeout allows one missed pulse plus slack before the stream is
        considered dead.
        """

        heartbeat = settings.notification_heartbeat_seconds
        return cls(
            catch_up_limit=settings.notification_default_limit,
            poll_interval=settings.notification_poll_interval_seconds,
            read_timeout=heartbeat * 1.5,
            reconnect_initial=settings.notification_reconnect_initial_seconds,
            reconnect_max=settings.notification_reconnect_max_seconds,
            reconnect_factor=settings.notification_reconnect_factor,
            failures_before_polling=settings.notification_stream_failures_before_polling,
        )


class NotificationReceiver:
    """Stream notifications with reconnect, catch-up and polling fallback.

    Every successful (re)connect triggers a catch-up fetch, which closes any
    gap left while disconnected. The first fetch only seeds the feed; later
    fetches and live pushes announce unseen unread records through the feed's
    ``on_new`` callback.
    """

    def __init__(
        self,
        api: NotificationApiClient,
        *,
        feed: NotificationFeed | None = None,
        options: ReceiverOptions | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_state_change: Callable[[ReceiverState], None] | None = None,
    ) -> None:
        self._api = api
        self.feed = feed if feed is not None else NotificationFeed()
        self.options = options or ReceiverOptions()
        self._sleep = sleep
        self._on_state_change = on_state_change
        self._backoff = ExponentialBackoff(
            self.options.reconnect_initial,
            self.options.reconnect_max,
            self.options.reconnect_factor,
        )
        self.state = ReceiverState.DISCONNECTED
        self.reconnect_delays: list[float] = []
        self.consecutive_failures = 0
        self._synced = False
        self._stopping = False
        self._task: asyncio.Task[None] | None = None

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._stopping = False
            self._task = asyncio.create_task(self.run())
        return self._task

    def request_stop(self) -> None:
        """Ask :meth:`run` to finish at its next suspension point."""

        self._stopping = True

    async def stop(self) -> None:
        """Tear down the current stream or poll and wait for the task to end."""

        self._stopping = True
        task, self._task = self._task, None
        if task is not None:
            if not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
            elif not task.cancelled() and task.exception() is not None:
                logger.info("Receiver had already stopped: %s", task.exception())
        self._set_state(ReceiverState.STOPPED)

    async def run(self) -> None:
        try:
            while not self._stopping:
                if self.state is ReceiverState.POLLING:
                    await self._poll()
                    continue

                self._set_state(ReceiverState.CONNECTING)
                connected = False
                try:
                    connected = await self._consume_stream()
                except StreamUnavailableError as exc:
                    logger.warning("Streaming unavailable (%s); falling back to polling", exc)
                    self._set_state(ReceiverState.POLLING)
                    continue
                except NotificationAuthError:
                    logger.error("Notification stream rejected the credentials; stopping")
                    raise
                except (httpx.HTTPError, NotificationError) as exc:
                    logger.info("Notification stream failed: %s", exc)
                else:
                    logger.info("Notification stream closed by the server")

                if self._stopping:
                    break
                if not connected and self.state is not ReceiverState.CONNECTED:
                    self.consecutive_failures += 1
                if self.consecutive_failures >= self.options.failures_before_polling:
                    logger.warning(
                        "%s consecutive stream failures; falling back to polling",
                        self.consecutive_failures,
                    )
                    self._set_state(ReceiverState.POLLING)
                    continue

                delay = self._backoff.next_delay()
                self.reconnect_delays.append(delay)
                self._set_state(ReceiverState.RECONNECTING)
                logger.debug("Reconnecting in %.1fs", delay)
                await self._sleep(delay)
        finally:
            self._set_state(ReceiverState.STOPPED)

    async def catch_up(self) -> int:
        """Fetch recent notifications and merge them; returns the new count."""

        notifications, _ = await self._api.list(limit=self.options.catch_up_limit)
        added = self.feed.merge_many(notifications, announce=self._synced)
        self._synced = True
        if added:
            logger.debug("Catch-up merged %s notifications", added)
        return added

    async def mark_read(self, notification_id: str) -> None:
        await self._api.mark_read(notification_id)
        self.feed.mark_read(notification_id)

    async def mark_all_read(self) -> None:
        await self._api.mark_all_read()
        self.feed.mark_all_read()

    async def _consume_stream(self) -> bool:
        """Read one stream until it ends; returns whether it reached CONNECTED."""

        connected = False
        async with self._api.stream(read_timeout=self.options.read_timeout) as response:
            if response.status_code in _STREAM_UNSUPPORTED_STATUSES:
                raise StreamUnavailableError(f"stream endpoint returned {response.status_code}")
            raise_for_status(response)
            content_type = response.headers.get("content-type", "")
            if not content_type.startswith("text/event-stream"):
                raise StreamUnavailableError(f"unexpected content type {content_type!r}")

            parser = SSEParser()
            async for line in response.aiter_lines():
                event = parser.feed_line(line)
                if event is None:
                    continue
                if await self._handle_event(event):
                    connected = True
        return connected

    async def _handle_event(self, event: ServerEvent) -> bool:
        try:
            payload = json.loads(event.data)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed notification event: %r", event.data)
            return False

        event_type = payload.get("type") if isinstance(payload, dict) else None
        if event_type == "connected":
            self._set_state(ReceiverState.CONNECTED)
            self._backoff.reset()
            self.consecutive_failures = 0
            await self.catch_up()
            return True
        if event_type == "notification":
            try:
                notification = notification_from_payload(payload["notification"])
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable notification event: %s", exc)
                return False
            self.feed.merge(notification)
        return False

    async def _poll(self) -> None:
        try:
            await self.catch_up()
        except NotificationAuthError:
            raise
        except (httpx.HTTPError, NotificationError) as exc:
            logger.info("Notification poll failed: %s", exc)
        await self._sleep(self.options.poll_interval)

    def _set_state(self, state: ReceiverState) -> None:
        if state is self.state:
            return
        self.state = state
        if self._on_state_change is not None:
            self._on_state_change(state)


__all__ = [
    "NotificationReceiver",
    "ReceiverOptions",
    "ReceiverState",
    "StreamUnavailableError",
]
