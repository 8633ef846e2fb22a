"""HTTP client for the notification endpoints."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import httpx

from app.domain.entities import Notification, NotificationKind
from app.domain.exceptions import (
    NotificationAuthError,
    NotificationForbiddenError,
    NotificationNotFoundError,
    NotificationStoreError,
)

STREAM_PATH = "/notifications/stream"
LIST_PATH = "/notifications/"
UNREAD_COUNT_PATH = "/notifications/unread-count"
MARK_READ_PATH = "/notifications/mark-read"


def notification_from_payload(payload: dict[str, Any]) -> Notification:
    """Build a :class:`Notification` from its JSON representation."""

    created_at = payload.get("created_at")
    return Notification(
        id=str(payload["id"]),
        recipient_id=int(payload["recipient_id"]),
        kind=NotificationKind(payload["kind"]),
        title=payload["title"],
        body=payload["body"],
        related_entity_id=payload.get("related_entity_id"),
        read=bool(payload.get("read", False)),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )


def raise_for_status(response: httpx.Response) -> None:
    """Map error responses onto the notification exception hierarchy."""

    status_code = response.status_code
    if status_code == 401:
        raise NotificationAuthError("Notification service rejected the credentials")
    if status_code == 403:
        raise NotificationForbiddenError("Notification belongs to another member")
    if status_code == 404:
        raise NotificationNotFoundError(f"{response.request.url.path} returned 404")
    if status_code == 503:
        raise NotificationStoreError("Notification store unavailable")
    response.raise_for_status()


class NotificationApiClient:
    """Authenticated calls against a notification server.

    ``client`` must be configured with the server's ``base_url``; its lifetime
    is owned by the caller.
    """

    def __init__(self, client: httpx.AsyncClient, token: str) -> None:
        self._client = client
        self._headers = {"Authorization": f"Bearer {token}"}

    async def list(
        self, *, unread_only: bool = False, limit: int | None = None
    ) -> tuple[list[Notification], int]:
        params: dict[str, Any] = {"unread_only": str(unread_only).lower()}
        if limit is not None:
            params["limit"] = limit
        response = await self._client.get(LIST_PATH, params=params, headers=self._headers)
        raise_for_status(response)
        body = response.json()
        notifications = [notification_from_payload(item) for item in body.get("notifications", [])]
        return notifications, int(body.get("unread_count", 0))

    async def unread_count(self) -> int:
        response = await self._client.get(UNREAD_COUNT_PATH, headers=self._headers)
        raise_for_status(response)
        return int(response.json()["unread_count"])

    async def mark_read(self, notification_id: str) -> int:
        return await self._mark({"notification_id": notification_id})

    async def mark_all_read(self) -> int:
        return await self._mark({"mark_all_read": True})

    @asynccontextmanager
    async def stream(self, *, read_timeout: float) -> AsyncIterator[httpx.Response]:
        """Open the event stream; the caller inspects status and reads lines."""

        timeout = httpx.Timeout(10.0, read=read_timeout)
        headers = {**self._headers, "Accept": "text/event-stream"}
        async with self._client.stream(
            "GET", STREAM_PATH, headers=headers, timeout=timeout
        ) as response:
            yield response

    async def _mark(self, body: dict[str, Any]) -> int:
        response = await self._client.patch(MARK_READ_PATH, json=body, headers=self._headers)
        raise_for_status(response)
        return int(response.json().get("updated", 0))


__all__ = ["NotificationApiClient", "notification_from_payload", "raise_for_status"]
