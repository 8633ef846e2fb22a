"""Server-sent event frames written to notification streams."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from app.domain.entities import Notification
from app.utils import isoformat_or_none, now_in_app_timezone

EVENT_CONNECTED = "connected"
EVENT_NOTIFICATION = "notification"

# Comment frames are ignored by SSE clients; they only keep the transport busy.
PULSE_FRAME = ": heartbeat\n\n"


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON representation shared by the stream and the REST API."""

    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "kind": notification.kind.value,
        "title": notification.title,
        "body": notification.body,
        "related_entity_id": notification.related_entity_id,
        "read": notification.read,
        "created_at": isoformat_or_none(notification.created_at),
    }


def encode_event(payload: dict[str, Any]) -> str:
    """Encode ``payload`` as a single ``data:`` frame."""

    return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"


def connected_frame(timestamp: datetime | None = None) -> str:
    moment = timestamp or now_in_app_timezone()
    return encode_event({"type": EVENT_CONNECTED, "timestamp": moment.isoformat()})


def notification_frame(notification: Notification) -> str:
    return encode_event(
        {
            "type": EVENT_NOTIFICATION,
            "notification": serialize_notification(notification),
            "timestamp": now_in_app_timezone().isoformat(),
        }
    )


__all__ = [
    "EVENT_CONNECTED",
    "EVENT_NOTIFICATION",
    "PULSE_FRAME",
    "connected_frame",
    "encode_event",
    "notification_frame",
    "serialize_notification",
]
