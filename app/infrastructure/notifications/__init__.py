"""Realtime notification delivery for the infrastructure layer."""

from .connection import ConnectionHandle
from .dispatcher import NotificationDispatcher
from .events import (
    EVENT_CONNECTED,
    EVENT_NOTIFICATION,
    PULSE_FRAME,
    connected_frame,
    encode_event,
    notification_frame,
    serialize_notification,
)
from .registry import ConnectionRegistry, monitor_liveness
from .stream import NotificationStream, StreamState

__all__ = [
    "ConnectionHandle",
    "ConnectionRegistry",
    "EVENT_CONNECTED",
    "EVENT_NOTIFICATION",
    "NotificationDispatcher",
    "NotificationStream",
    "PULSE_FRAME",
    "StreamState",
    "connected_frame",
    "encode_event",
    "monitor_liveness",
    "notification_frame",
    "serialize_notification",
]
