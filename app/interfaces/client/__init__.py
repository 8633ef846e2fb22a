"""Client side of notification delivery: stream receiver, polling fallback and local feed."""

from .api import NotificationApiClient, notification_from_payload, raise_for_status
from .backoff import ExponentialBackoff
from .feed import NotificationFeed
from .receiver import NotificationReceiver, ReceiverOptions, ReceiverState, StreamUnavailableError
from .sse import SSEParser, ServerEvent

__all__ = [
    "ExponentialBackoff",
    "NotificationApiClient",
    "NotificationFeed",
    "NotificationReceiver",
    "ReceiverOptions",
    "ReceiverState",
    "SSEParser",
    "ServerEvent",
    "StreamUnavailableError",
    "notification_from_payload",
    "raise_for_status",
]
