"""Errors raised by the notification core."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for notification failures."""


class NotificationAuthError(NotificationError):
    """The caller could not be identified."""


class NotificationNotFoundError(NotificationError):
    """The referenced notification does not exist."""


class NotificationForbiddenError(NotificationError):
    """The notification belongs to another recipient."""


class NotificationStoreError(NotificationError):
    """The durable store rejected the operation; callers may retry."""

    retryable = True


class ConnectionClosedError(NotificationError):
    """A frame could not be written because the live connection is gone."""


__all__ = [
    "ConnectionClosedError",
    "NotificationAuthError",
    "NotificationError",
    "NotificationForbiddenError",
    "NotificationNotFoundError",
    "NotificationStoreError",
]
