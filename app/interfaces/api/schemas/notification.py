"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationKind


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    recipient_id: int
    kind: NotificationKind
    title: str
    body: str
    related_entity_id: str | None = None
    read: bool
    created_at: datetime


class NotificationList(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int


class UnreadCount(BaseModel):
    unread_count: int


class NotificationCreate(BaseModel):
    """Payload accepted by the internal creation endpoint."""

    recipient_id: int = Field(..., gt=0)
    kind: NotificationKind
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    related_entity_id: str | None = Field(default=None, max_length=64)


class NotificationMarkReadRequest(BaseModel):
    """Either a single notification id or the ``mark_all_read`` flag."""

    notification_id: str | None = Field(default=None, min_length=1)
    mark_all_read: bool = False


class NotificationMarkReadResponse(BaseModel):
    message: str
    updated: int


__all__ = [
    "NotificationCreate",
    "NotificationList",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "UnreadCount",
]
