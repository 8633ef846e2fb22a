"""Endpoints and event stream for household notifications."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    get_unread_count,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    notify,
)
from app.config import get_settings
from app.domain.entities import Notification, User
from app.domain.exceptions import (
    NotificationError,
    NotificationForbiddenError,
    NotificationNotFoundError,
    NotificationStoreError,
)
from app.infrastructure.database import get_db
from app.infrastructure.notifications import (
    ConnectionRegistry,
    NotificationDispatcher,
    NotificationStream,
)
from app.infrastructure.repositories import UserRepository
from app.interfaces.api.dependencies import (
    get_connection_registry,
    get_current_user,
    get_notification_dispatcher,
    get_stream_user,
)
from app.interfaces.api.schemas import (
    NotificationCreate,
    NotificationList,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    UnreadCount,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _raise_http_error(exc: NotificationError) -> NoReturn:
    if isinstance(exc, NotificationNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found") from exc
    if isinstance(exc, NotificationForbiddenError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to modify this notification",
        ) from exc
    if isinstance(exc, NotificationStoreError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification store unavailable, try again",
            headers={"Retry-After": "5"},
        ) from exc
    raise exc


@router.get("/stream")
async def stream_notifications(
    current_user: User = Depends(get_stream_user),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> StreamingResponse:
    """Server-sent event stream of notifications for the authenticated member."""

    settings = get_settings()
    stream = NotificationStream(
        registry,
        current_user.id,
        heartbeat_interval=settings.notification_heartbeat_seconds,
        queue_size=settings.notification_queue_size,
    )
    return StreamingResponse(
        stream.frames(),
        media_type="text/event-stream",
        headers=_STREAM_HEADERS,
    )


@router.get("/", response_model=NotificationList)
def get_notifications(
    unread_only: bool = Query(default=False),
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationList:
    """Return the newest notifications for the caller, used for catch-up and polling."""

    try:
        notifications = list_notifications(
            db, current_user.id, unread_only=unread_only, limit=limit
        )
        unread = get_unread_count(db, current_user.id)
    except NotificationError as exc:
        _raise_http_error(exc)
    return NotificationList(
        notifications=[_notification_to_schema(item) for item in notifications],
        unread_count=unread,
    )


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UnreadCount:
    try:
        return UnreadCount(unread_count=get_unread_count(db, current_user.id))
    except NotificationError as exc:
        _raise_http_error(exc)


@router.patch("/mark-read", response_model=NotificationMarkReadResponse)
def mark_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationMarkReadResponse:
    """Mark one notification, or all of the caller's notifications, as read."""

    try:
        if payload.mark_all_read:
            updated = mark_all_notifications_read(db, user_id=current_user.id)
            return NotificationMarkReadResponse(
                message="All notifications marked as read", updated=updated
            )
        if payload.notification_id:
            changed = mark_notification_read(
                db, user_id=current_user.id, notification_id=payload.notification_id
            )
            return NotificationMarkReadResponse(
                message="Notification marked as read", updated=int(changed)
            )
    except NotificationError as exc:
        _raise_http_error(exc)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Must provide notification_id or mark_all_read flag",
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationRead:
    """Create a notification for the caller or a member of the caller's family."""

    if payload.recipient_id != current_user.id:
        recipient = UserRepository(db).get(payload.recipient_id)
        if recipient is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")
        if not current_user.shares_family_with(recipient):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Recipient is not a member of your family",
            )

    try:
        notification = notify(
            db,
            dispatcher,
            recipient_id=payload.recipient_id,
            kind=payload.kind,
            title=payload.title,
            body=payload.body,
            related_entity_id=payload.related_entity_id,
        )
    except NotificationError as exc:
        _raise_http_error(exc)
    return _notification_to_schema(notification)
