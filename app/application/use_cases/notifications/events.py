"""Household events that produce notifications.

These helpers are called by the task and reward flows after their own work
has been committed. Notification failures are logged and swallowed so that a
store outage never fails the triggering action; callers that must know about
the failure should use :func:`notify` directly.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationKind
from app.domain.exceptions import NotificationStoreError
from app.infrastructure.notifications import NotificationDispatcher
from app.infrastructure.repositories import UserRepository

from .create_notification import notify

logger = logging.getLogger(__name__)


def _notify_quietly(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    **fields,
) -> Notification | None:
    try:
        return notify(session, dispatcher, **fields)
    except NotificationStoreError:
        logger.exception(
            "Failed to create %s notification for recipient %s",
            fields.get("kind"),
            fields.get("recipient_id"),
        )
        return None


def notify_task_assigned(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    assignee_id: int,
    task_title: str,
    task_id: str,
    assigner_name: str,
) -> Notification | None:
    """Tell a child that a parent assigned them a task."""

    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=assignee_id,
        kind=NotificationKind.TASK_ASSIGNED,
        title="New Task Assigned",
        body=f'{assigner_name} assigned you "{task_title}"',
        related_entity_id=task_id,
    )


def notify_task_completed(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    parent_id: int,
    child_name: str,
    task_title: str,
    task_id: str,
    points_earned: int,
) -> Notification | None:
    """Tell the parent who created a task that a child completed it."""

    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=parent_id,
        kind=NotificationKind.TASK_COMPLETED,
        title="Task Completed",
        body=f'{child_name} completed "{task_title}" and earned {points_earned} points!',
        related_entity_id=task_id,
    )


def notify_task_due_soon(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    assignee_id: int,
    task_title: str,
    task_id: str,
) -> Notification | None:
    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=assignee_id,
        kind=NotificationKind.TASK_DUE_SOON,
        title="Task Due Soon",
        body=f'"{task_title}" is due soon.',
        related_entity_id=task_id,
    )


def notify_reward_requested(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    child_id: int,
    reward_title: str,
    points: int,
) -> Notification | None:
    """Confirm to a child that their redemption is waiting for approval."""

    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=child_id,
        kind=NotificationKind.REWARD_REQUESTED,
        title="Reward Requested",
        body=f'You requested "{reward_title}" for {points} points. Waiting for approval.',
    )


def notify_parents_of_reward_request(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    family_id: int,
    child_name: str,
    reward_title: str,
    points: int,
) -> list[Notification]:
    """Notify every active parent in ``family_id`` about a redemption request."""

    try:
        parents = UserRepository(session).list_parents(family_id)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to load the parents of family %s", family_id)
        return []

    created: list[Notification] = []
    for parent in parents:
        notification = _notify_quietly(
            session,
            dispatcher,
            recipient_id=parent.id,
            kind=NotificationKind.REWARD_REQUESTED,
            title="Reward Request",
            body=f'{child_name} wants to redeem "{reward_title}" for {points} points.',
        )
        if notification is not None:
            created.append(notification)
    return created


def notify_reward_approved(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    child_id: int,
    reward_title: str,
    approver_name: str,
) -> Notification | None:
    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=child_id,
        kind=NotificationKind.REWARD_APPROVED,
        title="Reward Approved!",
        body=f'{approver_name} approved your reward: "{reward_title}"',
    )


def notify_reward_denied(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    child_id: int,
    reward_title: str,
    approver_name: str,
) -> Notification | None:
    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=child_id,
        kind=NotificationKind.REWARD_DENIED,
        title="Reward Not Approved",
        body=(
            f'{approver_name} denied your reward: "{reward_title}". '
            "Points have been refunded."
        ),
    )


def notify_reminder(
    session: Session,
    dispatcher: NotificationDispatcher | None,
    *,
    recipient_id: int,
    task_title: str,
    task_id: str,
    reminder_message: str | None = None,
) -> Notification | None:
    """Send a reminder, from a scheduled job or a parent, about a pending task."""

    return _notify_quietly(
        session,
        dispatcher,
        recipient_id=recipient_id,
        kind=NotificationKind.REMINDER,
        title="Task Reminder",
        body=reminder_message or f'Don\'t forget to complete "{task_title}"!',
        related_entity_id=task_id,
    )


__all__ = [
    "notify_parents_of_reward_request",
    "notify_reminder",
    "notify_reward_approved",
    "notify_reward_denied",
    "notify_reward_requested",
    "notify_task_assigned",
    "notify_task_completed",
    "notify_task_due_soon",
]
