"""SQLAlchemy model for persisted notifications."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


def _new_notification_id() -> str:
    return str(uuid4())


class NotificationModel(Base):
    """Append-only record of notifications addressed to a household member."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=_new_notification_id)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    kind = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    related_entity_id = Column(String(64), nullable=True)
    read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel"]
