"""Notification events produced by moderation transitions.

The engine never delivers notifications. Operations return the event they
produced and hand it to a ``NotificationSink``; the default sink persists a
``Notification`` row in the caller's unit of work so that the row commits or
rolls back together with the transition that caused it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from forum_core.models import Notification, NotificationType
from forum_core.schemas.notification import NotificationView


@dataclass(frozen=True)
class NotificationEvent:
    """Outbound notification addressed to a single member."""

    recipient_id: int
    content: str
    type: NotificationType
    post_id: int | None = None


class NotificationSink(Protocol):
    """Destination for notification events."""

    def emit(self, event: NotificationEvent) -> None:
        """Accept ``event`` for delivery."""


class SessionNotificationSink:
    """Persist events as ``Notification`` rows in an existing session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def emit(self, event: NotificationEvent) -> None:
        self.db.add(
            Notification(
                user_id=event.recipient_id,
                content=event.content,
                type=event.type.value,
                is_read=False,
                post_id=event.post_id,
            )
        )


def list_notifications(db: Session, user_id: int, limit: int = 50) -> list[NotificationView]:
    """Return the newest notifications addressed to ``user_id``."""
    rows = db.scalars(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
    ).all()
    return [NotificationView.model_validate(row) for row in rows]
