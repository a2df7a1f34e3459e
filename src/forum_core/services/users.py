"""Member lookups, restriction handling and per-member statistics."""

from __future__ import annotations

import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from forum_core.core.errors import ForbiddenError, NotFoundError
from forum_core.db.time import utcnow
from forum_core.db.transaction import transaction
from forum_core.models import (
    Comment,
    NotificationType,
    Post,
    PostStatus,
    Report,
    ReportStatus,
    User,
    UserRole,
)
from forum_core.schemas.user import UserStats, UserSummary
from forum_core.services.notifications import (
    NotificationEvent,
    NotificationSink,
    SessionNotificationSink,
)

logger = logging.getLogger(__name__)

RESTRICTED_MESSAGE = "Your account has been restricted by a moderator"


def to_user_summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, username=user.username, role=user.role.value)


class UserDirectory:
    """Read access to members plus the restriction toggle used by moderators."""

    def __init__(self, db: Session, notifications: NotificationSink | None = None) -> None:
        self.db = db
        self.notifications = notifications or SessionNotificationSink(db)

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_role(self, user_id: int) -> UserRole:
        return self.get_user(user_id).role

    def is_restricted(self, user_id: int) -> bool:
        return self.get_user(user_id).is_restricted

    def is_moderator(self, user_id: int) -> bool:
        return self.get_role(user_id) in (UserRole.MODERATOR, UserRole.ADMIN)

    def require_active(self, user_id: int) -> User:
        """Return the member, refusing restricted accounts.

        Raises:
            NotFoundError: If the user does not exist.
            ForbiddenError: If the user is restricted.
        """
        user = self.get_user(user_id)
        if user.is_restricted:
            raise ForbiddenError(RESTRICTED_MESSAGE)
        return user

    def restrict(self, user_id: int) -> NotificationEvent:
        """Restrict a member and notify them."""
        return self._set_restricted(
            user_id,
            restricted=True,
            content=(
                "Your account has been restricted due to violations of community guidelines. "
                "You can no longer create posts or comments."
            ),
            notification_type=NotificationType.ACCOUNT_RESTRICTED,
        )

    def unrestrict(self, user_id: int) -> NotificationEvent:
        """Lift a restriction and notify the member."""
        return self._set_restricted(
            user_id,
            restricted=False,
            content="Your account restrictions have been removed. You can post and comment again.",
            notification_type=NotificationType.ACCOUNT_UNRESTRICTED,
        )

    def _set_restricted(
        self,
        user_id: int,
        *,
        restricted: bool,
        content: str,
        notification_type: NotificationType,
    ) -> NotificationEvent:
        user = self.get_user(user_id)
        event = NotificationEvent(recipient_id=user.id, content=content, type=notification_type)
        with transaction(self.db, f"restriction change for user {user_id}"):
            user.is_restricted = restricted
            user.updated_at = utcnow()
            self.notifications.emit(event)
        logger.info("User %s restricted=%s", user_id, restricted)
        return event

    def get_user_stats(self, user_id: int) -> UserStats:
        """Aggregate post, comment and violation counts for a member.

        ``reported_comments`` counts Approved reports only, so a comment removed
        after several reports contributes exactly one violation.
        """
        user = self.get_user(user_id)

        total_posts, approved_posts, rejected_posts = self.db.execute(
            select(
                func.count(Post.id),
                func.sum(case((Post.status == PostStatus.APPROVED, 1), else_=0)),
                func.sum(case((Post.status == PostStatus.REJECTED, 1), else_=0)),
            ).where(Post.user_id == user_id)
        ).one()

        total_comments = self.db.query(func.count(Comment.id)).filter(
            Comment.user_id == user_id
        ).scalar() or 0

        reported_comments = self.db.query(func.count(Report.id)).filter(
            Report.comment_author_user_id == user_id,
            Report.status == ReportStatus.APPROVED,
        ).scalar() or 0

        return UserStats(
            user_id=user.id,
            username=user.username,
            email=user.email,
            total_posts=total_posts or 0,
            total_comments=total_comments,
            approved_posts=approved_posts or 0,
            rejected_posts=rejected_posts or 0,
            reported_comments=reported_comments,
            created_at=user.created_at,
            is_restricted=user.is_restricted,
        )
