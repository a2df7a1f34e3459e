"""Model for notifications persisted on behalf of the notification collaborator."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base
from forum_core.db.time import utcnow


class NotificationType(str, Enum):
    """Type tags emitted by moderation transitions."""

    POST_APPROVED = "post_approved"
    POST_REJECTED = "post_rejected"
    COMMENT_DELETED = "comment_deleted"
    ACCOUNT_RESTRICTED = "account_restricted"
    ACCOUNT_UNRESTRICTED = "account_unrestricted"


class Notification(Base):
    """Message addressed to a member. Only ``is_read`` changes after creation."""

    __tablename__ = "notification"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="SET NULL"),
        nullable=True,
    )
