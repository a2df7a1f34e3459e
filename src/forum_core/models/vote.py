"""Models capturing likes on posts and comments.

Counts are always derived from these rows; no counter column is stored on the
target entities.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base
from forum_core.db.time import utcnow


class PostLike(Base):
    """Per-user like on a post."""

    __tablename__ = "post_like"
    __table_args__ = (Index("ix_post_like_post_id", "post_id"),)

    # Composite primary key prevents duplicate likes from the same user.
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class CommentLike(Base):
    """Per-user like on a comment; must be removed before its comment."""

    __tablename__ = "comment_like"
    __table_args__ = (Index("ix_comment_like_comment_id", "comment_id"),)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
