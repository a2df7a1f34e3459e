"""SQLAlchemy model for threaded comments."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base
from forum_core.db.time import utcnow


class Comment(Base):
    """Comment on a post, optionally replying to another comment of the same post.

    Comments form a forest per post rooted at rows with ``parent_comment_id``
    set to NULL. Depth is unbounded.
    """

    __tablename__ = "comment"
    __table_args__ = (
        Index("ix_comment_post_id", "post_id"),
        Index("ix_comment_parent_comment_id", "parent_comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("post.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("forum_user.id"), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    parent_comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        nullable=True,
    )
