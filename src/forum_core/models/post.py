"""SQLAlchemy models for posts and their attachments."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum_core.db.session import Base
from forum_core.db.time import utcnow

from .tag import Tag, post_tag


class PostStatus(str, Enum):
    """Visibility workflow of a post."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Post(Base):
    """Primary content entity produced by members.

    A post is created ``pending`` and only becomes visible to other members once
    a moderator approves it.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_status_created", "status", "created_at"),
        Index("ix_post_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("forum_user.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Global hide switch; per-member hiding lives in UserPostHide.
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[PostStatus] = mapped_column(
        SAEnum(
            PostStatus,
            name="post_status",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=PostStatus.PENDING,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    tags: Mapped[list[Tag]] = relationship(Tag, secondary=post_tag)
    attachments: Mapped[list[PostAttachment]] = relationship(
        "PostAttachment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostAttachment.id",
    )


class PostAttachment(Base):
    """File reference owned exclusively by a post; upload handling happens elsewhere."""

    __tablename__ = "post_attachment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str] = mapped_column(String(50), nullable=False)
    file_extension: Mapped[str] = mapped_column(String(20), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    post: Mapped[Post] = relationship(Post, back_populates="attachments")
