"""SQLAlchemy models for forum members and their per-user feed overrides."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base
from forum_core.db.time import utcnow


class UserRole(str, Enum):
    """Roles recognised by the authorization checks of the engine."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class User(Base):
    """Forum member.

    Accounts are managed by the surrounding platform; the engine only reads the
    role and the restriction flag, and toggles the latter during moderation.
    """

    __tablename__ = "forum_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    # Restricted users keep their content but may not create new posts or comments.
    is_restricted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class UserPostHide(Base):
    """Marker hiding a post from one member's feed without affecting anyone else."""

    __tablename__ = "user_post_hide"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    hidden_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
