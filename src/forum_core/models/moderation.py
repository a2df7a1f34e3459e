"""Models tracking user reports against comments."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base
from forum_core.db.time import utcnow


class ReportStatus(str, Enum):
    """Lifecycle of a report.

    ``Pending`` moves to exactly one of ``Approved`` (the report a moderator
    acted on), ``Resolved`` (siblings against the same removed comment) or
    ``Dismissed``.
    """

    PENDING = "Pending"
    APPROVED = "Approved"
    RESOLVED = "Resolved"
    DISMISSED = "Dismissed"


class Report(Base):
    """Report filed by a member against a comment.

    ``comment_id`` becomes NULL once the comment is deleted; the row survives so
    that ``comment_author_user_id`` keeps feeding violation statistics.
    """

    __tablename__ = "report"
    __table_args__ = (
        Index("ix_report_comment_id", "comment_id"),
        Index("ix_report_status_author", "status", "comment_author_user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("forum_user.id"), nullable=False)
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        nullable=True,
    )
    comment_author_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("forum_user.id"),
        nullable=True,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ReportStatus] = mapped_column(
        SAEnum(
            ReportStatus,
            name="report_status",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=ReportStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
