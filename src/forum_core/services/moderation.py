"""Moderation workflow: post approval, comment reports and the moderator dashboard."""

from __future__ import annotations

import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from forum_core.core.errors import ConflictError, NotFoundError
from forum_core.core.settings import settings
from forum_core.db.transaction import transaction
from forum_core.models import (
    Comment,
    NotificationType,
    Post,
    PostStatus,
    Report,
    ReportStatus,
    User,
)
from forum_core.schemas.moderation import ModeratorStats, ReportedCommentView, ReportView
from forum_core.services.comments import CommentService
from forum_core.services.notifications import (
    NotificationEvent,
    NotificationSink,
    SessionNotificationSink,
)
from forum_core.services.users import UserDirectory

logger = logging.getLogger(__name__)

COMMENT_REMOVED_MESSAGE = (
    "Your comment has been removed by a moderator because it violated the community guidelines."
)


def to_report_view(report: Report) -> ReportView:
    return ReportView(
        id=report.id,
        user_id=report.user_id,
        comment_id=report.comment_id,
        comment_author_user_id=report.comment_author_user_id,
        reason=report.reason,
        status=report.status.value,
        created_at=report.created_at,
    )


class ModerationService:
    """State transitions performed by moderators."""

    def __init__(self, db: Session, notifications: NotificationSink | None = None) -> None:
        self.db = db
        self.notifications = notifications or SessionNotificationSink(db)
        self.users = UserDirectory(db, self.notifications)
        self.comments = CommentService(db, self.users)

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def approve_post(self, post_id: int) -> NotificationEvent:
        """Make a post visible and tell its owner."""
        post = self._require_post(post_id)
        event = NotificationEvent(
            recipient_id=post.user_id,
            content=f'Your post "{post.title}" has been approved.',
            type=NotificationType.POST_APPROVED,
            post_id=post.id,
        )
        with transaction(self.db, f"approval of post {post_id}"):
            post.status = PostStatus.APPROVED
            post.rejection_reason = None
            self.notifications.emit(event)
        logger.info("Post %s approved", post_id)
        return event

    def reject_post(self, post_id: int, reason: str) -> NotificationEvent:
        """Reject a post, keeping the reason for its owner."""
        post = self._require_post(post_id)
        event = NotificationEvent(
            recipient_id=post.user_id,
            content=f'Your post "{post.title}" has been rejected. Reason: {reason}',
            type=NotificationType.POST_REJECTED,
            post_id=post.id,
        )
        with transaction(self.db, f"rejection of post {post_id}"):
            post.status = PostStatus.REJECTED
            post.rejection_reason = reason
            self.notifications.emit(event)
        logger.info("Post %s rejected", post_id)
        return event

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def report_comment(self, comment_id: int, reason: str, reporter_id: int) -> ReportView:
        """File a pending report, capturing the comment author at report time."""
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        self.users.get_user(reporter_id)

        report = Report(
            user_id=reporter_id,
            comment_id=comment.id,
            comment_author_user_id=comment.user_id,
            reason=reason,
            status=ReportStatus.PENDING,
        )
        with transaction(self.db, f"report on comment {comment_id}"):
            self.db.add(report)
        logger.info("User %s reported comment %s (report %s)", reporter_id, comment_id, report.id)
        return to_report_view(report)

    def get_report(self, report_id: int) -> ReportView:
        return to_report_view(self._require_report(report_id))

    def list_reported_comments(
        self,
        page: int = 1,
        page_size: int = settings.feed_default_page_size,
    ) -> list[ReportedCommentView]:
        """Pending reports with their comment, newest report first."""
        page = max(page, 1)
        page_size = min(max(page_size, 1), settings.feed_max_page_size)
        rows = self.db.execute(
            select(Report, Comment, User.username, Post.title)
            .join(Comment, Comment.id == Report.comment_id)
            .join(User, User.id == Comment.user_id)
            .join(Post, Post.id == Comment.post_id)
            .where(Report.status == ReportStatus.PENDING)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()
        if not rows:
            return []

        comment_ids = {comment.id for _, comment, _, _ in rows}
        report_counts = dict(
            self.db.execute(
                select(Report.comment_id, func.count())
                .where(Report.comment_id.in_(comment_ids), Report.status == ReportStatus.PENDING)
                .group_by(Report.comment_id)
            ).all()
        )
        return [
            ReportedCommentView(
                report_id=report.id,
                comment_id=comment.id,
                comment_body=comment.body,
                author=username,
                comment_created_at=comment.created_at,
                post_id=comment.post_id,
                post_title=title,
                report_reason=report.reason,
                report_count=report_counts.get(comment.id, 0),
                reported_at=report.created_at,
            )
            for report, comment, username, title in rows
        ]

    def approve_report(self, report_id: int) -> NotificationEvent | None:
        """Act on a report by removing the reported comment and its replies.

        The acted-on report becomes Approved, every other Pending report on the
        same comment becomes Resolved, and all of them keep the comment author
        after the comment is gone. The author is notified once. When the comment
        no longer exists only the report status changes and nobody is notified.

        Approving an already Approved report does nothing and returns ``None``.

        Raises:
            NotFoundError: If the report does not exist.
            ConflictError: If the report was already resolved or dismissed.
        """
        report = self._require_report(report_id)
        if report.status == ReportStatus.APPROVED:
            logger.info("Report %s already approved", report_id)
            return None
        if report.status != ReportStatus.PENDING:
            raise ConflictError(f"Report has already been {report.status.value.lower()}")

        comment = self.db.get(Comment, report.comment_id) if report.comment_id is not None else None
        event = None
        with transaction(self.db, f"approval of report {report_id}"):
            if comment is None:
                report.status = ReportStatus.APPROVED
            else:
                siblings = self.db.scalars(
                    select(Report).where(
                        Report.comment_id == comment.id,
                        Report.status == ReportStatus.PENDING,
                    )
                ).all()
                for sibling in siblings:
                    sibling.status = ReportStatus.APPROVED if sibling.id == report.id else ReportStatus.RESOLVED
                    if sibling.comment_author_user_id is None:
                        sibling.comment_author_user_id = comment.user_id

                event = NotificationEvent(
                    recipient_id=comment.user_id,
                    content=COMMENT_REMOVED_MESSAGE,
                    type=NotificationType.COMMENT_DELETED,
                    post_id=comment.post_id,
                )
                self.notifications.emit(event)
                removed = self.comments.remove_subtree(comment, detach_reports=True)
                logger.info(
                    "Report %s approved: removed %s comments, resolved %s sibling reports",
                    report_id,
                    removed,
                    len(siblings) - 1,
                )
        return event

    def dismiss_report(self, report_id: int) -> None:
        """Close a pending report without acting on the comment.

        Dismissing an already dismissed report does nothing.

        Raises:
            NotFoundError: If the report does not exist.
            ConflictError: If the report was already approved or resolved.
        """
        report = self._require_report(report_id)
        if report.status == ReportStatus.DISMISSED:
            return
        if report.status != ReportStatus.PENDING:
            raise ConflictError(f"Report has already been {report.status.value.lower()}")
        with transaction(self.db, f"dismissal of report {report_id}"):
            report.status = ReportStatus.DISMISSED
        logger.info("Report %s dismissed", report_id)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def moderator_stats(self) -> ModeratorStats:
        approved_posts, pending_posts, rejected_posts = self.db.execute(
            select(
                func.sum(case((Post.status == PostStatus.APPROVED, 1), else_=0)),
                func.sum(case((Post.status == PostStatus.PENDING, 1), else_=0)),
                func.sum(case((Post.status == PostStatus.REJECTED, 1), else_=0)),
            )
        ).one()
        # Only reports the queue can still list.
        pending_reports = self.db.scalar(
            select(func.count(Report.id)).where(
                Report.status == ReportStatus.PENDING,
                Report.comment_id.is_not(None),
            )
        ) or 0
        total_comments = self.db.query(func.count(Comment.id)).scalar() or 0
        return ModeratorStats(
            approved_posts=approved_posts or 0,
            pending_posts=pending_posts or 0,
            pending_reports=pending_reports,
            rejected_posts=rejected_posts or 0,
            total_comments=total_comments,
        )

    def _require_post(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def _require_report(self, report_id: int) -> Report:
        report = self.db.get(Report, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        return report
