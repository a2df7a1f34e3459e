"""SQLAlchemy models for the forum engine."""

from .comment import Comment
from .moderation import Report, ReportStatus
from .notification import Notification, NotificationType
from .post import Post, PostAttachment, PostStatus
from .tag import Tag, post_tag
from .user import User, UserPostHide, UserRole
from .vote import CommentLike, PostLike

__all__ = [
    "Comment",
    "Report", "ReportStatus",
    "Notification", "NotificationType",
    "Post", "PostAttachment", "PostStatus",
    "Tag", "post_tag",
    "User", "UserPostHide", "UserRole",
    "CommentLike", "PostLike",
]
