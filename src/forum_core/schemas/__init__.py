"""
Pydantic schemas for payloads accepted by the engine and the views it returns.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentUpdate, CommentView
from .moderation import (
    ModeratorStats,
    ReportCreate,
    ReportedCommentView,
    ReportView,
    RejectPostRequest,
)
from .notification import NotificationView
from .post import AttachmentIn, AttachmentView, PostCreate, PostUpdate, PostView
from .tag import TagCreate, TagUpdate, TagView
from .user import UserStats, UserSummary

__all__ = [
    "CommentCreate", "CommentUpdate", "CommentView",
    "ModeratorStats", "ReportCreate", "ReportedCommentView", "ReportView", "RejectPostRequest",
    "NotificationView",
    "AttachmentIn", "AttachmentView", "PostCreate", "PostUpdate", "PostView",
    "TagCreate", "TagUpdate", "TagView",
    "UserStats", "UserSummary",
]
