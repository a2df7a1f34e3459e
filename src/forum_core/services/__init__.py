"""Domain services of the forum engine."""

from .comments import CommentService
from .feed import FeedFilter, FeedService
from .moderation import ModerationService
from .notifications import NotificationEvent, NotificationSink, SessionNotificationSink
from .posts import PostService
from .tags import TagService
from .users import UserDirectory
from .votes import VoteLedger, comment_ledger, post_ledger

__all__ = [
    "CommentService",
    "FeedFilter",
    "FeedService",
    "ModerationService",
    "NotificationEvent",
    "NotificationSink",
    "PostService",
    "SessionNotificationSink",
    "TagService",
    "UserDirectory",
    "VoteLedger",
    "comment_ledger",
    "post_ledger",
]
