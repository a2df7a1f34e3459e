"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .moderation import router as moderation_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .tags import router as tags_router

__all__ = [
    "comments_router",
    "moderation_router",
    "notifications_router",
    "posts_router",
    "tags_router",
]
