"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    moderation_router,
    notifications_router,
    posts_router,
    tags_router,
)

__all__ = [
    "comments_router",
    "moderation_router",
    "notifications_router",
    "posts_router",
    "tags_router",
]
