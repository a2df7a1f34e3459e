"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .user import UserSummary


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    body: str = Field(..., min_length=1, max_length=5000)
    parent_comment_id: int | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    body: str = Field(..., min_length=1, max_length=5000)


class CommentView(BaseModel):
    """Comment node with like count, viewer flag and nested replies."""

    id: int
    post_id: int
    body: str
    created_at: datetime
    parent_comment_id: int | None
    like_count: int
    is_voted: bool
    author: UserSummary
    replies: list[CommentView] = Field(default_factory=list)


CommentView.model_rebuild()
