"""Moderation-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReportCreate(BaseModel):
    """Schema for reporting a comment."""

    reason: str = Field(..., min_length=1, max_length=1000)


class RejectPostRequest(BaseModel):
    """Schema carrying the reason shown to the owner of a rejected post."""

    reason: str = Field(..., min_length=1, max_length=1000)


class ReportView(BaseModel):
    """Report row as stored."""

    id: int
    user_id: int
    comment_id: int | None
    comment_author_user_id: int | None
    reason: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportedCommentView(BaseModel):
    """Pending report together with the comment it targets."""

    report_id: int
    comment_id: int
    comment_body: str
    author: str
    comment_created_at: datetime
    post_id: int
    post_title: str
    report_reason: str
    # Pending reports filed against the same comment, this one included.
    report_count: int
    reported_at: datetime


class ModeratorStats(BaseModel):
    """Queue sizes shown on the moderator dashboard."""

    approved_posts: int
    pending_posts: int
    # Pending reports on existing comments, not distinct comments.
    pending_reports: int
    rejected_posts: int
    total_comments: int
