"""User-facing Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    """Author information embedded in post and comment views."""

    id: int
    username: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class UserStats(BaseModel):
    """Moderation statistics for a single member."""

    user_id: int
    username: str
    email: str | None
    total_posts: int
    total_comments: int
    approved_posts: int
    rejected_posts: int
    # Counts only Approved reports so that sibling reports never double-count.
    reported_comments: int
    created_at: datetime
    is_restricted: bool
