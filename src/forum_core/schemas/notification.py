"""Notification-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationView(BaseModel):
    """Notification as seen by its recipient."""

    id: int
    user_id: int
    content: str
    type: str
    is_read: bool
    created_at: datetime
    post_id: int | None

    model_config = ConfigDict(from_attributes=True)
