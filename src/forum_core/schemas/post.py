"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .tag import TagView
from .user import UserSummary


class AttachmentIn(BaseModel):
    """Attachment metadata supplied with a post; the file itself is uploaded elsewhere."""

    file_name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1, max_length=50)
    file_extension: str = Field(..., min_length=1, max_length=20)
    file_size: int = Field(..., ge=0)


class AttachmentView(BaseModel):
    """Attachment information returned with a post."""

    id: int
    post_id: int
    file_name: str
    file_url: str
    file_type: str
    file_extension: str
    file_size: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    tag_names: list[str] = Field(default_factory=list)
    attachments: list[AttachmentIn] = Field(default_factory=list)


class PostUpdate(BaseModel):
    """Partial update of a post.

    ``None`` or a blank string leaves a field untouched; an empty list clears
    tags or attachments.
    """

    title: str | None = Field(None, max_length=200)
    body: str | None = None
    tag_names: list[str] | None = None
    attachments: list[AttachmentIn] | None = None


class PostView(BaseModel):
    """Post annotated with derived counts and viewer-specific flags."""

    id: int
    title: str
    body: str
    status: str
    created_at: datetime
    updated_at: datetime | None
    view_count: int
    comment_count: int
    like_count: int
    is_voted: bool
    is_pinned: bool
    is_hidden_by_viewer: bool
    rejection_reason: str | None
    owner: UserSummary
    tags: list[TagView] = Field(default_factory=list)
    attachments: list[AttachmentView] = Field(default_factory=list)
