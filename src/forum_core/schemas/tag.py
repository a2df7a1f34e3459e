"""Tag-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=50)


class TagUpdate(BaseModel):
    """Schema for renaming a tag."""

    name: str = Field(..., min_length=1, max_length=50)


class TagView(BaseModel):
    """Tag information returned by the engine."""

    id: int
    name: str
    created_at: datetime | None = None
    post_count: int | None = None
