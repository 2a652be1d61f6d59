"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class CommentCreate(BaseModel):
    """Schema for commenting on a post."""

    post_id: int
    content: str = Field(..., min_length=1, max_length=5000)


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime | None = None
    author: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)
