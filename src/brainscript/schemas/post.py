"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, description="HTML content")
    slug: str | None = Field(None, max_length=200, description="Derived from the title when omitted")
    excerpt: str | None = Field(None, max_length=500)
    published: bool = False
    category: str | None = Field(None, max_length=64)
    tags: list[str] = Field(default_factory=list, max_length=20)
    post_type: str | None = Field(None, max_length=32)


class PostUpdate(BaseModel):
    """Schema for a partial update of a post by its author."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    slug: str | None = Field(None, max_length=200)
    excerpt: str | None = Field(None, max_length=500)
    published: bool | None = None
    category: str | None = Field(None, max_length=64)
    tags: list[str] | None = Field(None, max_length=20)
    post_type: str | None = Field(None, max_length=32)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None
    author_id: int
    published: bool
    category: str | None
    tags: list[str]
    post_type: str | None
    views: int
    likes: int
    comments_count: int
    saves_count: int
    total_read_time_ms: int
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PostWithAuthor(PostResponse):
    """A post with its author embedded."""

    author: UserSummary | None = None


class ScoredPostResponse(PostWithAuthor):
    """A post ranked by engagement."""

    score: int


class ReadTimeCreate(BaseModel):
    """Focused reading time flushed by a client."""

    duration_ms: int = Field(..., gt=0, le=24 * 60 * 60 * 1000)


class ReadTimeResponse(BaseModel):
    """Running total after a read-time flush."""

    total_read_time_ms: int


class ViewResponse(BaseModel):
    """View counter after an increment."""

    views: int


class TitleCheckResponse(BaseModel):
    """Whether a title is already used by another post."""

    taken: bool


class SearchResponse(BaseModel):
    """Posts and users matching a query."""

    posts: list[PostResponse]
    users: list[UserSummary]
