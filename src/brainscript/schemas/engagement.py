"""Schemas for likes, saves, counters and aggregate statistics."""

from pydantic import BaseModel, ConfigDict

from .post import PostResponse
from .user import UserSummary


class LikeToggleResponse(BaseModel):
    """State of the caller's like after a toggle."""

    liked: bool
    likes: int


class SaveToggleResponse(BaseModel):
    """State of the caller's bookmark after a toggle."""

    saved: bool
    saves: int


class StatusResponse(BaseModel):
    """Boolean state of the caller's relationship to a post."""

    value: bool


class CountResponse(BaseModel):
    """A single counter."""

    count: int


class AdminStatsResponse(BaseModel):
    """Platform totals for the admin dashboard."""

    total_users: int
    admin_users: int
    regular_users: int
    total_posts: int

    model_config = ConfigDict(from_attributes=True)


class AuthorStatsResponse(BaseModel):
    """Totals over one author's posts."""

    total_posts: int
    total_views: int
    total_likes: int
    total_comments: int

    model_config = ConfigDict(from_attributes=True)


class WriterStatsResponse(BaseModel):
    """Per-author totals within the leaderboard window."""

    posts: int
    views: int
    comments: int

    model_config = ConfigDict(from_attributes=True)


class TopWriterResponse(BaseModel):
    """One leaderboard entry."""

    user: UserSummary
    stats: WriterStatsResponse

    model_config = ConfigDict(from_attributes=True)


class PublicProfileResponse(BaseModel):
    """A user's public page."""

    user: UserSummary
    passion: str | None = None
    interest: str | None = None
    organization: str | None = None
    stats: AuthorStatsResponse
    posts: list[PostResponse]
