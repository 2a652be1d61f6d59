"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, CommentUpdate
from .engagement import AdminStatsResponse, AuthorStatsResponse, TopWriterResponse
from .notification import NotificationResponse
from .post import PostCreate, PostResponse, PostUpdate, PostWithAuthor, ScoredPostResponse
from .presence import ActiveReaderResponse, HeartbeatRequest
from .user import UserResponse, UserSummary

__all__ = [
    "CommentCreate", "CommentResponse", "CommentUpdate",
    "AdminStatsResponse", "AuthorStatsResponse", "TopWriterResponse",
    "NotificationResponse",
    "PostCreate", "PostResponse", "PostUpdate", "PostWithAuthor", "ScoredPostResponse",
    "ActiveReaderResponse", "HeartbeatRequest",
    "UserResponse", "UserSummary",
]
