"""SQLAlchemy models for the BrainScript application."""

from .comment import Comment
from .interaction import PostLike, PostSave
from .notification import Notification
from .post import Post
from .presence import Presence
from .user import User

__all__ = [
    "Comment",
    "Notification",
    "Post",
    "PostLike", "PostSave",
    "Presence",
    "User",
]
