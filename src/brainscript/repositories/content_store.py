"""Data access helpers shared by the engagement and interaction services."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from brainscript.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from brainscript.models import (
    Comment,
    Notification,
    Post,
    PostLike,
    PostSave,
    Presence,
    User,
)
from brainscript.models.user import ROLE_ADMIN

__all__ = ["ContentStore", "COUNTER_FIELDS"]

logger = logging.getLogger(__name__)

# Denormalized counter column on Post for each row type that feeds one.
COUNTER_FIELDS: dict[type, str] = {
    PostLike: "likes",
    Comment: "comments_count",
    PostSave: "saves_count",
}


class ContentStore:
    """Thin wrapper around database access for posts and their engagement rows.

    Every lookup is index-backed except the explicit scans used by
    aggregation. Writes are staged on the session; callers own ``commit``.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the store with a SQLAlchemy session."""
        self.session = session

    # -- users ---------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        """Return a user by identifier."""
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email``."""
        return self.session.scalars(select(User).where(User.email == email)).first()

    def require_user(self, user: User | None) -> User:
        """Return ``user`` or fail when the caller is anonymous."""
        if user is None:
            raise AuthenticationError("Unauthenticated")
        return user

    def require_role(self, user: User | None, role: str) -> User:
        """Return ``user`` if it holds ``role``.

        Admins satisfy every role check.

        Raises:
            AuthorizationError: If the caller is anonymous or lacks the role.
        """
        if user is None:
            raise AuthorizationError("Unauthorized")
        if user.role != role and user.role != ROLE_ADMIN:
            raise AuthorizationError(f"Permission denied. {role.capitalize()} role required.")
        return user

    # -- posts ---------------------------------------------------------------

    def get_post(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def require_post(self, post_id: int) -> Post:
        """Return a post or raise ``NotFoundError``."""
        post = self.get_post(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def get_post_by_slug(self, slug: str) -> Post | None:
        """Return the post published under ``slug``."""
        return self.session.scalars(select(Post).where(Post.slug == slug)).first()

    def find_posts_created_after(
        self,
        timestamp: datetime,
        *,
        published_only: bool = True,
    ) -> list[Post]:
        """Return posts created at or after ``timestamp``, newest first."""
        stmt = select(Post).where(Post.created_at >= timestamp)
        if published_only:
            stmt = stmt.where(Post.published.is_(True))
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        return list(self.session.scalars(stmt))

    def find_posts_by_author(
        self,
        author_id: int,
        limit: int | None = None,
        *,
        published_only: bool = False,
    ) -> list[Post]:
        """Return posts written by ``author_id``, newest first."""
        stmt = select(Post).where(Post.author_id == author_id)
        if published_only:
            stmt = stmt.where(Post.published.is_(True))
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    def list_recent_posts(self, limit: int, *, published_only: bool = False) -> list[Post]:
        """Return the most recently created posts."""
        stmt = select(Post)
        if published_only:
            stmt = stmt.where(Post.published.is_(True))
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit)
        return list(self.session.scalars(stmt))

    def list_posts_by_views(self, limit: int) -> list[Post]:
        """Return published posts with the most views."""
        stmt = (
            select(Post)
            .where(Post.published.is_(True))
            .order_by(Post.views.desc(), Post.created_at.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def authors_for(self, posts: Iterable[Post]) -> dict[int, User]:
        """Load the authors of ``posts`` in one query, keyed by user id."""
        author_ids = {post.author_id for post in posts}
        if not author_ids:
            return {}
        users = self.session.scalars(select(User).where(User.id.in_(author_ids)))
        return {user.id: user for user in users}

    # -- counts --------------------------------------------------------------

    def count_likes(self, post_id: int) -> int:
        """Return the number of like rows referencing ``post_id``."""
        return self._count(PostLike, PostLike.post_id == post_id)

    def count_comments(self, post_id: int) -> int:
        """Return the number of comment rows referencing ``post_id``."""
        return self._count(Comment, Comment.post_id == post_id)

    def count_saves(self, post_id: int) -> int:
        """Return the number of save rows referencing ``post_id``."""
        return self._count(PostSave, PostSave.post_id == post_id)

    def _count(self, model: type, *criteria: object) -> int:
        stmt = select(func.count()).select_from(model).where(*criteria)
        return int(self.session.scalar(stmt) or 0)

    def adjust_counter(self, post: Post, model: type, delta: int) -> None:
        """Move the denormalized counter fed by ``model`` rows, never below zero."""
        field = COUNTER_FIELDS[model]
        setattr(post, field, max(0, (getattr(post, field) or 0) + delta))

    def refresh_counters(self, post_ids: Iterable[int]) -> None:
        """Recompute denormalized counters from the underlying rows."""
        for post_id in set(post_ids):
            post = self.get_post(post_id)
            if post is None:
                continue
            post.likes = self.count_likes(post_id)
            post.comments_count = self.count_comments(post_id)
            post.saves_count = self.count_saves(post_id)

    # -- presence ------------------------------------------------------------

    def upsert_presence(
        self,
        post_id: int,
        *,
        user_id: int | None,
        session_key: str | None,
        timestamp: datetime,
    ) -> Presence:
        """Refresh or create the presence row for one identity on one post.

        Exactly one of ``user_id`` and ``session_key`` must be provided. A
        concurrent insert of the same identity is absorbed by refreshing the
        winner's row.
        """
        if (user_id is None) == (session_key is None):
            raise ValueError("exactly one of user_id and session_key is required")

        existing = self._find_presence_row(post_id, user_id, session_key)
        if existing is not None:
            existing.updated_at = timestamp
            self.session.flush()
            return existing

        row = Presence(
            post_id=post_id,
            user_id=user_id,
            session_key=session_key,
            updated_at=timestamp,
        )
        try:
            with self.session.begin_nested():
                self.session.add(row)
        except IntegrityError:
            logger.debug("Presence row for post %s raced with another heartbeat", post_id)
            existing = self._find_presence_row(post_id, user_id, session_key)
            if existing is None:
                raise
            existing.updated_at = timestamp
            self.session.flush()
            return existing
        return row

    def _find_presence_row(
        self,
        post_id: int,
        user_id: int | None,
        session_key: str | None,
    ) -> Presence | None:
        stmt = select(Presence).where(Presence.post_id == post_id)
        if user_id is not None:
            stmt = stmt.where(Presence.user_id == user_id)
        else:
            stmt = stmt.where(Presence.session_key == session_key)
        return self.session.scalars(stmt).first()

    def find_presence(
        self,
        post_id: int,
        since: datetime,
        limit: int | None = None,
    ) -> list[Presence]:
        """Return presence rows refreshed after ``since``, most recent first."""
        stmt = (
            select(Presence)
            .where(Presence.post_id == post_id, Presence.updated_at > since)
            .order_by(Presence.updated_at.desc(), Presence.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    # -- notifications -------------------------------------------------------

    def append_notification(
        self,
        recipient_id: int,
        sender_id: int,
        kind: str,
        post_id: int,
    ) -> Notification:
        """Stage an unread notification for ``recipient_id``."""
        notification = Notification(
            recipient_id=recipient_id,
            sender_id=sender_id,
            kind=kind,
            post_id=post_id,
            read=False,
        )
        self.session.add(notification)
        return notification

    # -- deletion ------------------------------------------------------------

    def delete_post_cascade(self, post: Post) -> None:
        """Delete a post together with every row that references it."""
        post_id = post.id
        for model in (Comment, PostLike, PostSave, Presence, Notification):
            self.session.execute(delete(model).where(model.post_id == post_id))
        self.session.delete(post)
        self.session.flush()
