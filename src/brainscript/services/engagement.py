"""Engagement aggregation: trending, popularity and leaderboard views.

All aggregations are single-pass reads over a bounded window of rows. Like
and comment totals come from the denormalized counters on ``Post`` which the
interaction services keep in step with the underlying rows.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from sqlalchemy import func, select

from brainscript.core.settings import settings
from brainscript.db.time import utcnow
from brainscript.models import Comment, Post, PostLike, User
from brainscript.models.user import ROLE_ADMIN
from brainscript.repositories.content_store import ContentStore


def engagement_score(views: int, likes: int, comments: int) -> int:
    """Return the weighted score used to rank trending posts."""
    weights = settings.trending_weights
    return (
        views * weights["views"]
        + likes * weights["likes"]
        + comments * weights["comments"]
    )


@dataclass
class ScoredPost:
    """A post with its author and the engagement figures it was ranked by."""

    post: Post
    author: User | None
    likes: int
    comments: int
    score: int


@dataclass
class WriterStats:
    """Per-author totals accumulated over the scan window."""

    posts: int = 0
    views: int = 0
    comments: int = 0


@dataclass
class RankedWriter:
    """An author and their ``WriterStats``."""

    user: User
    stats: WriterStats


@dataclass
class AdminStats:
    """Platform-wide totals shown on the admin dashboard."""

    total_users: int
    admin_users: int
    regular_users: int
    total_posts: int


@dataclass
class AuthorStats:
    """Totals over all posts written by one author."""

    total_posts: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_comments: int = 0


@dataclass
class PublicProfile:
    """A user's public page: profile, totals and most recent posts."""

    user: User
    stats: AuthorStats
    posts: list[Post] = field(default_factory=list)


class EngagementAggregator:
    """Computes ranked and aggregated views over posts."""

    def __init__(
        self,
        store: ContentStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the aggregator.

        Args:
            store: Content store to read from.
            clock: Source of "now"; injectable for tests.
        """
        self.store = store
        self.clock = clock

    def get_trending(self) -> list[ScoredPost]:
        """Return the highest scoring posts created within the trending window.

        Score is ``views + likes*2 + comments*3``. Ties keep store order
        (newest first) because the sort is stable.
        """
        cutoff = self.clock() - timedelta(days=settings.trending_window_days)
        posts = self.store.find_posts_created_after(cutoff)
        authors = self.store.authors_for(posts)

        scored = [
            ScoredPost(
                post=post,
                author=authors.get(post.author_id),
                likes=post.likes,
                comments=post.comments_count,
                score=engagement_score(post.views, post.likes, post.comments_count),
            )
            for post in posts
        ]
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored[: settings.trending_limit]

    def get_popular(self, limit: int | None = None) -> list[ScoredPost]:
        """Return published posts with the most views."""
        posts = self.store.list_posts_by_views(limit or settings.popular_limit)
        authors = self.store.authors_for(posts)
        return [
            ScoredPost(
                post=post,
                author=authors.get(post.author_id),
                likes=post.likes,
                comments=post.comments_count,
                score=post.views,
            )
            for post in posts
        ]

    def count_likes(self, post_id: int) -> int:
        """Return the number of likes on ``post_id``, counted from rows."""
        return self.store.count_likes(post_id)

    def count_comments(self, post_id: int) -> int:
        """Return the number of comments on ``post_id``, counted from rows."""
        return self.store.count_comments(post_id)

    def get_top_writers(self) -> list[RankedWriter]:
        """Rank authors of the most recent posts by how many they wrote.

        Only the latest ``TOP_WRITERS_SCAN_SIZE`` posts are examined, so an
        author whose older posts fall outside that window is undercounted.
        """
        posts = self.store.list_recent_posts(settings.top_writers_scan_size)

        stats_by_author: dict[int, WriterStats] = {}
        for post in posts:
            stats = stats_by_author.setdefault(post.author_id, WriterStats())
            stats.posts += 1
            stats.views += post.views
            stats.comments += post.comments_count

        ranked_ids = sorted(
            stats_by_author,
            key=lambda author_id: stats_by_author[author_id].posts,
            reverse=True,
        )[: settings.top_writers_limit]

        writers = []
        for author_id in ranked_ids:
            user = self.store.get_user(author_id)
            if user is None:
                continue
            writers.append(RankedWriter(user=user, stats=stats_by_author[author_id]))
        return writers

    def get_admin_stats(self, caller: User | None) -> AdminStats:
        """Return user and post totals.

        Raises:
            AuthorizationError: If the caller is not an administrator.
        """
        self.store.require_role(caller, ROLE_ADMIN)
        session = self.store.session

        total_users = session.scalar(select(func.count()).select_from(User)) or 0
        admin_users = session.scalar(
            select(func.count()).select_from(User).where(User.role == ROLE_ADMIN)
        ) or 0
        total_posts = session.scalar(select(func.count()).select_from(Post)) or 0

        return AdminStats(
            total_users=total_users,
            admin_users=admin_users,
            regular_users=total_users - admin_users,
            total_posts=total_posts,
        )

    def get_my_stats(self, caller: User | None) -> AuthorStats | None:
        """Return totals over the caller's posts, or ``None`` when anonymous.

        Likes and comments are counted from their rows, joined to the
        caller's posts in SQL rather than loaded and filtered in memory.
        """
        if caller is None:
            return None
        session = self.store.session

        total_posts, total_views = session.execute(
            select(func.count(Post.id), func.coalesce(func.sum(Post.views), 0))
            .where(Post.author_id == caller.id)
        ).one()
        total_likes = session.scalar(
            select(func.count())
            .select_from(PostLike)
            .join(Post, Post.id == PostLike.post_id)
            .where(Post.author_id == caller.id)
        ) or 0
        total_comments = session.scalar(
            select(func.count())
            .select_from(Comment)
            .join(Post, Post.id == Comment.post_id)
            .where(Post.author_id == caller.id)
        ) or 0

        return AuthorStats(
            total_posts=int(total_posts),
            total_views=int(total_views),
            total_likes=int(total_likes),
            total_comments=int(total_comments),
        )

    def get_public_profile(self, user_id: int) -> PublicProfile | None:
        """Return a user's public profile or ``None`` if the user is unknown.

        Drafts are left out of both the post list and the stats.
        """
        user = self.store.get_user(user_id)
        if user is None:
            return None

        posts = self.store.find_posts_by_author(user_id, published_only=True)
        stats = AuthorStats(
            total_posts=len(posts),
            total_views=sum(post.views for post in posts),
            total_likes=sum(post.likes for post in posts),
            total_comments=sum(post.comments_count for post in posts),
        )
        return PublicProfile(
            user=user,
            stats=stats,
            posts=posts[: settings.profile_recent_posts],
        )
