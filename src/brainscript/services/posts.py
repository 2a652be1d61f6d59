"""Service-level helpers for authoring and browsing posts."""
from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from brainscript.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from brainscript.core.settings import settings
from brainscript.models import Post, User
from brainscript.repositories.content_store import ContentStore

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")

# Fields an author may change through ``update_post``.
EDITABLE_FIELDS = (
    "title",
    "slug",
    "content",
    "excerpt",
    "published",
    "category",
    "tags",
    "post_type",
)


@dataclass
class SearchResults:
    """Matches for a free-text query."""

    posts: list[Post] = field(default_factory=list)
    users: list[User] = field(default_factory=list)


def slugify(title: str) -> str:
    """Derive a URL slug from a title."""
    slug = _SLUG_STRIP.sub("", title.lower()).strip()
    return _SLUG_SEPARATORS.sub("-", slug).strip("-")


def _normalize_tags(tags: list[str] | None) -> list[str]:
    seen: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def _ensure_slug_available(store: ContentStore, slug: str, post_id: int | None = None) -> None:
    existing = store.get_post_by_slug(slug)
    if existing is not None and existing.id != post_id:
        raise ConflictError("Slug already exists")


def create_post(
    db: Session,
    user: User | None,
    *,
    title: str,
    content: str,
    slug: str | None = None,
    excerpt: str | None = None,
    published: bool = False,
    category: str | None = None,
    tags: list[str] | None = None,
    post_type: str | None = None,
) -> Post:
    """Create a post owned by the caller.

    Raises:
        AuthenticationError: If there is no caller.
        ValidationError: If no usable slug can be derived.
        ConflictError: If the slug is already taken.
    """
    store = ContentStore(db)
    author = store.require_user(user)

    final_slug = slugify(slug) if slug else slugify(title)
    if not final_slug:
        raise ValidationError("Slug cannot be empty")
    _ensure_slug_available(store, final_slug)

    post = Post(
        title=title.strip(),
        slug=final_slug,
        content=content,
        excerpt=excerpt,
        author_id=author.id,
        published=published,
        category=(category or "").strip() or None,
        tags=_normalize_tags(tags),
        post_type=post_type,
        views=0,
        likes=0,
        comments_count=0,
        saves_count=0,
        total_read_time_ms=0,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s created post %s (%s)", author.id, post.id, post.slug)
    return post


def update_post(db: Session, post_id: int, user: User | None, **changes: object) -> Post:
    """Apply ``changes`` to a post owned by the caller.

    Only keys in ``EDITABLE_FIELDS`` are considered; ``None`` values are
    ignored so callers can pass partial updates.
    """
    store = ContentStore(db)
    caller = store.require_user(user)
    post = store.require_post(post_id)
    if post.author_id != caller.id:
        raise AuthorizationError("You can only edit your own posts")

    updates = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
    if "slug" in updates:
        new_slug = slugify(str(updates["slug"]))
        if not new_slug:
            raise ValidationError("Slug cannot be empty")
        _ensure_slug_available(store, new_slug, post.id)
        updates["slug"] = new_slug
    if "tags" in updates:
        updates["tags"] = _normalize_tags(updates["tags"])  # type: ignore[arg-type]
    if "category" in updates:
        updates["category"] = str(updates["category"]).strip() or None

    for key, value in updates.items():
        setattr(post, key, value)
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: int, user: User | None) -> None:
    """Delete a post with its comments, likes, saves, presence rows and notifications.

    Authors may delete their own posts; administrators may delete any post.
    """
    store = ContentStore(db)
    caller = store.require_user(user)
    post = store.require_post(post_id)
    if post.author_id != caller.id and not caller.is_admin:
        raise AuthorizationError("You can only delete your own posts")

    store.delete_post_cascade(post)
    db.commit()
    logger.info("User %s deleted post %s", caller.id, post_id)


def get_post(db: Session, post_id: int) -> Post:
    """Return a post by id or raise ``NotFoundError``."""
    return ContentStore(db).require_post(post_id)


def get_post_by_slug(db: Session, slug: str) -> tuple[Post, User | None] | None:
    """Return a post and its author by slug, or ``None``."""
    store = ContentStore(db)
    post = store.get_post_by_slug(slug)
    if post is None:
        return None
    return post, store.get_user(post.author_id)


def list_recent(db: Session, limit: int | None = None) -> list[tuple[Post, User | None]]:
    """Return the newest published posts with their authors."""
    store = ContentStore(db)
    posts = store.list_recent_posts(limit or settings.recent_limit, published_only=True)
    authors = store.authors_for(posts)
    return [(post, authors.get(post.author_id)) for post in posts]


def list_my_posts(db: Session, user: User | None) -> list[Post]:
    """Return the caller's posts, newest first; empty when anonymous."""
    if user is None:
        return []
    return ContentStore(db).find_posts_by_author(user.id)


def check_title(db: Session, title: str) -> bool:
    """Return True when a post with ``title`` (case-insensitive) already exists."""
    needle = title.strip().lower()
    if not needle:
        return False
    stmt = select(func.count()).select_from(Post).where(func.lower(Post.title) == needle)
    return bool(db.scalar(stmt))


def increment_view(db: Session, post_id: int) -> int:
    """Count one more read of ``post_id`` and return the new total."""
    post = ContentStore(db).require_post(post_id)
    post.views = (post.views or 0) + 1
    db.commit()
    return post.views


def track_read_time(db: Session, post_id: int, duration_ms: int) -> int:
    """Add ``duration_ms`` of focused reading to the post's running total.

    Durations are only ever added, never overwritten.
    """
    if duration_ms <= 0:
        raise ValidationError("Duration must be positive")
    post = ContentStore(db).require_post(post_id)
    post.total_read_time_ms = (post.total_read_time_ms or 0) + duration_ms
    db.commit()
    logger.debug("Recorded %d ms of reading on post %s", duration_ms, post_id)
    return post.total_read_time_ms


def list_categories(db: Session) -> list[str]:
    """Return the distinct non-empty categories of published posts, alphabetically."""
    rows = db.scalars(
        select(Post.category)
        .where(Post.category.is_not(None), Post.published.is_(True))
        .distinct()
        .order_by(Post.category)
    )
    return [category for category in rows if category]


def list_popular_tags(db: Session, limit: int | None = None) -> list[str]:
    """Return the most used tags across published posts."""
    counts: Counter[str] = Counter()
    for tags in db.scalars(select(Post.tags).where(Post.published.is_(True))):
        counts.update(tags or [])
    return [tag for tag, _ in counts.most_common(limit or settings.popular_tags_limit)]


def search(db: Session, query: str) -> SearchResults:
    """Case-insensitive substring search over published posts and users."""
    term = query.strip().lower()
    if not term:
        return SearchResults()
    pattern = f"%{term}%"

    posts = db.scalars(
        select(Post)
        .where(
            Post.published.is_(True),
            or_(
                func.lower(Post.title).like(pattern),
                func.lower(Post.content).like(pattern),
                func.lower(Post.excerpt).like(pattern),
            ),
        )
        .order_by(Post.created_at.desc())
        .limit(settings.search_post_limit)
    )
    users = db.scalars(
        select(User)
        .where(
            or_(
                func.lower(User.name).like(pattern),
                func.lower(User.email).like(pattern),
            )
        )
        .order_by(User.created_at.desc())
        .limit(settings.search_user_limit)
    )
    return SearchResults(posts=list(posts), users=list(users))


def require_published_or_owner(post: Post, user: User | None) -> Post:
    """Hide drafts from everyone but their author and administrators."""
    if post.published:
        return post
    if user is not None and (user.id == post.author_id or user.is_admin):
        return post
    raise NotFoundError("Post not found")
