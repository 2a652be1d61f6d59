"""Reader interactions with posts: likes, bookmarks and comments.

Every mutation that creates or removes a like, save or comment row adjusts
the matching counter on the parent post before the single ``commit``, so the
row and its counter land in the same transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from brainscript.core.errors import AuthorizationError, NotFoundError, ValidationError
from brainscript.models import Comment, Post, PostLike, PostSave, User
from brainscript.models.notification import KIND_COMMENT, KIND_LIKE
from brainscript.repositories.content_store import COUNTER_FIELDS, ContentStore

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 5000


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a like/save toggle: the new state and the post's counter."""

    active: bool
    count: int


@dataclass
class CommentView:
    """A comment joined with its author."""

    comment: Comment
    author: User | None


def _toggle(
    db: Session,
    *,
    model: type[PostLike] | type[PostSave],
    post_id: int,
    user: User | None,
) -> tuple[ToggleResult, Post, User, bool]:
    """Flip the (post, user) row for ``model``.

    Returns the result, the post, the caller and whether a row was created by
    this call. A uniqueness violation on insert means a concurrent request
    already created the row; that is reported as the active state without
    touching the counter.
    """
    counter = COUNTER_FIELDS[model]
    store = ContentStore(db)
    caller = store.require_user(user)
    post = store.require_post(post_id)

    existing = db.get(model, (post_id, caller.id))
    if existing is not None:
        db.delete(existing)
        store.adjust_counter(post, model, -1)
        return ToggleResult(False, getattr(post, counter)), post, caller, False

    try:
        with db.begin_nested():
            db.add(model(post_id=post_id, user_id=caller.id))
    except IntegrityError:
        logger.warning(
            "Duplicate %s for post %s by user %s; treating as already set",
            model.__tablename__,
            post_id,
            caller.id,
        )
        return ToggleResult(True, getattr(post, counter)), post, caller, False

    store.adjust_counter(post, model, 1)
    return ToggleResult(True, getattr(post, counter)), post, caller, True


def toggle_like(db: Session, post_id: int, user: User | None) -> ToggleResult:
    """Like ``post_id`` if the caller has not, otherwise remove the like.

    A new like from someone other than the author notifies the author.

    Raises:
        AuthenticationError: If there is no caller.
        NotFoundError: If the post does not exist.
    """
    result, post, caller, created = _toggle(db, model=PostLike, post_id=post_id, user=user)
    if created and post.author_id != caller.id:
        ContentStore(db).append_notification(post.author_id, caller.id, KIND_LIKE, post.id)
    db.commit()
    return result


def has_liked(db: Session, post_id: int, user: User | None) -> bool:
    """Return whether the caller likes ``post_id``; False when anonymous."""
    if user is None:
        return False
    return db.get(PostLike, (post_id, user.id)) is not None


def toggle_save(db: Session, post_id: int, user: User | None) -> ToggleResult:
    """Bookmark ``post_id`` or remove the caller's bookmark."""
    result, _, _, _ = _toggle(db, model=PostSave, post_id=post_id, user=user)
    db.commit()
    return result


def has_saved(db: Session, post_id: int, user: User | None) -> bool:
    """Return whether the caller bookmarked ``post_id``; False when anonymous."""
    if user is None:
        return False
    return db.get(PostSave, (post_id, user.id)) is not None


def list_saved_posts(db: Session, user: User | None) -> list[tuple[Post, User | None]]:
    """Return the caller's bookmarked posts with their authors."""
    if user is None:
        return []
    posts = list(
        db.scalars(
            select(Post)
            .join(PostSave, PostSave.post_id == Post.id)
            .where(PostSave.user_id == user.id)
            .order_by(Post.created_at.desc())
        )
    )
    authors = ContentStore(db).authors_for(posts)
    return [(post, authors.get(post.author_id)) for post in posts]


def _clean_comment(content: str) -> str:
    text = content.strip()
    if not text:
        raise ValidationError("Comment cannot be empty")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment exceeds {MAX_COMMENT_LENGTH} characters")
    return text


def list_comments(db: Session, post_id: int) -> list[CommentView]:
    """Return comments on ``post_id``, newest first, with their authors."""
    comments = list(
        db.scalars(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
    )
    user_ids = {comment.user_id for comment in comments}
    users = {}
    if user_ids:
        users = {u.id: u for u in db.scalars(select(User).where(User.id.in_(user_ids)))}
    return [CommentView(comment=c, author=users.get(c.user_id)) for c in comments]


def create_comment(db: Session, post_id: int, content: str, user: User | None) -> Comment:
    """Add a comment to ``post_id`` and notify the author when it is someone else's post."""
    store = ContentStore(db)
    caller = store.require_user(user)
    post = store.require_post(post_id)
    text = _clean_comment(content)

    comment = Comment(post_id=post.id, user_id=caller.id, content=text)
    db.add(comment)
    store.adjust_counter(post, Comment, 1)
    if post.author_id != caller.id:
        store.append_notification(post.author_id, caller.id, KIND_COMMENT, post.id)
    db.commit()
    db.refresh(comment)
    return comment


def _owned_comment(db: Session, comment_id: int, user: User | None) -> tuple[Comment, User]:
    caller = ContentStore(db).require_user(user)
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.user_id != caller.id:
        raise AuthorizationError("Unauthorized")
    return comment, caller


def update_comment(db: Session, comment_id: int, content: str, user: User | None) -> Comment:
    """Replace the text of a comment owned by the caller."""
    comment, _ = _owned_comment(db, comment_id, user)
    comment.content = _clean_comment(content)
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int, user: User | None) -> None:
    """Delete a comment owned by the caller and decrement the post's counter."""
    comment, _ = _owned_comment(db, comment_id, user)
    store = ContentStore(db)
    post = store.get_post(comment.post_id)
    db.delete(comment)
    if post is not None:
        store.adjust_counter(post, Comment, -1)
    db.commit()
