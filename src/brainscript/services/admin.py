"""Administrative operations: role management and account removal."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from brainscript.core.errors import AuthorizationError, NotFoundError, ValidationError
from brainscript.core.settings import settings
from brainscript.models import (
    Comment,
    Notification,
    PostLike,
    PostSave,
    Presence,
    User,
)
from brainscript.models.user import ROLE_ADMIN, ROLES
from brainscript.repositories.content_store import ContentStore

logger = logging.getLogger(__name__)


def is_super_admin(user: User) -> bool:
    """Return True for the configured super admin account."""
    configured = settings.super_admin_email
    return bool(configured and user.email and user.email.lower() == configured.lower())


def bootstrap_super_admin(db: Session) -> str:
    """Promote the configured super admin account to admin.

    Safe to run repeatedly.

    Raises:
        ValidationError: If no super admin email is configured.
        NotFoundError: If that account has not signed in yet.
    """
    email = settings.super_admin_email
    if not email:
        raise ValidationError("SUPER_ADMIN_EMAIL is not configured")
    user = ContentStore(db).get_user_by_email(email)
    if user is None:
        raise NotFoundError(f"User with email {email} not found. Please log in first.")
    if user.role == ROLE_ADMIN:
        return "Already an Admin."
    user.role = ROLE_ADMIN
    db.commit()
    logger.info("Promoted super admin %s", user.id)
    return "Successfully promoted to Super Admin."


def _protected_target(db: Session, caller: User | None, user_id: int, action: str) -> User:
    ContentStore(db).require_role(caller, ROLE_ADMIN)
    target = db.get(User, user_id)
    if target is None:
        raise NotFoundError("Target user not found")
    if is_super_admin(target):
        raise AuthorizationError(f"Action Forbidden: Cannot {action} Super Admin account.")
    return target


def update_user_role(db: Session, caller: User | None, user_id: int, new_role: str) -> User:
    """Change another account's role. The super admin cannot be changed."""
    if new_role not in ROLES:
        raise ValidationError(f"Unknown role {new_role!r}")
    target = _protected_target(db, caller, user_id, "modify")
    target.role = new_role
    db.commit()
    db.refresh(target)
    logger.info("User %s role updated to %s", target.id, new_role)
    return target


def delete_user(db: Session, caller: User | None, user_id: int) -> None:
    """Remove an account together with everything it authored.

    The user's posts are deleted with their dependent rows. Likes, saves and
    comments the user left on other posts are removed and the counters of
    those posts recomputed in the same transaction.
    """
    target = _protected_target(db, caller, user_id, "delete")
    store = ContentStore(db)

    for post in store.find_posts_by_author(target.id):
        store.delete_post_cascade(post)

    touched: set[int] = set()
    for model in (PostLike, PostSave, Comment):
        touched.update(db.scalars(select(model.post_id).where(model.user_id == target.id)))
        db.execute(delete(model).where(model.user_id == target.id))
    db.execute(
        delete(Notification).where(
            (Notification.sender_id == target.id) | (Notification.recipient_id == target.id)
        )
    )
    db.execute(delete(Presence).where(Presence.user_id == target.id))

    store.refresh_counters(touched)
    db.delete(target)
    db.commit()
    logger.info("Deleted user %s; refreshed counters on %d posts", user_id, len(touched))


def list_users(db: Session, caller: User | None) -> list[User]:
    """Return every account, newest first."""
    ContentStore(db).require_role(caller, ROLE_ADMIN)
    return list(db.scalars(select(User).order_by(User.created_at.desc(), User.id.desc())))
