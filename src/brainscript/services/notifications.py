"""Notification inbox for post authors."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from brainscript.core.errors import AuthorizationError, NotFoundError
from brainscript.models import Notification, Post, User
from brainscript.repositories.content_store import ContentStore

UNKNOWN_SENDER = "Unknown User"
DELETED_POST = "Deleted Post"


@dataclass
class NotificationView:
    """A notification joined with display details of its sender and post."""

    notification: Notification
    sender_name: str
    sender_image: str | None
    post_title: str
    post_slug: str | None


def list_notifications(db: Session, user: User | None) -> list[NotificationView]:
    """Return the caller's notifications, newest first; empty when anonymous."""
    if user is None:
        return []
    notifications = list(
        db.scalars(
            select(Notification)
            .where(Notification.recipient_id == user.id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
    )

    views = []
    for notification in notifications:
        sender = db.get(User, notification.sender_id)
        post = db.get(Post, notification.post_id)
        views.append(
            NotificationView(
                notification=notification,
                sender_name=(sender.name if sender else None) or UNKNOWN_SENDER,
                sender_image=sender.image if sender else None,
                post_title=post.title if post else DELETED_POST,
                post_slug=post.slug if post else None,
            )
        )
    return views


def unread_count(db: Session, user: User | None) -> int:
    """Return how many unread notifications the caller has; 0 when anonymous."""
    if user is None:
        return 0
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user.id, Notification.read.is_(False))
    )
    return int(db.scalar(stmt) or 0)


def _owned_notification(db: Session, notification_id: int, user: User | None) -> Notification:
    caller = ContentStore(db).require_user(user)
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != caller.id:
        raise AuthorizationError("Unauthorized")
    return notification


def mark_read(db: Session, notification_id: int, user: User | None) -> None:
    """Mark one of the caller's notifications as read."""
    notification = _owned_notification(db, notification_id, user)
    notification.read = True
    db.commit()


def mark_all_read(db: Session, user: User | None) -> int:
    """Mark every unread notification of the caller as read; return how many changed."""
    caller = ContentStore(db).require_user(user)
    result = db.execute(
        update(Notification)
        .where(Notification.recipient_id == caller.id, Notification.read.is_(False))
        .values(read=True)
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    return result.rowcount or 0


def delete_notification(db: Session, notification_id: int, user: User | None) -> None:
    """Delete one of the caller's notifications."""
    notification = _owned_notification(db, notification_id, user)
    db.delete(notification)
    db.commit()
