"""Notification inbox endpoints."""

from fastapi import APIRouter, status

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.schemas.engagement import CountResponse
from brainscript.schemas.notification import NotificationResponse
from brainscript.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: OptionalUserDep,
    db: SessionDep,
) -> list[NotificationResponse]:
    """Return the caller's notifications, newest first."""
    return [
        NotificationResponse(
            id=view.notification.id,
            kind=view.notification.kind,
            post_id=view.notification.post_id,
            sender_id=view.notification.sender_id,
            read=view.notification.read,
            created_at=view.notification.created_at,
            sender_name=view.sender_name,
            sender_image=view.sender_image,
            post_title=view.post_title,
            post_slug=view.post_slug,
        )
        for view in notification_service.list_notifications(db, current_user)
    ]


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(current_user: OptionalUserDep, db: SessionDep) -> CountResponse:
    """Return how many notifications the caller has not read."""
    return CountResponse(count=notification_service.unread_count(db, current_user))


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(current_user: OptionalUserDep, db: SessionDep) -> CountResponse:
    """Mark every notification as read; returns how many changed."""
    try:
        return CountResponse(count=notification_service.mark_all_read(db, current_user))
    except ContentError as exc:
        raise_http(exc)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> None:
    """Mark one notification as read."""
    try:
        notification_service.mark_read(db, notification_id, current_user)
    except ContentError as exc:
        raise_http(exc)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> None:
    """Delete one notification."""
    try:
        notification_service.delete_notification(db, notification_id, current_user)
    except ContentError as exc:
        raise_http(exc)
