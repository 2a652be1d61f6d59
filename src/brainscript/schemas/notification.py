"""Notification-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """A notification with sender and post display details."""

    id: int
    kind: Literal["like", "comment"]
    post_id: int
    sender_id: int
    read: bool
    created_at: datetime
    sender_name: str
    sender_image: str | None = None
    post_title: str
    post_slug: str | None = None
