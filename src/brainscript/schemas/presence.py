"""Presence-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class HeartbeatRequest(BaseModel):
    """Heartbeat sent while a reader has the post open and visible."""

    session_key: str | None = Field(
        None,
        max_length=128,
        description="Ephemeral client-generated id distinguishing anonymous readers",
    )


class ActiveReaderResponse(BaseModel):
    """A reader currently on the post."""

    key: str
    name: str
    image: str | None = None
    user_id: int | None = None
    last_seen: datetime

    model_config = ConfigDict(from_attributes=True)


class ViewerCountResponse(BaseModel):
    """Number of identities currently reading a post."""

    viewers: int
