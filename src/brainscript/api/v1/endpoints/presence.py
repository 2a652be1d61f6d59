"""Presence endpoints backing the "reading now" indicator."""

from typing import Annotated

from fastapi import APIRouter, Header, status

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.repositories.content_store import ContentStore
from brainscript.schemas.presence import (
    ActiveReaderResponse,
    HeartbeatRequest,
    ViewerCountResponse,
)
from brainscript.services.presence import PresenceTracker

router = APIRouter(prefix="/presence", tags=["presence"])


@router.post("/{post_id}/heartbeat", status_code=status.HTTP_204_NO_CONTENT)
async def heartbeat(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
    payload: HeartbeatRequest | None = None,
    x_session_key: Annotated[str | None, Header(max_length=128)] = None,
) -> None:
    """Mark the caller as currently reading the post.

    Anonymous readers identify themselves with a session key, sent either in
    the body or the ``X-Session-Key`` header.
    """
    session_key = (payload.session_key if payload else None) or x_session_key
    try:
        PresenceTracker(ContentStore(db)).heartbeat(post_id, current_user, session_key)
        db.commit()
    except ContentError as exc:
        raise_http(exc)


@router.get("/{post_id}/readers", response_model=list[ActiveReaderResponse])
async def get_active_readers(post_id: int, db: SessionDep) -> list[ActiveReaderResponse]:
    """List readers seen on the post within the last 30 seconds."""
    readers = PresenceTracker(ContentStore(db)).get_active_readers(post_id)
    return [ActiveReaderResponse.model_validate(reader) for reader in readers]


@router.get("/{post_id}/viewers", response_model=ViewerCountResponse)
async def get_viewer_count(post_id: int, db: SessionDep) -> ViewerCountResponse:
    """Return how many readers are currently on the post."""
    return ViewerCountResponse(viewers=PresenceTracker(ContentStore(db)).get_viewer_count(post_id))
