"""Like endpoints for the BrainScript API."""

from fastapi import APIRouter

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.repositories.content_store import ContentStore
from brainscript.schemas.engagement import CountResponse, LikeToggleResponse, StatusResponse
from brainscript.services import interactions
from brainscript.services.engagement import EngagementAggregator

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("/{post_id}", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> LikeToggleResponse:
    """Like the post, or remove the caller's like."""
    try:
        result = interactions.toggle_like(db, post_id, current_user)
    except ContentError as exc:
        raise_http(exc)
    return LikeToggleResponse(liked=result.active, likes=result.count)


@router.get("/{post_id}/status", response_model=StatusResponse)
async def has_liked(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> StatusResponse:
    """Return whether the caller likes the post."""
    return StatusResponse(value=interactions.has_liked(db, post_id, current_user))


@router.get("/{post_id}/count", response_model=CountResponse)
async def count_likes(post_id: int, db: SessionDep) -> CountResponse:
    """Return how many likes a post has."""
    return CountResponse(count=EngagementAggregator(ContentStore(db)).count_likes(post_id))
