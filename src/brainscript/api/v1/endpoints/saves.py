"""Bookmark endpoints for the BrainScript API."""

from fastapi import APIRouter

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.schemas.engagement import SaveToggleResponse, StatusResponse
from brainscript.schemas.post import PostWithAuthor
from brainscript.services import interactions

from .posts import with_author

router = APIRouter(prefix="/saves", tags=["saves"])


@router.get("/", response_model=list[PostWithAuthor])
async def list_saved_posts(current_user: OptionalUserDep, db: SessionDep) -> list[PostWithAuthor]:
    """Return the caller's bookmarked posts."""
    return [
        with_author(post, author)
        for post, author in interactions.list_saved_posts(db, current_user)
    ]


@router.post("/{post_id}", response_model=SaveToggleResponse)
async def toggle_save(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> SaveToggleResponse:
    """Bookmark the post, or remove the caller's bookmark."""
    try:
        result = interactions.toggle_save(db, post_id, current_user)
    except ContentError as exc:
        raise_http(exc)
    return SaveToggleResponse(saved=result.active, saves=result.count)


@router.get("/{post_id}/status", response_model=StatusResponse)
async def has_saved(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> StatusResponse:
    """Return whether the caller bookmarked the post."""
    return StatusResponse(value=interactions.has_saved(db, post_id, current_user))
