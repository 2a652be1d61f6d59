"""Free-text search over posts and people."""

from fastapi import APIRouter, Query

from brainscript.api.v1.dependencies import SessionDep
from brainscript.schemas.post import PostResponse, SearchResponse
from brainscript.schemas.user import UserSummary
from brainscript.services import posts as post_service

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/", response_model=SearchResponse)
async def search(
    db: SessionDep,
    q: str = Query("", max_length=200, description="Case-insensitive substring"),
) -> SearchResponse:
    """Return up to five posts and three users matching ``q``."""
    results = post_service.search(db, q)
    return SearchResponse(
        posts=[PostResponse.model_validate(post) for post in results.posts],
        users=[UserSummary.model_validate(user) for user in results.users],
    )
