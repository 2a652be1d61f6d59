"""Comment endpoints for the BrainScript API."""

from fastapi import APIRouter, status

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.models import Comment, User
from brainscript.repositories.content_store import ContentStore
from brainscript.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from brainscript.schemas.engagement import CountResponse
from brainscript.schemas.user import UserSummary
from brainscript.services import interactions
from brainscript.services.engagement import EngagementAggregator

router = APIRouter(prefix="/comments", tags=["comments"])


def _serialize(comment: Comment, author: User | None) -> CommentResponse:
    response = CommentResponse.model_validate(comment)
    if author is not None:
        response.author = UserSummary.model_validate(author)
    return response


@router.get("/post/{post_id}", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: SessionDep) -> list[CommentResponse]:
    """List comments on a post, newest first."""
    return [_serialize(view.comment, view.author) for view in interactions.list_comments(db, post_id)]


@router.get("/post/{post_id}/count", response_model=CountResponse)
async def count_comments(post_id: int, db: SessionDep) -> CountResponse:
    """Return how many comments a post has."""
    return CountResponse(count=EngagementAggregator(ContentStore(db)).count_comments(post_id))


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Comment on a post."""
    try:
        comment = interactions.create_comment(
            db, comment_data.post_id, comment_data.content, current_user
        )
    except ContentError as exc:
        raise_http(exc)
    return _serialize(comment, current_user)


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Edit one of the caller's comments."""
    try:
        comment = interactions.update_comment(db, comment_id, comment_data.content, current_user)
    except ContentError as exc:
        raise_http(exc)
    return _serialize(comment, current_user)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> None:
    """Delete one of the caller's comments."""
    try:
        interactions.delete_comment(db, comment_id, current_user)
    except ContentError as exc:
        raise_http(exc)
