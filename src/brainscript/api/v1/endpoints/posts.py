# src/brainscript/api/v1/endpoints/posts.py
"""Post-related endpoints for the BrainScript API."""

from fastapi import APIRouter, Query, status

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError, NotFoundError
from brainscript.models import Post, User
from brainscript.repositories.content_store import ContentStore
from brainscript.schemas.post import (
    PostCreate,
    PostResponse,
    PostUpdate,
    PostWithAuthor,
    ReadTimeCreate,
    ReadTimeResponse,
    ScoredPostResponse,
    TitleCheckResponse,
    ViewResponse,
)
from brainscript.schemas.user import UserSummary
from brainscript.services import posts as post_service
from brainscript.services.engagement import EngagementAggregator, ScoredPost

router = APIRouter(prefix="/posts", tags=["posts"])


def with_author(post: Post, author: User | None) -> PostWithAuthor:
    """Serialize a post together with its author summary."""
    return PostWithAuthor(
        **PostResponse.model_validate(post).model_dump(),
        author=UserSummary.model_validate(author) if author is not None else None,
    )


def scored(item: ScoredPost) -> ScoredPostResponse:
    """Serialize an engagement-ranked post."""
    return ScoredPostResponse(
        **with_author(item.post, item.author).model_dump(),
        score=item.score,
    )


@router.get("/", response_model=list[PostWithAuthor])
async def list_recent_posts(
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of posts to return"),
) -> list[PostWithAuthor]:
    """Return the newest posts."""
    return [with_author(post, author) for post, author in post_service.list_recent(db, limit)]


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> Post:
    """Create a new post owned by the caller."""
    try:
        return post_service.create_post(db, current_user, **post_data.model_dump())
    except ContentError as exc:
        raise_http(exc)


@router.get("/trending", response_model=list[ScoredPostResponse])
async def get_trending_posts(db: SessionDep) -> list[ScoredPostResponse]:
    """Return the highest scoring posts of the last week."""
    return [scored(item) for item in EngagementAggregator(ContentStore(db)).get_trending()]


@router.get("/popular", response_model=list[ScoredPostResponse])
async def get_popular_posts(
    db: SessionDep,
    limit: int = Query(5, ge=1, le=50),
) -> list[ScoredPostResponse]:
    """Return the most viewed published posts."""
    aggregator = EngagementAggregator(ContentStore(db))
    return [scored(item) for item in aggregator.get_popular(limit)]


@router.get("/my", response_model=list[PostResponse])
async def list_my_posts(current_user: OptionalUserDep, db: SessionDep) -> list[Post]:
    """Return the caller's posts, drafts included."""
    return post_service.list_my_posts(db, current_user)


@router.get("/check-title", response_model=TitleCheckResponse)
async def check_title(
    db: SessionDep,
    title: str = Query(..., min_length=1),
) -> TitleCheckResponse:
    """Report whether a post with this title already exists."""
    return TitleCheckResponse(taken=post_service.check_title(db, title))


@router.get("/slug/{slug}", response_model=PostWithAuthor)
async def get_post_by_slug(
    slug: str,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> PostWithAuthor:
    """Get a post by its URL slug."""
    found = post_service.get_post_by_slug(db, slug)
    try:
        if found is None:
            raise NotFoundError("Post not found")
        post, author = found
        post_service.require_published_or_owner(post, current_user)
    except ContentError as exc:
        raise_http(exc)
    return with_author(post, author)


@router.get("/{post_id}", response_model=PostWithAuthor)
async def get_post(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> PostWithAuthor:
    """Get a specific post by ID."""
    try:
        post = post_service.get_post(db, post_id)
        post_service.require_published_or_owner(post, current_user)
    except ContentError as exc:
        raise_http(exc)
    return with_author(post, ContentStore(db).get_user(post.author_id))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> Post:
    """Edit a post. Only the author may edit."""
    try:
        return post_service.update_post(
            db, post_id, current_user, **post_data.model_dump(exclude_unset=True)
        )
    except ContentError as exc:
        raise_http(exc)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> None:
    """Delete a post and everything attached to it."""
    try:
        post_service.delete_post(db, post_id, current_user)
    except ContentError as exc:
        raise_http(exc)


@router.post("/{post_id}/view", response_model=ViewResponse)
async def record_view(post_id: int, db: SessionDep) -> ViewResponse:
    """Count one read of the post."""
    try:
        return ViewResponse(views=post_service.increment_view(db, post_id))
    except ContentError as exc:
        raise_http(exc)


@router.post("/{post_id}/read-time", response_model=ReadTimeResponse)
async def record_read_time(
    post_id: int,
    payload: ReadTimeCreate,
    db: SessionDep,
) -> ReadTimeResponse:
    """Add focused reading time flushed by a client."""
    try:
        total = post_service.track_read_time(db, post_id, payload.duration_ms)
    except ContentError as exc:
        raise_http(exc)
    return ReadTimeResponse(total_read_time_ms=total)
