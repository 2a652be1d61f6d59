"""Aggregated engagement statistics."""

from fastapi import APIRouter

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.repositories.content_store import ContentStore
from brainscript.schemas.engagement import (
    AdminStatsResponse,
    AuthorStatsResponse,
    TopWriterResponse,
    WriterStatsResponse,
)
from brainscript.schemas.user import UserSummary
from brainscript.services.engagement import EngagementAggregator

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/me", response_model=AuthorStatsResponse | None)
async def get_my_stats(
    current_user: OptionalUserDep,
    db: SessionDep,
) -> AuthorStatsResponse | None:
    """Totals over the caller's posts; ``null`` when anonymous."""
    stats = EngagementAggregator(ContentStore(db)).get_my_stats(current_user)
    return AuthorStatsResponse.model_validate(stats) if stats is not None else None


@router.get("/admin", response_model=AdminStatsResponse)
async def get_admin_stats(current_user: OptionalUserDep, db: SessionDep) -> AdminStatsResponse:
    """Platform totals for administrators."""
    try:
        stats = EngagementAggregator(ContentStore(db)).get_admin_stats(current_user)
    except ContentError as exc:
        raise_http(exc)
    return AdminStatsResponse.model_validate(stats)


@router.get("/top-writers", response_model=list[TopWriterResponse])
async def get_top_writers(db: SessionDep) -> list[TopWriterResponse]:
    """Leaderboard of the most prolific recent authors."""
    return [
        TopWriterResponse(
            user=UserSummary.model_validate(writer.user),
            stats=WriterStatsResponse.model_validate(writer.stats),
        )
        for writer in EngagementAggregator(ContentStore(db)).get_top_writers()
    ]
