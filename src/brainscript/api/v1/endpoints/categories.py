"""Category and tag listings."""

from fastapi import APIRouter, Query

from brainscript.api.v1.dependencies import SessionDep
from brainscript.services import posts as post_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[str])
async def list_categories(db: SessionDep) -> list[str]:
    """Every category in use, alphabetically."""
    return post_service.list_categories(db)


@router.get("/tags", response_model=list[str])
async def list_popular_tags(
    db: SessionDep,
    limit: int = Query(10, ge=1, le=50),
) -> list[str]:
    """The most used tags on published posts."""
    return post_service.list_popular_tags(db, limit)
