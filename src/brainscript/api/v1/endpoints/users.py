"""Account endpoints: identity-provider sync, profile and public pages."""

import logging

from fastapi import APIRouter, status

from brainscript.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError, NotFoundError
from brainscript.models import User
from brainscript.repositories.content_store import ContentStore
from brainscript.schemas.engagement import AuthorStatsResponse, PublicProfileResponse
from brainscript.schemas.post import PostResponse
from brainscript.schemas.user import (
    IdentityEvent,
    ProfileSuggestionsResponse,
    ProfileUpdate,
    ThemeUpdate,
    UserResponse,
    UserSummary,
)
from brainscript.services import users as user_service
from brainscript.services.engagement import EngagementAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

SYNC_EVENTS = ("user.created", "user.updated")


@router.post("/webhook", status_code=status.HTTP_200_OK)
async def identity_webhook(event: IdentityEvent, db: SessionDep) -> dict[str, str]:
    """Mirror accounts created or updated at the identity provider."""
    if event.type not in SYNC_EVENTS:
        logger.debug("Ignoring identity event %s", event.type)
        return {"status": "ignored"}
    user_service.sync_user(
        db,
        email=event.data.primary_email,
        name=event.data.display_name,
        image=event.data.image_url,
    )
    return {"status": "ok"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the caller's account."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    profile: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update the provided profile fields."""
    try:
        return user_service.update_profile(db, current_user, **profile.model_dump())
    except ContentError as exc:
        raise_http(exc)


@router.put("/me/theme", response_model=ThemeUpdate)
async def update_theme(
    payload: ThemeUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ThemeUpdate:
    """Persist the caller's colour theme."""
    try:
        return ThemeUpdate(theme=user_service.update_theme(db, current_user, payload.theme))
    except ContentError as exc:
        raise_http(exc)


@router.get("/suggestions", response_model=ProfileSuggestionsResponse)
async def get_suggestions(db: SessionDep) -> ProfileSuggestionsResponse:
    """Return autocomplete hints for passion and organization."""
    return ProfileSuggestionsResponse.model_validate(user_service.get_suggestions(db))


@router.get("/{user_id}/profile", response_model=PublicProfileResponse)
async def get_public_profile(user_id: int, db: SessionDep) -> PublicProfileResponse:
    """Return a user's public profile, totals and recent posts."""
    profile = EngagementAggregator(ContentStore(db)).get_public_profile(user_id)
    if profile is None:
        raise_http(NotFoundError("User not found"))
    return PublicProfileResponse(
        user=UserSummary.model_validate(profile.user),
        passion=profile.user.passion,
        interest=profile.user.interest,
        organization=profile.user.organization,
        stats=AuthorStatsResponse.model_validate(profile.stats),
        posts=[PostResponse.model_validate(post) for post in profile.posts],
    )
