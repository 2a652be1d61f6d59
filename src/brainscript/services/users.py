"""Account mirroring and profile management."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from brainscript.core.errors import ValidationError
from brainscript.core.settings import settings
from brainscript.models import User
from brainscript.models.user import ROLE_USER
from brainscript.repositories.content_store import ContentStore

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "passion", "interest", "organization", "image")
THEMES = ("light", "dark", "system")


@dataclass
class ProfileSuggestions:
    """Values other users picked, offered as autocomplete hints."""

    passions: list[str] = field(default_factory=list)
    organizations: list[str] = field(default_factory=list)


def sync_user(
    db: Session,
    *,
    email: str | None,
    name: str | None = None,
    image: str | None = None,
) -> User:
    """Create the account for ``email`` if it does not exist yet.

    Existing accounts are returned untouched so that profile edits made on
    the platform are not overwritten by the identity provider.
    """
    store = ContentStore(db)
    if email:
        existing = store.get_user_by_email(email)
        if existing is not None:
            return existing

    user = User(email=email, name=name, image=image, role=ROLE_USER)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s from identity provider", user.id)
    return user


def update_profile(db: Session, user: User | None, **changes: str | None) -> User:
    """Set the provided non-empty profile fields on the caller's account."""
    caller = ContentStore(db).require_user(user)
    for key, value in changes.items():
        if key in PROFILE_FIELDS and value:
            setattr(caller, key, value.strip())
    db.commit()
    db.refresh(caller)
    return caller


def update_theme(db: Session, user: User | None, theme: str) -> str:
    """Persist the caller's colour theme preference."""
    caller = ContentStore(db).require_user(user)
    if theme not in THEMES:
        raise ValidationError(f"Theme must be one of {', '.join(THEMES)}")
    caller.theme = theme
    db.commit()
    return theme


def get_suggestions(db: Session) -> ProfileSuggestions:
    """Collect distinct passions and organizations from the newest accounts."""
    users = db.scalars(
        select(User).order_by(User.created_at.desc(), User.id.desc()).limit(
            settings.suggestions_scan_size
        )
    )
    passions: list[str] = []
    organizations: list[str] = []
    for user in users:
        if user.passion and user.passion not in passions:
            passions.append(user.passion)
        if user.organization and user.organization not in organizations:
            organizations.append(user.organization)
    return ProfileSuggestions(
        passions=passions[: settings.suggestions_limit],
        organizations=organizations[: settings.suggestions_limit],
    )
