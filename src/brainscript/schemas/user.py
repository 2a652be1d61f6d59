"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Minimal public identity embedded in other responses."""

    id: int
    name: str | None = None
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """Full account details returned to the account owner and admins."""

    email: str | None = None
    role: str
    passion: str | None = None
    interest: str | None = None
    organization: str | None = None
    theme: str | None = None
    created_at: datetime


class EmailAddress(BaseModel):
    """One address attached to an identity provider account."""

    email_address: str


class IdentityUser(BaseModel):
    """Account fields carried by identity provider webhook events."""

    id: str | None = None
    email_addresses: list[EmailAddress] = Field(default_factory=list)
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    image_url: str | None = None

    @property
    def primary_email(self) -> str | None:
        """Return the first listed address."""
        return self.email_addresses[0].email_address if self.email_addresses else None

    @property
    def display_name(self) -> str | None:
        """Return "first last", falling back to the username."""
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or self.username


class IdentityEvent(BaseModel):
    """Webhook payload sent by the identity provider on sign-up or profile change."""

    type: str = Field(..., description="Event type, e.g. user.created or user.updated")
    data: IdentityUser = Field(default_factory=IdentityUser)


class ProfileUpdate(BaseModel):
    """Schema for editing the caller's profile."""

    name: str | None = Field(None, max_length=100)
    passion: str | None = Field(None, max_length=100)
    interest: str | None = Field(None, max_length=200)
    organization: str | None = Field(None, max_length=200)
    image: str | None = Field(None, description="URL of an already uploaded avatar")


class ThemeUpdate(BaseModel):
    """Schema for changing the colour theme preference."""

    theme: Literal["light", "dark", "system"]


class RoleUpdate(BaseModel):
    """Schema for an admin changing another user's role."""

    role: Literal["user", "admin"]


class ProfileSuggestionsResponse(BaseModel):
    """Autocomplete hints for profile fields."""

    passions: list[str]
    organizations: list[str]

    model_config = ConfigDict(from_attributes=True)
