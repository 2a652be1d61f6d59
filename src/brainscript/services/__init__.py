"""Business logic services for the BrainScript application."""

from brainscript.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ContentError,
    NotFoundError,
    ValidationError,
)

from .engagement import EngagementAggregator
from .presence import PresenceTracker

__all__ = [
    "EngagementAggregator",
    "PresenceTracker",
    "ContentError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
]
