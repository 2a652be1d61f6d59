"""Exceptions raised by the service layer.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request; the API layer maps each class onto a status code.
"""


class ContentError(RuntimeError):
    """Base exception for content and engagement failures."""


class AuthenticationError(ContentError):
    """Raised when a mutation is attempted without a caller identity."""


class AuthorizationError(ContentError):
    """Raised when the caller lacks the required role or ownership."""


class NotFoundError(ContentError):
    """Raised when a referenced entity does not exist."""


class ConflictError(ContentError):
    """Raised when a write would break a uniqueness rule (e.g. slug)."""


class ValidationError(ContentError):
    """Raised when input is well-formed but not acceptable."""
