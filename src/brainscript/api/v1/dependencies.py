"""Shared API dependencies for authentication and error translation."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.orm import Session

from brainscript.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ContentError,
    NotFoundError,
    ValidationError,
)
from brainscript.core.settings import settings
from brainscript.db.session import get_db
from brainscript.models import User

# HTTP Bearer scheme for tokens issued by the identity provider
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

ERROR_STATUS: dict[type[ContentError], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: ContentError) -> int:
    """Return the HTTP status code for a service exception."""
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def raise_http(exc: ContentError) -> NoReturn:
    """Re-raise a service exception as an ``HTTPException``."""
    raise HTTPException(status_code=status_for(exc), detail=str(exc)) from exc


def _user_from_token(token: str, db: Session) -> User | None:
    """Resolve a bearer token to the account it names.

    Returns ``None`` when the token is valid but the account is not known
    yet (the identity provider webhook has not been delivered).

    Raises:
        JWTError: If the token cannot be verified.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    email = payload.get(settings.jwt_email_claim)
    if not email:
        raise JWTError("token carries no email claim")
    return db.scalars(select(User).where(User.email == email)).first()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        user = _user_from_token(credentials.credentials, db)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    db: SessionDep,
) -> User | None:
    """Return the caller if a valid token was sent, otherwise ``None``.

    Used by read endpoints that degrade to anonymous results and by
    mutations that report their own authentication errors.
    """
    if credentials is None:
        return None
    try:
        return _user_from_token(credentials.credentials, db)
    except JWTError:
        return None


# Type aliases for caller dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
