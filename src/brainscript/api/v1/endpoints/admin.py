"""Administrative endpoints: role management and account removal."""

from fastapi import APIRouter, status

from brainscript.api.v1.dependencies import OptionalUserDep, SessionDep, raise_http
from brainscript.core.errors import ContentError
from brainscript.models import User
from brainscript.schemas.user import RoleUpdate, UserResponse
from brainscript.services import admin as admin_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/bootstrap")
async def bootstrap_super_admin(db: SessionDep) -> dict[str, str]:
    """Promote the configured super admin account. Safe to call repeatedly."""
    try:
        return {"message": admin_service.bootstrap_super_admin(db)}
    except ContentError as exc:
        raise_http(exc)


@router.get("/users", response_model=list[UserResponse])
async def list_users(current_user: OptionalUserDep, db: SessionDep) -> list[User]:
    """List every account, newest first."""
    try:
        return admin_service.list_users(db, current_user)
    except ContentError as exc:
        raise_http(exc)


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> User:
    """Change another account's role."""
    try:
        return admin_service.update_user_role(db, current_user, user_id, payload.role)
    except ContentError as exc:
        raise_http(exc)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> None:
    """Delete an account and everything it authored."""
    try:
        admin_service.delete_user(db, current_user, user_id)
    except ContentError as exc:
        raise_http(exc)
