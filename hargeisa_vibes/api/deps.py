"""API dependencies for authentication and common operations."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.config import settings
from hargeisa_vibes.core.exceptions import AuthenticationError, AuthorizationError
from hargeisa_vibes.core.permissions import Permission, can_use_admin_panel, has_permission
from hargeisa_vibes.core.security import verify_token
from hargeisa_vibes.database import get_db
from hargeisa_vibes.models.user import User

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_admin",
    "get_booking_actor",
    "AdminPermissionChecker",
    "require_admin_read",
    "require_admin_update",
    "require_admin_full",
]

# Security scheme; missing credentials are turned into 401 below
security = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


async def _load_active_user(db: AsyncSession, user_id: str | None) -> User:
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(
        select(User).where(User.id == user_id, User.is_deleted.is_(False))
    )
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")
    return user


def _require_credentials(credentials: HTTPAuthorizationCredentials | None) -> str:
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return credentials.credentials


async def get_current_user(
    credentials: Credentials,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated customer from the bearer token."""
    payload = verify_token(_require_credentials(credentials), token_type="access")
    return await _load_active_user(db, payload.get("sub"))


async def get_current_admin(
    credentials: Credentials,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the admin behind a server-issued admin session token.

    The token's expiry is checked on every call, and the account is
    reloaded so a deactivated or demoted admin loses access at once.
    """
    payload = verify_token(_require_credentials(credentials), token_type="admin")
    user = await _load_active_user(db, payload.get("sub"))
    if not can_use_admin_panel(user.role):
        raise AuthorizationError("Admin access required")
    return user


async def get_booking_actor(
    credentials: Credentials,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Gate for booking CRUD.

    Open unless ``BOOKINGS_REQUIRE_AUTH`` is set; then either a customer
    token or an admin session token is accepted.
    """
    if not settings.bookings_require_auth:
        return None

    token = _require_credentials(credentials)
    try:
        payload = verify_token(token, token_type="access")
    except AuthenticationError:
        payload = verify_token(token, token_type="admin")
    return await _load_active_user(db, payload.get("sub"))


class AdminPermissionChecker:
    """Check that the signed-in admin's role grants a permission."""

    def __init__(self, permission: Permission):
        self.permission = permission

    async def __call__(
        self,
        admin: Annotated[User, Depends(get_current_admin)],
    ) -> User:
        if not has_permission(admin.role, self.permission):
            raise AuthorizationError(
                f"Permission '{self.permission.value}' is required for this action"
            )
        return admin


# Convenience instances
require_admin_read = AdminPermissionChecker(Permission.READ)
require_admin_update = AdminPermissionChecker(Permission.UPDATE)
require_admin_full = AdminPermissionChecker(Permission.ALL)
