"""Admin panel endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import case, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import (
    get_current_admin,
    get_db,
    require_admin_read,
    require_admin_update,
    security,
)
from hargeisa_vibes.core.exceptions import AuthenticationError, AuthorizationError
from hargeisa_vibes.core.middleware import admin_login_limiter
from hargeisa_vibes.core.permissions import can_use_admin_panel, permission_names
from hargeisa_vibes.core.security import (
    create_admin_session_token,
    token_expiry,
    verify_password,
    verify_token,
)
from hargeisa_vibes.models.base import utcnow
from hargeisa_vibes.models.user import User
from hargeisa_vibes.schemas.admin import (
    AdminActivity,
    AdminLogin,
    AdminNotification,
    AdminSession,
    AdminStatistics,
    AdminUser,
    SettingsUpdate,
)
from hargeisa_vibes.schemas.common import MessageResponse
from hargeisa_vibes.services import settings_service
from hargeisa_vibes.services.reporting_service import reporting_service

router = APIRouter()


def _admin_user(user: User) -> AdminUser:
    return AdminUser(
        id=user.id,
        username=user.username,
        email=user.email,
        name=user.full_name,
        role=user.role,
        permissions=permission_names(user.role),
        last_login=user.last_login,
    )


# ==================== SESSION ====================


@router.post("/auth", response_model=AdminSession, dependencies=[Depends(admin_login_limiter)])
async def admin_login(
    credentials: AdminLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdminSession:
    """Sign in to the admin panel with a username (or email) and password."""
    username_match = User.username == credentials.username
    result = await db.execute(
        select(User)
        .where(
            or_(username_match, User.email == credentials.username.lower()),
            User.is_deleted.is_(False),
        )
        # An exact username wins over another account's email
        .order_by(case((username_match, 0), else_=1))
        .limit(1)
    )
    user = result.scalars().first()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Invalid username or password")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")
    if not can_use_admin_panel(user.role):
        raise AuthorizationError("This account cannot access the admin panel")

    user.last_login = utcnow()
    await db.flush()

    token = create_admin_session_token({"sub": user.id, "role": user.role})
    return AdminSession(
        user=_admin_user(user),
        token=token,
        expires_at=token_expiry(verify_token(token, token_type="admin")),
    )


@router.get("/session", response_model=AdminSession)
async def admin_session(
    admin: Annotated[User, Depends(get_current_admin)],
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AdminSession:
    """Return the signed-in admin while the session token is still valid."""
    payload = verify_token(credentials.credentials, token_type="admin")
    return AdminSession(
        user=_admin_user(admin),
        token=credentials.credentials,
        expires_at=token_expiry(payload),
    )


# ==================== DASHBOARD ====================


@router.get(
    "/statistics",
    response_model=AdminStatistics,
    dependencies=[Depends(require_admin_read)],
)
async def get_statistics(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdminStatistics:
    return await reporting_service.statistics(db)


@router.get(
    "/notifications",
    response_model=list[AdminNotification],
    dependencies=[Depends(require_admin_read)],
)
async def get_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[AdminNotification]:
    """Recent bookings, payments, registrations and service changes."""
    return await reporting_service.notifications(db, limit=limit)


@router.get(
    "/activities",
    response_model=list[AdminActivity],
    dependencies=[Depends(require_admin_read)],
)
async def get_activities(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[AdminActivity]:
    return await reporting_service.activities(db, limit=limit)


# ==================== SETTINGS ====================


@router.get(
    "/settings",
    response_model=dict[str, dict[str, Any]],
    dependencies=[Depends(require_admin_read)],
)
async def get_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, dict[str, Any]]:
    """All settings categories, defaults filled in for categories never saved."""
    return await settings_service.get_all_settings(db)


@router.put(
    "/settings/{category}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin_update)],
)
async def update_settings(
    category: str,
    update: SettingsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    await settings_service.set_category(db, category, update.settings)
    return MessageResponse(message=f"{category.capitalize()} settings updated successfully")
