"""User administration endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import (
    get_db,
    require_admin_full,
    require_admin_read,
    require_admin_update,
)
from hargeisa_vibes.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from hargeisa_vibes.core.permissions import Permission, UserRole, has_permission, is_privileged_role
from hargeisa_vibes.core.security import get_password_hash
from hargeisa_vibes.models.user import User
from hargeisa_vibes.schemas.common import MessageResponse
from hargeisa_vibes.schemas.user import UserCreate, UserResponse, UserUpdate
from hargeisa_vibes.utils.identifiers import generate_id

router = APIRouter()


def _stored_role(role: str) -> str:
    # Accounts are never stored as super_admin; that role exists only in seeds
    return UserRole.ADMIN.value if role == UserRole.SUPER_ADMIN.value else role


def _require_full_access(actor: User, detail: str) -> None:
    if not has_permission(actor.role, Permission.ALL):
        raise AuthorizationError(detail)


async def _get_user(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id, User.is_deleted.is_(False))
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", user_id)
    return user


@router.get("", response_model=list[UserResponse], dependencies=[Depends(require_admin_read)])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    role: str | None = None,
) -> list[User]:
    """List accounts, newest first."""
    query = select(User).where(User.is_deleted.is_(False))
    if role:
        query = query.where(User.role == role)
    result = await db.execute(query.order_by(User.created_at.desc()))
    return list(result.scalars().all())


@router.get(
    "/username/{username}",
    response_model=UserResponse,
    dependencies=[Depends(require_admin_read)],
)
async def get_user_by_username(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    result = await db.execute(
        select(User).where(User.username == username, User.is_deleted.is_(False))
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", username)
    return user


@router.get("/{user_id}", response_model=UserResponse, dependencies=[Depends(require_admin_read)])
async def get_user(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    return await _get_user(db, user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[User, Depends(require_admin_update)],
) -> User:
    """Create an account. Admin accounts can only be created by full admins."""
    role = _stored_role(user_data.role)
    if is_privileged_role(role):
        _require_full_access(actor, "Only full admins can create admin accounts")

    email = str(user_data.email).lower()
    result = await db.execute(
        select(User.id).where(or_(User.email == email, User.username == user_data.username))
    )
    if result.first():
        raise ConflictError("User with this email or username already exists")

    user = User(
        id=generate_id("user"),
        username=user_data.username,
        email=email,
        password_hash=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        role=role,
        is_active=True,
        is_verified=False,
        is_deleted=False,
    )
    db.add(user)
    await db.flush()
    return user


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    updates: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[User, Depends(require_admin_update)],
) -> User:
    """Update an account. Fields left out of the body are unchanged.

    Admin accounts, and the admin role itself, are reserved for full admins.
    Nobody changes their own role.
    """
    user = await _get_user(db, user_id)
    update_data = updates.model_dump(exclude_unset=True)

    if is_privileged_role(user.role):
        _require_full_access(actor, "Only full admins can modify admin accounts")
    if update_data.get("role"):
        update_data["role"] = _stored_role(update_data["role"])
        if user.id == actor.id and update_data["role"] != user.role:
            raise AuthorizationError("You cannot change your own role")
        if is_privileged_role(update_data["role"]):
            _require_full_access(actor, "Only full admins can grant the admin role")

    if update_data.get("email"):
        email = str(update_data["email"]).lower()
        result = await db.execute(select(User.id).where(User.email == email, User.id != user.id))
        if result.scalar_one_or_none():
            raise ConflictError("User with this email already exists")
        update_data["email"] = email

    password = update_data.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)
    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)

    await db.flush()
    return user


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin_full)],
)
async def delete_user(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    user = await _get_user(db, user_id)
    user.is_deleted = True
    user.is_active = False
    await db.flush()
    return MessageResponse(message="User deleted successfully")
