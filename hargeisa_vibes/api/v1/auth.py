"""Customer authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_db
from hargeisa_vibes.core.exceptions import AuthenticationError, ConflictError
from hargeisa_vibes.core.middleware import login_limiter, register_limiter
from hargeisa_vibes.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
)
from hargeisa_vibes.models.base import utcnow
from hargeisa_vibes.models.user import User
from hargeisa_vibes.schemas.user import AuthResponse, UserLogin, UserRegister, UserResponse
from hargeisa_vibes.utils.identifiers import generate_id, generate_username

router = APIRouter()


def _auth_response(message: str, user: User) -> AuthResponse:
    token = create_access_token({"sub": user.id, "email": user.email, "role": user.role})
    return AuthResponse(message=message, token=token, user=UserResponse.model_validate(user))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(register_limiter)],
)
async def register(
    user_data: UserRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """Register a new customer account."""
    email = str(user_data.email).lower()

    result = await db.execute(select(User.id).where(User.email == email))
    if result.scalar_one_or_none():
        raise ConflictError("User with this email already exists")

    user = User(
        id=generate_id("user"),
        username=await generate_username(db, email),
        email=email,
        password_hash=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        role="customer",
        is_active=True,
        is_verified=False,
        is_deleted=False,
    )
    db.add(user)
    await db.flush()

    return _auth_response("User registered successfully", user)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(login_limiter)])
async def login(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """Login with email and password."""
    result = await db.execute(
        select(User).where(
            User.email == str(credentials.email).lower(),
            User.is_deleted.is_(False),
        )
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    user.last_login = utcnow()
    await db.flush()

    return _auth_response("Login successful", user)
