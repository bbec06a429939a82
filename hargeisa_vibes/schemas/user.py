"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from hargeisa_vibes.schemas.common import CamelModel

RoleName = Literal["customer", "moderator", "admin", "super_admin"]


class UserRegister(CamelModel):
    """Schema for customer self-registration."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)


class UserLogin(CamelModel):
    """Schema for customer login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserCreate(CamelModel):
    """Schema for an admin creating an account."""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    role: RoleName = "customer"


class UserUpdate(CamelModel):
    """Schema for an admin updating an account. Omitted fields are left alone."""

    email: EmailStr | None = None
    password: str | None = Field(None, min_length=6, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    avatar: str | None = Field(None, max_length=500)
    role: RoleName | None = None
    is_active: bool | None = None
    is_verified: bool | None = None


class UserResponse(CamelModel):
    """Schema for user response."""

    id: str
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    avatar: str | None = None
    role: str
    is_active: bool
    is_verified: bool
    last_login: datetime | None = None
    created_at: datetime


class AuthResponse(CamelModel):
    """Schema for register/login responses."""

    message: str
    token: str
    user: UserResponse


class SaveDealRequest(CamelModel):
    """Schema for bookmarking a deal."""

    deal_id: str = Field(..., min_length=1)


class SavedDealResponse(CamelModel):
    """Schema for a bookmarked deal."""

    id: str
    deal_id: str
    title: str
    price: float
    image: str | None = None
    location: str | None = None
    saved_at: datetime


class UserNotificationResponse(CamelModel):
    """Schema for an in-app notification."""

    id: str
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime
