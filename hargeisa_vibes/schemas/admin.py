"""Admin panel Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from hargeisa_vibes.schemas.common import CamelModel


class AdminLogin(CamelModel):
    """Schema for admin panel sign-in."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminUser(CamelModel):
    """Schema for the signed-in admin."""

    id: str
    username: str
    email: str
    name: str
    role: str
    permissions: list[str]
    last_login: datetime | None = None


class AdminSession(CamelModel):
    """Schema for an issued admin session."""

    user: AdminUser
    token: str
    expires_at: datetime


class AdminStatistics(CamelModel):
    """Schema for dashboard counters."""

    total_users: int
    total_bookings: int
    total_revenue: float
    pending_bookings: int
    active_services: int


class AdminNotification(CamelModel):
    """Schema for one entry of the admin notification feed."""

    id: str
    type: Literal["booking", "payment", "user", "service"]
    title: str
    message: str
    is_read: bool = False
    created_at: datetime
    related_id: str
    priority: Literal["low", "medium", "high"] = "low"


class AdminActivity(CamelModel):
    """Schema for one entry of the recent activity feed."""

    id: str
    type: Literal["booking", "payment", "user", "service"]
    description: str
    timestamp: datetime
    username: str = "system"


class SettingsUpdate(CamelModel):
    """Schema for replacing one settings category."""

    settings: dict[str, Any]
