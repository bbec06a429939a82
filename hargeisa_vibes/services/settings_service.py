"""Admin panel settings stored as one JSON document per category."""

import copy
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.core.exceptions import ValidationError
from hargeisa_vibes.models.setting import SystemSetting

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "general": {
        "siteName": "Hargeisa Vibes",
        "siteDescription": "Discover and book amazing experiences in Hargeisa",
        "contactEmail": "admin@hargeisavibes.com",
        "contactPhone": "+252 61 123 4567",
        "timezone": "Africa/Mogadishu",
        "currency": "USD",
        "language": "English",
    },
    "notifications": {
        "emailNotifications": True,
        "smsNotifications": False,
        "bookingConfirmations": True,
        "paymentConfirmations": True,
        "newUserRegistrations": True,
        "systemAlerts": True,
        "marketingEmails": False,
    },
    "security": {
        "twoFactorAuth": False,
        "sessionTimeout": 30,
        "passwordExpiry": 90,
        "loginAttempts": 5,
        "ipWhitelist": "",
        "auditLogging": True,
    },
    "appearance": {
        "primaryColor": "#3B82F6",
        "secondaryColor": "#8B5CF6",
        "sidebarCollapsed": False,
        "compactMode": False,
        "showAvatars": True,
        "showNotifications": True,
    },
    "email": {
        "smtpHost": "smtp.gmail.com",
        "smtpPort": 587,
        "smtpUsername": "noreply@hargeisavibes.com",
        "smtpPassword": "••••••••",
        "fromName": "Hargeisa Vibes",
        "fromEmail": "noreply@hargeisavibes.com",
        "replyToEmail": "support@hargeisavibes.com",
    },
}

SETTINGS_CATEGORIES = tuple(DEFAULT_SETTINGS)


async def get_all_settings(db: AsyncSession) -> dict[str, dict[str, Any]]:
    """Stored categories over the defaults; a category never saved keeps its defaults."""
    data = copy.deepcopy(DEFAULT_SETTINGS)
    result = await db.execute(select(SystemSetting).order_by(SystemSetting.category))
    for row in result.scalars():
        data[row.category] = row.settings_data or {}
    return data


async def set_category(
    db: AsyncSession, category: str, settings_data: dict[str, Any]
) -> dict[str, Any]:
    if category not in SETTINGS_CATEGORIES:
        raise ValidationError(
            f"Unknown settings category '{category}'. Allowed: {', '.join(SETTINGS_CATEGORIES)}"
        )
    result = await db.execute(select(SystemSetting).where(SystemSetting.category == category))
    row = result.scalar_one_or_none()
    if row is None:
        row = SystemSetting(category=category, settings_data=settings_data)
        db.add(row)
    else:
        row.settings_data = settings_data
    await db.flush()
    return settings_data
