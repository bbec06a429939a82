"""Database models."""

from hargeisa_vibes.models.booking import Booking
from hargeisa_vibes.models.deal import Deal, DealItem
from hargeisa_vibes.models.service import Service, ServiceFeature
from hargeisa_vibes.models.setting import SystemSetting
from hargeisa_vibes.models.user import User, UserNotification, UserSavedDeal

__all__ = [
    # Catalog
    "Service",
    "ServiceFeature",
    "Deal",
    "DealItem",
    # Booking
    "Booking",
    # User
    "User",
    "UserNotification",
    "UserSavedDeal",
    # Admin
    "SystemSetting",
]
