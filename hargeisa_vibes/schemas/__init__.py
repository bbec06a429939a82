"""Pydantic schemas for API request/response validation."""

from hargeisa_vibes.schemas.booking import (
    BookingCreate,
    BookingCreatedResponse,
    BookingDetailsUpdate,
    BookingPaymentUpdate,
    BookingResponse,
    BookingStats,
    BookingStatusUpdate,
    DailyBookingTotals,
)
from hargeisa_vibes.schemas.common import CamelModel, MessageResponse

__all__ = [
    "CamelModel",
    "MessageResponse",
    "BookingCreate",
    "BookingCreatedResponse",
    "BookingDetailsUpdate",
    "BookingPaymentUpdate",
    "BookingResponse",
    "BookingStats",
    "BookingStatusUpdate",
    "DailyBookingTotals",
]
