"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import EmailStr, Field, field_validator

from hargeisa_vibes.schemas.common import CamelModel


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class BookingCreate(CamelModel):
    """Schema for creating a booking."""

    service_id: str = Field(..., min_length=1, max_length=64)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = Field(None, max_length=50)
    booking_date: datetime | None = None
    travel_date: date | None = None
    number_of_people: int = Field(default=1, ge=1, le=500)
    total_amount: Decimal | None = Field(None, ge=0)
    status: str | None = None
    payment_status: str | None = None
    payment_method: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)

    @field_validator(
        "customer_phone", "booking_date", "travel_date", "total_amount",
        "status", "payment_status", "payment_method", "notes",
        mode="before",
    )
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("number_of_people", mode="before")
    @classmethod
    def default_party_size(cls, v):
        return 1 if v in (None, "") else v


class BookingCreatedResponse(CamelModel):
    """Schema for the booking creation acknowledgement."""

    message: str = "Booking created successfully"
    booking_id: str
    service_title: str
    total_amount: float
    email_sent: bool


class BookingStatusUpdate(CamelModel):
    """Schema for changing a booking's status."""

    status: str = Field(..., min_length=1)
    cancellation_reason: str | None = Field(None, max_length=2000)


class BookingPaymentUpdate(CamelModel):
    """Schema for changing a booking's payment status."""

    payment_status: str = Field(..., min_length=1)
    transaction_id: str | None = Field(None, max_length=255)


class BookingDetailsUpdate(CamelModel):
    """Schema for overwriting a booking's customer and trip details."""

    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = Field(None, max_length=50)
    travel_date: date | None = None
    number_of_people: int = Field(default=1, ge=1, le=500)
    total_amount: Decimal = Field(..., ge=0)
    notes: str | None = Field(None, max_length=2000)

    @field_validator("customer_phone", "travel_date", "notes", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)


class BookingResponse(CamelModel):
    """Schema for booking response."""

    id: str
    service_id: str
    service_title: str
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    booking_date: datetime | None = None
    travel_date: date | None = None
    number_of_people: int
    total_amount: float
    status: str
    payment_status: str
    payment_method: str | None = None
    transaction_id: str | None = None
    notes: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class BookingStats(CamelModel):
    """Schema for booking counters shown on the admin dashboard."""

    total_bookings: int
    confirmed_bookings: int
    pending_bookings: int
    cancelled_bookings: int
    completed_bookings: int
    paid_bookings: int
    pending_payments: int
    failed_payments: int
    total_revenue: float
    pending_revenue: float


class DailyBookingTotals(CamelModel):
    """Schema for one day of booking analytics."""

    day: date = Field(..., alias="date")
    total_bookings: int
    revenue: float
    avg_booking_value: float
