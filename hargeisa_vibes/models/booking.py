"""Booking database model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hargeisa_vibes.database import Base
from hargeisa_vibes.models.base import TimestampMixin, utcnow


class Booking(TimestampMixin, Base):
    """Booking model."""

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # booking-...
    # Either a services.id or a deals.id, told apart by the "deal-" prefix
    service_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # Customer
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    customer_phone: Mapped[str | None] = mapped_column(String(50))

    # Trip
    booking_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    travel_date: Mapped[date | None] = mapped_column(Date)
    number_of_people: Mapped[int] = mapped_column(Integer, default=1)

    # Pricing
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, confirmed, cancelled, completed, refunded
    payment_status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, paid, failed, refunded, partially_refunded
    payment_method: Mapped[str | None] = mapped_column(String(50))
    transaction_id: Mapped[str | None] = mapped_column(String(255))

    notes: Mapped[str | None] = mapped_column(Text)
    cancellation_reason: Mapped[str | None] = mapped_column(Text)

    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
