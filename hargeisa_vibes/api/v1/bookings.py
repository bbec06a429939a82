"""Booking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_booking_actor, get_db
from hargeisa_vibes.core.middleware import booking_limiter
from hargeisa_vibes.models.user import User
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
from hargeisa_vibes.schemas.common import MessageResponse
from hargeisa_vibes.services.booking_service import BookingFilters, booking_service

router = APIRouter()

Actor = Annotated[User | None, Depends(get_booking_actor)]


@router.post(
    "",
    response_model=BookingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> BookingCreatedResponse:
    """Create a booking and send the customer a receipt."""
    created = await booking_service.create_booking(db, booking_data)
    return BookingCreatedResponse(
        booking_id=created.booking.id,
        service_title=created.service_title,
        total_amount=float(created.booking.total_amount),
        email_sent=created.email_sent,
    )


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    payment_status: Annotated[str | None, Query(alias="paymentStatus")] = None,
    customer_email: Annotated[str | None, Query(alias="customerEmail")] = None,
    search: str | None = None,
) -> list[BookingResponse]:
    """List bookings, newest first."""
    filters = BookingFilters(
        status=status_filter,
        payment_status=payment_status,
        customer_email=customer_email,
        search=search,
    )
    return await booking_service.list_bookings(db, filters)


@router.get("/stats", response_model=BookingStats)
async def booking_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> BookingStats:
    return await booking_service.stats(db)


@router.get("/analytics", response_model=list[DailyBookingTotals])
async def booking_analytics(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
    days: Annotated[int, Query(ge=1, le=365)] = 30,
) -> list[DailyBookingTotals]:
    """Daily booking totals for the last ``days`` days."""
    return await booking_service.analytics(db, days=days)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> BookingResponse:
    return await booking_service.get_booking_view(db, booking_id)


@router.patch("/{booking_id}/status", response_model=MessageResponse)
async def update_booking_status(
    booking_id: str,
    update: BookingStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> MessageResponse:
    """Change a booking's status; payment status is left alone."""
    await booking_service.update_status(
        db, booking_id, update.status, update.cancellation_reason
    )
    return MessageResponse(message="Booking status updated successfully")


@router.patch("/{booking_id}/payment", response_model=MessageResponse)
async def update_booking_payment(
    booking_id: str,
    update: BookingPaymentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> MessageResponse:
    """Change a booking's payment status; booking status is left alone."""
    await booking_service.update_payment_status(
        db, booking_id, update.payment_status, update.transaction_id
    )
    return MessageResponse(message="Payment status updated successfully")


@router.patch("/{booking_id}", response_model=MessageResponse)
async def update_booking(
    booking_id: str,
    update: BookingDetailsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> MessageResponse:
    await booking_service.update_details(db, booking_id, update)
    return MessageResponse(message="Booking updated successfully")


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Actor,
) -> MessageResponse:
    await booking_service.soft_delete(db, booking_id)
    return MessageResponse(message="Booking deleted successfully")
