"""Booking lifecycle management.

Creates bookings, applies status and payment-status changes through the
transition tables in ``hargeisa_vibes.domain`` and answers booking queries.

- ``status`` and ``payment_status`` move independently; marking a booking
  paid never confirms it and cancelling it never refunds it.
- ``total_amount`` is fixed at creation from the referenced Service or Deal
  and only changes through an explicit details update.
- Soft-deleted bookings behave as if they did not exist.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Protocol

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.core.exceptions import NotFoundError
from hargeisa_vibes.domain.booking_state import assert_booking_transition
from hargeisa_vibes.domain.payment_state import assert_payment_transition
from hargeisa_vibes.domain.pricing import (
    UNKNOWN_SERVICE_TITLE,
    calculate_total_amount,
    to_money,
)
from hargeisa_vibes.models.base import utcnow
from hargeisa_vibes.models.booking import Booking
from hargeisa_vibes.schemas.booking import (
    BookingCreate,
    BookingDetailsUpdate,
    BookingResponse,
    BookingStats,
    DailyBookingTotals,
)
from hargeisa_vibes.services.catalog_service import CatalogService, catalog_service
from hargeisa_vibes.services.email_service import email_service
from hargeisa_vibes.services.notification_service import NotificationService, notification_service
from hargeisa_vibes.utils.identifiers import generate_id

logger = logging.getLogger(__name__)

ANALYTICS_WINDOW_DAYS = 30


class ReceiptSender(Protocol):
    async def send_booking_receipt(self, booking: Booking, service_title: str) -> bool: ...


@dataclass
class BookingFilters:
    """Conjunctive booking list filters. ``search`` matches name or email."""

    status: str | None = None
    payment_status: str | None = None
    customer_email: str | None = None
    search: str | None = None


@dataclass
class CreatedBooking:
    booking: Booking
    service_title: str
    email_sent: bool


class BookingService:
    """Service for the booking lifecycle."""

    def __init__(
        self,
        catalog: CatalogService | None = None,
        receipt_sender: ReceiptSender | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self.catalog = catalog or catalog_service
        self.receipt_sender = receipt_sender or email_service
        self.notifications = notifications or notification_service

    # ==================== CREATE ====================

    async def create_booking(self, db: AsyncSession, data: BookingCreate) -> CreatedBooking:
        """Create a booking and email the customer a receipt.

        The referenced Service or Deal supplies the title and unit price.
        A missing reference, or a failed lookup, never blocks the booking:
        the title becomes "Unknown Service" and the caller's amount is kept.

        Args:
            db: Database session
            data: Validated booking submission

        Returns:
            CreatedBooking: The flushed booking, its resolved title and
            whether the receipt went out
        """
        reference = None
        try:
            reference = await self.catalog.resolve_reference(db, data.service_id)
        except SQLAlchemyError:
            logger.warning(
                "Catalog lookup for %s failed; creating booking without a price",
                data.service_id,
                exc_info=True,
            )
            await db.rollback()

        service_title = reference.title if reference else UNKNOWN_SERVICE_TITLE
        total_amount = calculate_total_amount(
            reference.unit_price if reference else None,
            data.number_of_people,
            data.total_amount,
        )

        booking = Booking(
            id=generate_id("booking"),
            service_id=data.service_id,
            customer_name=data.customer_name,
            customer_email=str(data.customer_email),
            customer_phone=data.customer_phone,
            booking_date=data.booking_date or utcnow(),
            travel_date=data.travel_date,
            number_of_people=data.number_of_people,
            total_amount=total_amount,
            status="pending",
            payment_status="pending",
            payment_method=data.payment_method,
            notes=data.notes,
            is_deleted=False,
        )

        # A caller-supplied initial state goes through the same tables as updates
        if data.status and data.status != booking.status:
            assert_booking_transition(booking.status, data.status)
            booking.status = data.status
        if data.payment_status and data.payment_status != booking.payment_status:
            assert_payment_transition(booking.payment_status, data.payment_status)
            booking.payment_status = data.payment_status

        db.add(booking)
        await db.flush()
        logger.info(
            "Created booking %s for %s (%s x%d = %s)",
            booking.id,
            data.service_id,
            service_title,
            booking.number_of_people,
            booking.total_amount,
        )

        await self.notifications.notify_booking_received(db, booking, service_title)
        email_sent = await self._send_receipt(booking, service_title)
        return CreatedBooking(booking=booking, service_title=service_title, email_sent=email_sent)

    async def _send_receipt(self, booking: Booking, service_title: str) -> bool:
        try:
            return await self.receipt_sender.send_booking_receipt(booking, service_title)
        except Exception:
            logger.exception("Receipt for booking %s could not be sent", booking.id)
            return False

    # ==================== READ ====================

    async def get_booking(self, db: AsyncSession, booking_id: str) -> Booking:
        """Get a non-deleted booking or raise NotFoundError."""
        result = await db.execute(
            select(Booking).where(Booking.id == booking_id, Booking.is_deleted.is_(False))
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    async def iter_bookings(
        self, db: AsyncSession, filters: BookingFilters | None = None
    ) -> AsyncIterator[Booking]:
        """Yield matching bookings, newest first.

        The query runs once when iteration starts; the iterator walks that
        snapshot and cannot be restarted.
        """
        filters = filters or BookingFilters()
        query = select(Booking).where(Booking.is_deleted.is_(False))
        if filters.status:
            query = query.where(Booking.status == filters.status)
        if filters.payment_status:
            query = query.where(Booking.payment_status == filters.payment_status)
        if filters.customer_email:
            query = query.where(Booking.customer_email == filters.customer_email)
        if filters.search:
            needle = filters.search.lower()
            query = query.where(
                func.lower(Booking.customer_name).contains(needle, autoescape=True)
                | func.lower(Booking.customer_email).contains(needle, autoescape=True)
            )
        query = query.order_by(Booking.created_at.desc(), Booking.id.desc())

        result = await db.execute(query)
        for booking in result.scalars().all():
            yield booking

    async def list_bookings(
        self, db: AsyncSession, filters: BookingFilters | None = None
    ) -> list[BookingResponse]:
        """List bookings as view objects with their service titles resolved."""
        bookings = [b async for b in self.iter_bookings(db, filters)]
        titles = await self.catalog.resolve_titles(db, (b.service_id for b in bookings))
        return [self.booking_view(b, titles[b.service_id]) for b in bookings]

    async def get_booking_view(self, db: AsyncSession, booking_id: str) -> BookingResponse:
        booking = await self.get_booking(db, booking_id)
        titles = await self.catalog.resolve_titles(db, [booking.service_id])
        return self.booking_view(booking, titles[booking.service_id])

    # ==================== UPDATE ====================

    async def update_status(
        self,
        db: AsyncSession,
        booking_id: str,
        new_status: str,
        cancellation_reason: str | None = None,
    ) -> Booking:
        """Move a booking to a new status.

        A cancellation that carries a reason records it. Any earlier reason
        is otherwise left as it is. Payment status is not touched.
        """
        booking = await self.get_booking(db, booking_id)
        assert_booking_transition(booking.status, new_status)

        previous = booking.status
        booking.status = new_status
        if new_status == "cancelled" and cancellation_reason:
            booking.cancellation_reason = cancellation_reason
        await db.flush()
        logger.info("Booking %s status %s -> %s", booking_id, previous, new_status)
        return booking

    async def update_payment_status(
        self,
        db: AsyncSession,
        booking_id: str,
        new_payment_status: str,
        transaction_id: str | None = None,
    ) -> Booking:
        """Move a booking to a new payment status.

        The transaction id is replaced by the supplied one, or cleared when
        none is given. Booking status is not touched.
        """
        booking = await self.get_booking(db, booking_id)
        assert_payment_transition(booking.payment_status, new_payment_status)

        previous = booking.payment_status
        booking.payment_status = new_payment_status
        booking.transaction_id = transaction_id.strip() if transaction_id and transaction_id.strip() else None
        await db.flush()
        logger.info(
            "Booking %s payment %s -> %s", booking_id, previous, new_payment_status
        )
        return booking

    async def update_details(
        self, db: AsyncSession, booking_id: str, data: BookingDetailsUpdate
    ) -> Booking:
        """Overwrite customer, trip, amount and notes fields."""
        booking = await self.get_booking(db, booking_id)
        booking.customer_name = data.customer_name
        booking.customer_email = str(data.customer_email)
        booking.customer_phone = data.customer_phone
        booking.travel_date = data.travel_date
        booking.number_of_people = data.number_of_people
        booking.total_amount = to_money(data.total_amount)
        booking.notes = data.notes
        await db.flush()
        return booking

    async def soft_delete(self, db: AsyncSession, booking_id: str) -> None:
        booking = await self.get_booking(db, booking_id)
        booking.is_deleted = True
        await db.flush()
        logger.info("Booking %s soft-deleted", booking_id)

    # ==================== REPORTING ====================

    async def stats(self, db: AsyncSession) -> BookingStats:
        """Counters and revenue over all non-deleted bookings."""

        def count_where(condition):
            return func.count(case((condition, 1)))

        def sum_where(condition):
            return func.coalesce(func.sum(case((condition, Booking.total_amount), else_=0)), 0)

        result = await db.execute(
            select(
                func.count(Booking.id).label("total_bookings"),
                count_where(Booking.status == "pending").label("pending_bookings"),
                count_where(Booking.status == "confirmed").label("confirmed_bookings"),
                count_where(Booking.status == "cancelled").label("cancelled_bookings"),
                count_where(Booking.status == "completed").label("completed_bookings"),
                count_where(Booking.payment_status == "paid").label("paid_bookings"),
                count_where(Booking.payment_status == "pending").label("pending_payments"),
                count_where(Booking.payment_status == "failed").label("failed_payments"),
                sum_where(Booking.payment_status == "paid").label("total_revenue"),
                sum_where(Booking.payment_status == "pending").label("pending_revenue"),
            ).where(Booking.is_deleted.is_(False))
        )
        row = result.one()
        return BookingStats(
            total_bookings=row.total_bookings,
            pending_bookings=row.pending_bookings,
            confirmed_bookings=row.confirmed_bookings,
            cancelled_bookings=row.cancelled_bookings,
            completed_bookings=row.completed_bookings,
            paid_bookings=row.paid_bookings,
            pending_payments=row.pending_payments,
            failed_payments=row.failed_payments,
            total_revenue=float(row.total_revenue or 0),
            pending_revenue=float(row.pending_revenue or 0),
        )

    async def analytics(
        self, db: AsyncSession, days: int = ANALYTICS_WINDOW_DAYS
    ) -> list[DailyBookingTotals]:
        """Per-day booking count, paid revenue and average value, newest day first."""
        since = datetime.now(UTC) - timedelta(days=days)
        result = await db.execute(
            select(Booking.created_at, Booking.total_amount, Booking.payment_status).where(
                Booking.is_deleted.is_(False), Booking.created_at >= since
            )
        )

        buckets: dict[date, list[tuple[Decimal, str]]] = {}
        for created_at, amount, payment_status in result:
            buckets.setdefault(created_at.date(), []).append((amount or Decimal("0"), payment_status))

        totals = []
        for day in sorted(buckets, reverse=True):
            rows = buckets[day]
            revenue = sum((amount for amount, ps in rows if ps == "paid"), Decimal("0"))
            average = sum((amount for amount, _ in rows), Decimal("0")) / len(rows)
            totals.append(
                DailyBookingTotals(
                    day=day,
                    total_bookings=len(rows),
                    revenue=float(revenue),
                    avg_booking_value=float(to_money(average)),
                )
            )
        return totals

    # ==================== VIEWS ====================

    @staticmethod
    def booking_view(booking: Booking, service_title: str) -> BookingResponse:
        return BookingResponse(
            id=booking.id,
            service_id=booking.service_id,
            service_title=service_title,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            booking_date=booking.booking_date,
            travel_date=booking.travel_date,
            number_of_people=booking.number_of_people,
            total_amount=float(booking.total_amount or 0),
            status=booking.status,
            payment_status=booking.payment_status,
            payment_method=booking.payment_method,
            transaction_id=booking.transaction_id,
            notes=booking.notes,
            cancellation_reason=booking.cancellation_reason,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


# Singleton instance
booking_service = BookingService()
