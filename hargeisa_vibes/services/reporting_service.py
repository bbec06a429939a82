"""Admin dashboard reporting.

Aggregates bookings, accounts and catalog changes into the counters,
notification feed and activity feed shown on the admin dashboard.
"""

import math
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.models.booking import Booking
from hargeisa_vibes.models.service import Service
from hargeisa_vibes.models.user import User
from hargeisa_vibes.schemas.admin import AdminActivity, AdminNotification, AdminStatistics
from hargeisa_vibes.services.catalog_service import CatalogService, catalog_service

NEW_ITEM_WINDOW = timedelta(hours=24)
SERVICE_ACTIVITY_WINDOW = timedelta(days=7)
HIGH_PRIORITY_AMOUNT = Decimal("100")


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class ReportingService:
    """Service for admin dashboard data."""

    def __init__(self, catalog: CatalogService | None = None) -> None:
        self.catalog = catalog or catalog_service

    async def statistics(self, db: AsyncSession) -> AdminStatistics:
        total_users = await db.scalar(
            select(func.count(User.id)).where(User.is_deleted.is_(False))
        )
        total_bookings = await db.scalar(
            select(func.count(Booking.id)).where(Booking.is_deleted.is_(False))
        )
        total_revenue = await db.scalar(
            select(func.coalesce(func.sum(Booking.total_amount), 0)).where(
                Booking.payment_status == "paid", Booking.is_deleted.is_(False)
            )
        )
        pending_bookings = await db.scalar(
            select(func.count(Booking.id)).where(
                Booking.status == "pending", Booking.is_deleted.is_(False)
            )
        )
        active_services = await db.scalar(
            select(func.count(Service.id)).where(Service.is_active.is_(True))
        )
        return AdminStatistics(
            total_users=total_users or 0,
            total_bookings=total_bookings or 0,
            total_revenue=float(total_revenue or 0),
            pending_bookings=pending_bookings or 0,
            active_services=active_services or 0,
        )

    async def notifications(self, db: AsyncSession, limit: int = 50) -> list[AdminNotification]:
        """Feed of new bookings, paid bookings, new customers and updated services.

        Bookings are taken from the 20 most recent, customers from the 10
        most recent and services from the 5 most recently updated. "New"
        means within the last 24 hours.
        """
        now = datetime.now(UTC)
        feed: list[AdminNotification] = []

        result = await db.execute(
            select(Booking)
            .where(Booking.is_deleted.is_(False))
            .order_by(Booking.booking_date.desc())
            .limit(min(limit, 20))
        )
        bookings = list(result.scalars().all())
        titles = await self.catalog.resolve_titles(db, (b.service_id for b in bookings))

        for booking in bookings:
            booked_at = _aware(booking.booking_date)
            if now - booked_at < NEW_ITEM_WINDOW:
                feed.append(
                    AdminNotification(
                        id=f"booking-{booking.id}",
                        type="booking",
                        title="New Booking",
                        message=(
                            f"New booking from {booking.customer_name} "
                            f"for {titles[booking.service_id]}"
                        ),
                        created_at=booked_at,
                        related_id=booking.id,
                        priority="high" if booking.total_amount > HIGH_PRIORITY_AMOUNT else "medium",
                    )
                )
            if booking.payment_status == "paid":
                feed.append(
                    AdminNotification(
                        id=f"payment-{booking.id}",
                        type="payment",
                        title="Payment Confirmed",
                        message=f"Payment confirmed for {booking.customer_name}'s booking",
                        created_at=booked_at,
                        related_id=booking.id,
                        priority="medium",
                    )
                )

        result = await db.execute(
            select(User)
            .where(User.is_deleted.is_(False), User.role == "customer")
            .order_by(User.created_at.desc())
            .limit(10)
        )
        for user in result.scalars():
            created_at = _aware(user.created_at)
            if now - created_at < NEW_ITEM_WINDOW:
                feed.append(
                    AdminNotification(
                        id=f"user-{user.id}",
                        type="user",
                        title="New User Registration",
                        message=f"New user registered: {user.email}",
                        created_at=created_at,
                        related_id=user.id,
                    )
                )

        result = await db.execute(
            select(Service)
            .where(Service.is_active.is_(True))
            .order_by(Service.updated_at.desc())
            .limit(5)
        )
        for service in result.scalars():
            updated_at = _aware(service.updated_at)
            if now - updated_at < NEW_ITEM_WINDOW:
                feed.append(
                    AdminNotification(
                        id=f"service-{service.id}",
                        type="service",
                        title="Service Updated",
                        message=f'Service "{service.title}" has been updated',
                        created_at=updated_at,
                        related_id=service.id,
                    )
                )

        feed.sort(key=lambda n: n.created_at, reverse=True)
        return feed[:limit]

    async def activities(self, db: AsyncSession, limit: int = 10) -> list[AdminActivity]:
        """Recent bookings, registrations, service edits and payments, newest first."""
        share = math.ceil(limit / 3)
        activities: list[AdminActivity] = []

        result = await db.execute(
            select(Booking)
            .where(Booking.is_deleted.is_(False))
            .order_by(Booking.booking_date.desc())
            .limit(limit)
        )
        bookings = list(result.scalars().all())
        titles = await self.catalog.resolve_titles(db, (b.service_id for b in bookings))
        activities.extend(
            AdminActivity(
                id=f"booking-{b.id}",
                type="booking",
                description=f"New booking from {b.customer_name} for {titles[b.service_id]}",
                timestamp=_aware(b.booking_date),
                username=b.customer_email,
            )
            for b in bookings
        )

        result = await db.execute(
            select(User)
            .where(User.is_deleted.is_(False), User.role == "customer")
            .order_by(User.created_at.desc())
            .limit(math.ceil(limit / 2))
        )
        activities.extend(
            AdminActivity(
                id=f"user-{u.id}",
                type="user",
                description=f"New user registration: {u.email}",
                timestamp=_aware(u.created_at),
                username=u.username,
            )
            for u in result.scalars()
        )

        since = datetime.now(UTC) - SERVICE_ACTIVITY_WINDOW
        result = await db.execute(
            select(Service)
            .where(Service.is_active.is_(True), Service.updated_at > since)
            .order_by(Service.updated_at.desc())
            .limit(share)
        )
        activities.extend(
            AdminActivity(
                id=f"service-{s.id}",
                type="service",
                description=f'Service "{s.title}" has been updated',
                timestamp=_aware(s.updated_at),
            )
            for s in result.scalars()
        )

        result = await db.execute(
            select(Booking)
            .where(Booking.is_deleted.is_(False), Booking.payment_status == "paid")
            .order_by(Booking.booking_date.desc())
            .limit(share)
        )
        activities.extend(
            AdminActivity(
                id=f"payment-{b.id}",
                type="payment",
                description=f"Payment confirmed for {b.customer_name}'s booking",
                timestamp=_aware(b.booking_date),
            )
            for b in result.scalars()
        )

        activities.sort(key=lambda a: a.timestamp, reverse=True)
        return activities[:limit]


# Singleton instance
reporting_service = ReportingService()
