"""In-app notifications for customer accounts."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.core.exceptions import NotFoundError
from hargeisa_vibes.models.booking import Booking
from hargeisa_vibes.models.user import User, UserNotification
from hargeisa_vibes.utils.identifiers import generate_id

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for the customer notification inbox."""

    # Notification types
    DEAL = "deal"
    SYSTEM = "system"
    REMINDER = "reminder"

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: str,
        title: str,
        message: str,
        notification_type: str = SYSTEM,
    ) -> UserNotification:
        """Create an in-app notification.

        Args:
            db: Database session
            user_id: User to notify
            title: Notification title
            message: Notification body text
            notification_type: deal, system or reminder

        Returns:
            UserNotification: The flushed notification
        """
        notification = UserNotification(
            id=generate_id("notif"),
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            is_read=False,
        )
        db.add(notification)
        await db.flush()
        return notification

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[UserNotification]:
        result = await db.execute(
            select(UserNotification)
            .where(UserNotification.user_id == user_id)
            .order_by(UserNotification.created_at.desc())
        )
        return list(result.scalars().all())

    async def mark_read(self, db: AsyncSession, user_id: str, notification_id: str) -> UserNotification:
        result = await db.execute(
            select(UserNotification).where(
                UserNotification.id == notification_id,
                UserNotification.user_id == user_id,
            )
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification", notification_id)
        notification.is_read = True
        await db.flush()
        return notification

    async def notify_booking_received(
        self, db: AsyncSession, booking: Booking, service_title: str
    ) -> UserNotification | None:
        """Drop a reminder in the inbox of the account matching the booking email."""
        result = await db.execute(
            select(User.id).where(
                User.email == booking.customer_email,
                User.is_deleted.is_(False),
            )
        )
        user_id = result.scalar_one_or_none()
        if user_id is None:
            return None

        travel = f" on {booking.travel_date.isoformat()}" if booking.travel_date else ""
        return await self.create_notification(
            db,
            user_id=user_id,
            title="Booking received",
            message=f"Your booking {booking.id} for {service_title}{travel} has been received.",
            notification_type=self.REMINDER,
        )


# Singleton instance
notification_service = NotificationService()
