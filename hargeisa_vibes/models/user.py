"""User-related database models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hargeisa_vibes.database import Base
from hargeisa_vibes.models.base import TimestampMixin, utcnow

if TYPE_CHECKING:
    from hargeisa_vibes.models.deal import Deal


class User(TimestampMixin, Base):
    """User account (customers and admin panel staff)."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # user-...
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    phone: Mapped[str | None] = mapped_column(String(50))
    avatar: Mapped[str | None] = mapped_column(String(500))

    role: Mapped[str] = mapped_column(
        String(20), default="customer", index=True
    )  # customer, moderator, admin, super_admin

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    notifications: Mapped[list["UserNotification"]] = relationship(
        "UserNotification", back_populates="user", cascade="all, delete-orphan"
    )
    saved_deals: Mapped[list["UserSavedDeal"]] = relationship(
        "UserSavedDeal", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.username


class UserNotification(Base):
    """In-app notification shown on the customer dashboard."""

    __tablename__ = "user_notifications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # notif-...
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="system")  # deal, system, reminder
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="notifications")


class UserSavedDeal(Base):
    """A deal bookmarked by a customer."""

    __tablename__ = "user_saved_deals"
    __table_args__ = (UniqueConstraint("user_id", "deal_id", name="uq_user_saved_deal"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # saved-...
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    deal_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("deals.id", ondelete="CASCADE"), nullable=False
    )
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="saved_deals")
    deal: Mapped["Deal"] = relationship("Deal", lazy="selectin")
