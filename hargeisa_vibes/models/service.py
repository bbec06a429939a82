"""Service catalog models."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hargeisa_vibes.database import Base
from hargeisa_vibes.models.base import TimestampMixin


class Service(TimestampMixin, Base):
    """A bookable local service (tour, transfer, guide, ...)."""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # service-...
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("0.00"))
    image: Mapped[str | None] = mapped_column(String(500))
    location: Mapped[str | None] = mapped_column(String(255))
    is_popular: Mapped[bool] = mapped_column(Boolean, default=False)
    is_new: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    features: Mapped[list["ServiceFeature"]] = relationship(
        "ServiceFeature",
        back_populates="service",
        cascade="all, delete-orphan",
        order_by="ServiceFeature.position",
        lazy="selectin",
    )


class ServiceFeature(Base):
    """Bullet-point feature shown on a service card."""

    __tablename__ = "service_features"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True
    )
    feature: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)

    service: Mapped["Service"] = relationship("Service", back_populates="features")
