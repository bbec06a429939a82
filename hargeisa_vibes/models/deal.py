"""Deal catalog models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hargeisa_vibes.database import Base
from hargeisa_vibes.models.base import TimestampMixin

DEAL_ITEM_KINDS = ("feature", "term", "included", "excluded")


class Deal(TimestampMixin, Base):
    """A time-limited discounted offer."""

    __tablename__ = "deals"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # deal-...
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"))
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("0.00"))
    reviews_count: Mapped[int] = mapped_column(Integer, default=0)
    image: Mapped[str | None] = mapped_column(String(500))
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    discount_percentage: Mapped[int] = mapped_column(Integer, default=0)
    discount_label: Mapped[str] = mapped_column(String(50), default="0% OFF")
    time_left: Mapped[str] = mapped_column(String(50), default="1 week left")
    description: Mapped[str | None] = mapped_column(Text)
    valid_until: Mapped[date | None] = mapped_column(Date)
    is_hot: Mapped[bool] = mapped_column(Boolean, default=False)
    is_ai_recommended: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    items: Mapped[list["DealItem"]] = relationship(
        "DealItem",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="DealItem.position",
        lazy="selectin",
    )

    def items_of(self, kind: str) -> list[str]:
        return [item.text for item in self.items if item.kind == kind]


class DealItem(Base):
    """Feature, term, included or excluded service line of a deal."""

    __tablename__ = "deal_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deal_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)  # feature, term, included, excluded
    text: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)

    deal: Mapped["Deal"] = relationship("Deal", back_populates="items")
