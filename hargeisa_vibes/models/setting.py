"""Admin panel settings model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hargeisa_vibes.database import Base
from hargeisa_vibes.models.base import TimestampMixin


class SystemSetting(TimestampMixin, Base):
    """One JSON document of settings per category."""

    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False
    )  # general, notifications, security, appearance, email
    settings_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
