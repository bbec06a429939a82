"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all tables for the Hargeisa Vibes API:
- Users, their notifications and saved deals
- Services and deals with their list items
- Bookings
- Admin panel settings
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("username", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("phone", sa.String(50)),
        sa.Column("avatar", sa.String(500)),
        sa.Column("role", sa.String(20), nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, nullable=False),
        sa.Column("is_verified", sa.Boolean, nullable=False),
        sa.Column("is_deleted", sa.Boolean, nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True)),
        *_timestamps(),
    )

    # ==================== CATALOG ====================
    op.create_table(
        "services",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("category", sa.String(100), nullable=False, index=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False),
        sa.Column("image", sa.String(500)),
        sa.Column("location", sa.String(255)),
        sa.Column("is_popular", sa.Boolean, nullable=False),
        sa.Column("is_new", sa.Boolean, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "service_features",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "service_id",
            sa.String(64),
            sa.ForeignKey("services.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("feature", sa.String(255), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
    )

    op.create_table(
        "deals",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("original_price", sa.Numeric(10, 2)),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False),
        sa.Column("reviews_count", sa.Integer, nullable=False),
        sa.Column("image", sa.String(500)),
        sa.Column("category", sa.String(100), nullable=False, index=True),
        sa.Column("discount_percentage", sa.Integer, nullable=False),
        sa.Column("discount_label", sa.String(50), nullable=False),
        sa.Column("time_left", sa.String(50), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("valid_until", sa.Date),
        sa.Column("is_hot", sa.Boolean, nullable=False),
        sa.Column("is_ai_recommended", sa.Boolean, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "deal_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "deal_id",
            sa.String(64),
            sa.ForeignKey("deals.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
    )

    # ==================== BOOKINGS ====================
    # service_id holds a service or deal id, so it carries no foreign key
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("service_id", sa.String(64), nullable=False, index=True),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False, index=True),
        sa.Column("customer_phone", sa.String(50)),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("travel_date", sa.Date),
        sa.Column("number_of_people", sa.Integer, nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column("payment_status", sa.String(20), nullable=False, index=True),
        sa.Column("payment_method", sa.String(50)),
        sa.Column("transaction_id", sa.String(255)),
        sa.Column("notes", sa.Text),
        sa.Column("cancellation_reason", sa.Text),
        sa.Column("is_deleted", sa.Boolean, nullable=False, index=True),
        *_timestamps(),
    )

    # ==================== ACCOUNT EXTRAS ====================
    op.create_table(
        "user_notifications",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, index=True),
    )

    op.create_table(
        "user_saved_deals",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "deal_id",
            sa.String(64),
            sa.ForeignKey("deals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("saved_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "deal_id", name="uq_user_saved_deal"),
    )

    # ==================== ADMIN ====================
    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("category", sa.String(50), unique=True, nullable=False),
        sa.Column("settings_data", sa.JSON, nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("system_settings")
    op.drop_table("user_saved_deals")
    op.drop_table("user_notifications")
    op.drop_table("bookings")
    op.drop_table("deal_items")
    op.drop_table("deals")
    op.drop_table("service_features")
    op.drop_table("services")
    op.drop_table("users")
