"""Create booking tables with reservation overlap exclusion

Revision ID: 3b9f2c71a8d4
Revises:
Create Date: 2026-10-19 09:12:31.418207

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3b9f2c71a8d4"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "booking"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    op.create_table(
        "venues",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column("host_id", postgresql.UUID(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("max_guest_count", sa.Integer(), nullable=False),
        sa.Column("base_price_per_hour", sa.Numeric(12, 2), nullable=False),
        sa.Column("base_price_per_day", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), server_default="USD", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("status", sa.String(16), server_default="active", nullable=False),
        *_timestamps(),
        schema=SCHEMA,
    )
    op.create_index("ix_booking_venues_host_id", "venues", ["host_id"], schema=SCHEMA)

    op.create_table(
        "reservations",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column(
            "listing_id",
            postgresql.UUID(),
            sa.ForeignKey(f"{SCHEMA}.venues.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("guest_id", postgresql.UUID(), nullable=False),
        sa.Column("venue_type", sa.String(16), nullable=False),
        sa.Column("booking_type", sa.String(16), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit_count", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_amount", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("final_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("source", sa.String(16), nullable=False),
        sa.Column("confirmation_number", sa.String(32), nullable=False),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("end_time > start_time", name="ck_reservations_window"),
        sa.CheckConstraint("guest_count > 0", name="ck_reservations_guest_count"),
        sa.CheckConstraint("discount_amount >= 0", name="ck_reservations_discount"),
        sa.UniqueConstraint("confirmation_number", name="uq_reservations_confirmation_number"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_booking_reservations_listing_id", "reservations", ["listing_id"], schema=SCHEMA
    )
    op.create_index("ix_booking_reservations_guest_id", "reservations", ["guest_id"], schema=SCHEMA)
    op.create_index("ix_booking_reservations_status", "reservations", ["status"], schema=SCHEMA)

    # Two active reservations on one listing may never share an instant
    op.execute(
        f"""
        ALTER TABLE {SCHEMA}.reservations
        ADD CONSTRAINT ex_reservations_no_overlap
        EXCLUDE USING gist (
            listing_id WITH =,
            tstzrange(start_time, end_time) WITH &&
        )
        WHERE (status NOT IN ('cancelled', 'rejected'))
        """
    )

    op.create_table(
        "daily_overrides",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column(
            "listing_id",
            postgresql.UUID(),
            sa.ForeignKey(f"{SCHEMA}.venues.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("hourly_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_available", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("listing_id", "date", name="uq_daily_overrides_listing_date"),
        schema=SCHEMA,
    )

    op.create_table(
        "guests",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column("phone", sa.String(32), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        schema=SCHEMA,
    )

    op.create_table(
        "host_settings",
        sa.Column("host_id", postgresql.UUID(), primary_key=True),
        sa.Column(
            "auto_confirm_reservations",
            sa.Boolean(),
            server_default=sa.text("FALSE"),
            nullable=False,
        ),
        sa.Column(
            "cancellation_window_hours",
            sa.Integer(),
            server_default=sa.text("24"),
            nullable=False,
        ),
        *_timestamps(),
        schema=SCHEMA,
    )

    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(), primary_key=True),
        sa.Column(
            "reservation_id",
            postgresql.UUID(),
            sa.ForeignKey(f"{SCHEMA}.reservations.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("listing_id", postgresql.UUID(), nullable=False),
        sa.Column("guest_id", postgresql.UUID(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
        schema=SCHEMA,
    )
    op.create_index("ix_booking_reviews_listing_id", "reviews", ["listing_id"], schema=SCHEMA)
    op.create_index("ix_booking_reviews_guest_id", "reviews", ["guest_id"], schema=SCHEMA)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("reviews", schema=SCHEMA)
    op.drop_table("host_settings", schema=SCHEMA)
    op.drop_table("guests", schema=SCHEMA)
    op.drop_table("daily_overrides", schema=SCHEMA)
    op.drop_table("reservations", schema=SCHEMA)
    op.drop_table("venues", schema=SCHEMA)
