from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from venue_booking.config import SCHEMA
from venue_booking.models.base import Base


class DailyOverrideRow(Base):
    """
    ORM model for per-date calendar overrides.

    One row per (listing_id, date). Operators upsert rows to change a day's
    price or close it; rows are never deleted by the booking engine.
    """

    __tablename__ = "daily_overrides"
    __table_args__ = (
        UniqueConstraint("listing_id", "date", name="uq_daily_overrides_listing_date"),
        {"schema": SCHEMA},
    )

    id = Column(UUID, primary_key=True)
    listing_id = Column(
        UUID,
        ForeignKey(f"{SCHEMA}.venues.id", ondelete="CASCADE"),
        nullable=False,
    )
    date = Column(Date, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    hourly_price = Column(Numeric(12, 2), nullable=True)
    is_available = Column(Boolean, nullable=False, server_default="true")
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
