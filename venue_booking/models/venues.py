"""SQLAlchemy model for venue snapshots published by the external catalog."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from venue_booking.config import SCHEMA
from venue_booking.models.base import Base


class VenueRow(Base):
    """
    ORM model for bookable venues (beaches, pools, yachts, day trips).

    Rows are written by the catalog service; the booking engine only reads
    capacity, base prices, currency, status and the owning host.
    """

    __tablename__ = "venues"
    __table_args__ = {"schema": SCHEMA}

    id = Column(UUID, primary_key=True)
    host_id = Column(UUID, nullable=False, index=True)
    type = Column(String(16), nullable=False)
    max_guest_count = Column(Integer, nullable=False)
    base_price_per_hour = Column(Numeric(12, 2), nullable=False)
    base_price_per_day = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, server_default="USD")
    is_active = Column(Boolean, nullable=False, server_default="true")
    status = Column(String(16), nullable=False, server_default="active")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
