"""SQLAlchemy model for guests registered by hosts over the phone or at the door."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from venue_booking.config import SCHEMA
from venue_booking.models.base import Base


class GuestRow(Base):
    """
    ORM model for lightweight guest identities keyed by phone number.

    Online guests are owned by the external identity service; these rows only
    exist so manual bookings have a stable guest_id.
    """

    __tablename__ = "guests"
    __table_args__ = {"schema": SCHEMA}

    id = Column(UUID, primary_key=True)
    phone = Column(String(32), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
