# models/reservations.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import ExcludeConstraint, UUID

from venue_booking.config import SCHEMA
from venue_booking.models.base import Base


class ReservationRow(Base):
    """
    ORM model for reservations.

    A reservation holds the half-open window [start_time, end_time) on a
    listing. While its status is anything but cancelled or rejected, the
    exclusion constraint guarantees no other active reservation on the same
    listing intersects that window, so two racing inserts cannot both commit.
    Requires the btree_gist extension (created by the initial migration).
    """

    __tablename__ = "reservations"

    id = Column(UUID, primary_key=True)
    listing_id = Column(
        UUID,
        ForeignKey(f"{SCHEMA}.venues.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    guest_id = Column(UUID, nullable=False, index=True)
    venue_type = Column(String(16), nullable=False)
    booking_type = Column(String(16), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    guest_count = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    unit_count = Column(Integer, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    discount_amount = Column(Numeric(12, 2), nullable=False, server_default="0")
    final_price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(String(16), nullable=False, index=True)
    source = Column(String(16), nullable=False)
    confirmation_number = Column(String(32), nullable=False)
    special_requests = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_reservations_window"),
        CheckConstraint("guest_count > 0", name="ck_reservations_guest_count"),
        CheckConstraint("discount_amount >= 0", name="ck_reservations_discount"),
        UniqueConstraint("confirmation_number", name="uq_reservations_confirmation_number"),
        ExcludeConstraint(
            (listing_id, "="),
            (func.tstzrange(start_time, end_time), "&&"),
            name="ex_reservations_no_overlap",
            using="gist",
            where=text("status NOT IN ('cancelled', 'rejected')"),
        ),
        {"schema": SCHEMA},
    )
