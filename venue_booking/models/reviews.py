from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from venue_booking.config import SCHEMA
from venue_booking.models.base import Base


class ReviewRow(Base):
    """ORM model for guest reviews; at most one per reservation."""

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
        {"schema": SCHEMA},
    )

    id = Column(UUID, primary_key=True)
    reservation_id = Column(
        UUID,
        ForeignKey(f"{SCHEMA}.reservations.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    listing_id = Column(UUID, nullable=False, index=True)
    guest_id = Column(UUID, nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
