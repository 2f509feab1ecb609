"""Review creation guarded by reservation status."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

import structlog

from venue_booking.db.interfaces import BookingStore
from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.errors import (
    InvalidOperationError,
    ReservationNotFoundError,
    UnauthorizedError,
)
from venue_booking.domain.models import Review
from venue_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService:
    """Lets guests review reservations they completed."""

    def __init__(self, store: BookingStore, clock: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._clock = clock

    def create_review(
        self,
        guest_id: UUID,
        reservation_id: UUID,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Record a review for a completed reservation.

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
            UnauthorizedError: If the reservation belongs to another guest.
            InvalidOperationError: If the reservation is not completed, was
                already reviewed, or the rating is out of range.
        """
        reservation = self._store.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        if reservation.guest_id != guest_id:
            raise UnauthorizedError("You can only review your own reservations.")
        if reservation.status != ReservationStatus.COMPLETED:
            raise InvalidOperationError("Only completed reservations can be reviewed.")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidOperationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")
        if self._store.has_review(reservation_id):
            raise InvalidOperationError("This reservation has already been reviewed.")

        review = self._store.add_review(
            Review(
                reservation_id=reservation.id,
                listing_id=reservation.listing_id,
                guest_id=guest_id,
                rating=rating,
                comment=(comment or "").strip() or None,
                created_at=self._clock(),
            )
        )
        logger.info(
            "review_created",
            review_id=str(review.id),
            reservation_id=str(reservation.id),
            rating=rating,
        )
        return review
