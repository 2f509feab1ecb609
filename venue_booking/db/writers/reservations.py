from datetime import datetime, timezone
from typing import Any

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.engine import Connection

from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.models import Reservation
from venue_booking.models.reservations import ReservationRow


def reservation_to_row(reservation: Reservation) -> dict[str, Any]:
    """Flatten a domain Reservation into a reservations row dict."""
    return {
        "id": reservation.id,
        "listing_id": reservation.listing_id,
        "guest_id": reservation.guest_id,
        "venue_type": reservation.venue_type.value,
        "booking_type": reservation.booking_type.value,
        "start_time": reservation.start_time,
        "end_time": reservation.end_time,
        "guest_count": reservation.guest_count,
        "unit_price": reservation.unit_price,
        "unit_count": reservation.unit_count,
        "total_price": reservation.total_price,
        "discount_amount": reservation.discount_amount,
        "final_price": reservation.final_price,
        "currency": reservation.currency,
        "status": reservation.status.value,
        "source": reservation.source.value,
        "confirmation_number": reservation.confirmation_number,
        "special_requests": reservation.special_requests,
        "created_at": reservation.created_at,
        "confirmed_at": reservation.confirmed_at,
        "checked_in_at": reservation.checked_in_at,
        "cancelled_at": reservation.cancelled_at,
        "cancellation_reason": reservation.cancellation_reason,
        "updated_at": reservation.created_at,
    }


def insert_reservation(conn: Connection, reservation: Reservation) -> None:
    """
    Insert a new reservation row.

    The exclusion constraint on (listing_id, tstzrange) and the unique
    confirmation number raise IntegrityError on conflict; callers translate it.

    Args:
        conn (Connection): Active connection inside a transaction.
        reservation (Reservation): Reservation to insert.
    """
    conn.execute(insert(ReservationRow).values(reservation_to_row(reservation)))


def update_reservation_status(
    conn: Connection, reservation: Reservation, expected_status: ReservationStatus
) -> bool:
    """
    Write a reservation's status fields if the stored status is still expected_status.

    Args:
        conn (Connection): Active connection inside a transaction.
        reservation (Reservation): Reservation carrying the new status and timestamps.
        expected_status (ReservationStatus): Status the row must still have.

    Returns:
        bool: True if the row was updated, False if it changed concurrently.
    """
    result = conn.execute(
        update(ReservationRow)
        .where(
            ReservationRow.id == reservation.id,
            ReservationRow.status == expected_status.value,
        )
        .values(
            status=reservation.status.value,
            confirmed_at=reservation.confirmed_at,
            checked_in_at=reservation.checked_in_at,
            cancelled_at=reservation.cancelled_at,
            cancellation_reason=reservation.cancellation_reason,
            updated_at=datetime.now(timezone.utc),
        )
    )
    return result.rowcount == 1
