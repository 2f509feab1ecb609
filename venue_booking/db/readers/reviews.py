from uuid import UUID

from sqlalchemy import text
from sqlalchemy.engine import Connection

from venue_booking.config import SCHEMA


def review_exists(conn: Connection, reservation_id: UUID) -> bool:
    """
    Check if a review was already written for a reservation.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (UUID): Reservation ID.

    Returns:
        bool: True if a review exists.
    """
    result = conn.execute(
        text(f"SELECT 1 FROM {SCHEMA}.reviews WHERE reservation_id = :reservation_id"),
        {"reservation_id": reservation_id},
    )
    return result.fetchone() is not None
