from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy import select, text
from sqlalchemy.engine import Connection

from venue_booking.config import SCHEMA
from venue_booking.domain.enums import (
    BookingType,
    ReservationSource,
    ReservationStatus,
    VenueType,
)
from venue_booking.domain.models import Reservation
from venue_booking.models.reservations import ReservationRow


def row_to_reservation(row: Mapping[str, Any]) -> Reservation:
    """Convert a reservations row mapping into a domain Reservation."""
    return Reservation(
        id=row["id"],
        listing_id=row["listing_id"],
        guest_id=row["guest_id"],
        venue_type=VenueType(row["venue_type"]),
        booking_type=BookingType(row["booking_type"]),
        start_time=row["start_time"],
        end_time=row["end_time"],
        guest_count=row["guest_count"],
        unit_price=row["unit_price"],
        unit_count=row["unit_count"],
        total_price=row["total_price"],
        discount_amount=row["discount_amount"],
        final_price=row["final_price"],
        currency=row["currency"],
        status=ReservationStatus(row["status"]),
        source=ReservationSource(row["source"]),
        confirmation_number=row["confirmation_number"],
        special_requests=row["special_requests"],
        created_at=row["created_at"],
        confirmed_at=row["confirmed_at"],
        checked_in_at=row["checked_in_at"],
        cancelled_at=row["cancelled_at"],
        cancellation_reason=row["cancellation_reason"],
    )


def get_reservation(conn: Connection, reservation_id: UUID) -> Optional[Reservation]:
    """
    Fetch a reservation by ID.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (UUID): Reservation ID.

    Returns:
        Optional[Reservation]: The reservation or None if not found.
    """
    row = (
        conn.execute(select(ReservationRow).where(ReservationRow.id == reservation_id))
        .mappings()
        .fetchone()
    )
    return row_to_reservation(row) if row else None


def has_overlapping_reservation(
    conn: Connection,
    listing_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_reservation_id: Optional[UUID] = None,
) -> bool:
    """
    Check whether an active reservation on the listing intersects [start_time, end_time).

    Cancelled and rejected reservations are ignored. Windows that only touch
    at a boundary do not intersect.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (UUID): Listing to check.
        start_time (datetime): Window start (inclusive).
        end_time (datetime): Window end (exclusive).
        exclude_reservation_id (Optional[UUID]): Reservation to skip.

    Returns:
        bool: True if a conflicting reservation exists.
    """
    result = conn.execute(
        text(
            f"""
            SELECT 1
            FROM {SCHEMA}.reservations
            WHERE listing_id = :listing_id
              AND status NOT IN ('cancelled', 'rejected')
              AND start_time < :end_time
              AND end_time > :start_time
              AND (CAST(:exclude_id AS uuid) IS NULL OR id <> CAST(:exclude_id AS uuid))
            LIMIT 1
        """
        ),
        {
            "listing_id": listing_id,
            "start_time": start_time,
            "end_time": end_time,
            "exclude_id": exclude_reservation_id,
        },
    )
    return result.fetchone() is not None


def list_reservations_by_listing(
    conn: Connection,
    listing_id: UUID,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    status: Optional[ReservationStatus] = None,
) -> list[Reservation]:
    """
    Fetch a listing's reservations ordered by start_time.

    When a window is given, only reservations intersecting it are returned.
    """
    stmt = select(ReservationRow).where(ReservationRow.listing_id == listing_id)
    if start_time is not None:
        stmt = stmt.where(ReservationRow.end_time > start_time)
    if end_time is not None:
        stmt = stmt.where(ReservationRow.start_time < end_time)
    if status is not None:
        stmt = stmt.where(ReservationRow.status == status.value)

    rows = conn.execute(stmt.order_by(ReservationRow.start_time)).mappings().fetchall()
    return [row_to_reservation(row) for row in rows]


def list_reservations_by_guest(
    conn: Connection, guest_id: UUID, status: Optional[ReservationStatus] = None
) -> list[Reservation]:
    """Fetch a guest's reservations, most recent start first."""
    stmt = select(ReservationRow).where(ReservationRow.guest_id == guest_id)
    if status is not None:
        stmt = stmt.where(ReservationRow.status == status.value)

    rows = conn.execute(stmt.order_by(ReservationRow.start_time.desc())).mappings().fetchall()
    return [row_to_reservation(row) for row in rows]
