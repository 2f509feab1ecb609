"""
Overlap detection over half-open reservation windows.

Two windows [a_start, a_end) and [b_start, b_end) conflict iff
a_start < b_end and a_end > b_start. Windows that only touch at a boundary
do not conflict. Cancelled and rejected reservations never conflict.

The SQL counterpart lives in venue_booking/db/readers/reservations.py and is
backed by the reservations exclusion constraint.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from venue_booking.domain.models import Reservation


def windows_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Return True when two half-open windows intersect."""
    return a_start < b_end and a_end > b_start


def find_conflicts(
    reservations: Iterable[Reservation],
    listing_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_reservation_id: Optional[UUID] = None,
) -> list[Reservation]:
    """
    Return every active reservation on a listing that intersects the window.

    Args:
        reservations: Candidate reservations (any listing, any status)
        listing_id: Listing to check
        start_time: Window start (inclusive)
        end_time: Window end (exclusive)
        exclude_reservation_id: Reservation to ignore, used when re-validating it

    Returns:
        list[Reservation]: Conflicting reservations, empty when the window is free
    """
    return [
        other
        for other in reservations
        if other.listing_id == listing_id
        and other.status.occupies_slot
        and other.id != exclude_reservation_id
        and windows_overlap(start_time, end_time, other.start_time, other.end_time)
    ]


def has_overlap(
    reservations: Iterable[Reservation],
    listing_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_reservation_id: Optional[UUID] = None,
) -> bool:
    """Return True when any active reservation on the listing intersects the window."""
    return bool(
        find_conflicts(reservations, listing_id, start_time, end_time, exclude_reservation_id)
    )
