"""
Internal helper functions for booking route handlers.

Maps domain errors to HTTP responses and loads the host settings some
operations need, so the handlers stay a thin layer over the services.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status

from venue_booking.db.interfaces import BookingStore, VenueCatalog
from venue_booking.domain.errors import (
    BookingError,
    ErrorCode,
    SlotAlreadyBookedError,
)
from venue_booking.domain.models import HostSettings

_STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_OPERATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error_for(error: BookingError) -> HTTPException:
    """
    Convert a domain error into the HTTPException returned to the client.

    Slot conflicts map to 409; other invalid operations to 422. Internal
    errors never leak their message.

    Args:
        error: Domain error raised by a service

    Returns:
        HTTPException: Exception to raise from the route handler
    """
    if isinstance(error, SlotAlreadyBookedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if error.code == ErrorCode.INTERNAL:
        return HTTPException(status_code=500, detail="Internal server error")
    return HTTPException(status_code=_STATUS_BY_CODE[error.code], detail=error.message)


def host_settings_for_listing(
    store: BookingStore, venues: VenueCatalog, listing_id: UUID
) -> Optional[HostSettings]:
    """
    Load the settings of the host owning a listing.

    Returns:
        Optional[HostSettings]: None if the listing is not in the catalog
    """
    venue = venues.get_venue(listing_id)
    if venue is None:
        return None
    return store.get_host_settings(venue.host_id)
