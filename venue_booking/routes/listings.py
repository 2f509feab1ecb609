from datetime import datetime
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from venue_booking.dependencies import get_booking_service
from venue_booking.domain.errors import BookingError
from venue_booking.routes._booking_helpers import http_error_for
from venue_booking.schemas.reservations import AvailabilityResponse
from venue_booking.services.booking import BookingService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/listings/{listing_id}/availability", response_model=AvailabilityResponse)
def check_availability(
    listing_id: UUID,
    start_time: datetime = Query(..., description="Window start (inclusive, UTC)"),
    end_time: datetime = Query(..., description="Window end (exclusive, UTC)"),
    service: BookingService = Depends(get_booking_service),
) -> AvailabilityResponse:
    """
    Check whether a window on a listing is free.

    Read-only; a later booking attempt may still lose the window to a
    concurrent request.

    Example:
        >>> GET /listings/6f1c.../availability?start_time=2026-07-01T00:00:00Z&end_time=2026-07-02T00:00:00Z
        {"listing_id": "6f1c...", "start_time": "...", "end_time": "...", "available": true}
    """
    try:
        available = service.check_availability(listing_id, start_time, end_time)
        return AvailabilityResponse(
            listing_id=listing_id,
            start_time=start_time,
            end_time=end_time,
            available=available,
        )

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("availability_check_failed", listing_id=str(listing_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
