from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from venue_booking.db.interfaces import BookingStore, IdentityResolver
from venue_booking.dependencies import (
    get_booking_service,
    get_booking_store,
    get_calendar_service,
    get_current_user_id,
    get_identity_resolver,
)
from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.errors import BookingError
from venue_booking.domain.models import CalendarUpdate, ManualReservationRequest
from venue_booking.routes._booking_helpers import http_error_for
from venue_booking.schemas.calendar import (
    CalendarDayResponse,
    CalendarUpdatePayload,
    DailyOverrideResponse,
)
from venue_booking.schemas.host import ManualReservationPayload, StatusUpdatePayload
from venue_booking.schemas.reservations import ReservationResponse
from venue_booking.services.booking import BookingService
from venue_booking.services.calendar import CalendarService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/reservations",
    status_code=status.HTTP_201_CREATED,
    response_model=ReservationResponse,
)
def create_manual_reservation(
    payload: ManualReservationPayload,
    host_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
    store: BookingStore = Depends(get_booking_store),
    identity_resolver: IdentityResolver = Depends(get_identity_resolver),
) -> ReservationResponse:
    """
    Record a phone or walk-in booking taken by the host.

    The reservation starts confirmed when the host has auto-confirm enabled.

    Args:
        payload: Guest details, window, source and optional negotiated total
        host_id: Host taking the booking (X-User-Id)

    Returns:
        ReservationResponse: The new reservation
    """
    try:
        settings = store.get_host_settings(host_id)
        reservation = service.create_manual_reservation(
            host_id=host_id,
            request=ManualReservationRequest(
                listing_id=payload.listing_id,
                guest_name=payload.guest_name,
                guest_phone=payload.guest_phone,
                start_time=payload.start_time,
                end_time=payload.end_time,
                guest_count=payload.guest_count,
                source=payload.source,
                total_amount=payload.total_amount,
                special_requests=payload.special_requests,
            ),
            settings=settings,
            identity_resolver=identity_resolver,
        )
        return ReservationResponse.model_validate(reservation)

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("manual_reservation_failed", host_id=str(host_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/reservations/{reservation_id}/status", response_model=ReservationResponse)
def update_reservation_status(
    reservation_id: UUID,
    payload: StatusUpdatePayload,
    host_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    """
    Move a reservation along its lifecycle (confirm, reject, check in, complete, ...).

    Returns 422 when the transition is not allowed from the current status.
    """
    try:
        reservation = service.update_reservation_status(
            reservation_id,
            payload.status,
            acting_user_id=host_id,
            reason=payload.reason,
        )
        return ReservationResponse.model_validate(reservation)

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception(
            "reservation_status_update_failed", reservation_id=str(reservation_id), error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/listings/{listing_id}/reservations", response_model=list[ReservationResponse])
def list_listing_reservations(
    listing_id: UUID,
    status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
    host_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> list[ReservationResponse]:
    """List reservations of a listing owned by the calling host."""
    try:
        reservations = service.list_listing_reservations(listing_id, host_id, status_filter)
        return [ReservationResponse.model_validate(r) for r in reservations]

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("listing_reservations_failed", listing_id=str(listing_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/calendar", response_model=list[CalendarDayResponse])
def get_calendar(
    listing_id: UUID = Query(...),
    month: int = Query(..., description="Month number 1-12"),
    year: int = Query(..., description="Four-digit year"),
    host_id: UUID = Depends(get_current_user_id),
    service: CalendarService = Depends(get_calendar_service),
) -> list[CalendarDayResponse]:
    """
    Day-by-day availability of a listing for one month.

    Example:
        >>> GET /host/calendar?listing_id=6f1c...&month=7&year=2026
        [{"date": "2026-07-01", "is_available": true, "reservation_count": 0, "custom_price": null}, ...]
    """
    try:
        days = service.get_calendar(listing_id, month, year, acting_user_id=host_id)
        return [CalendarDayResponse.model_validate(day) for day in days]

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("calendar_fetch_failed", listing_id=str(listing_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/calendar", response_model=list[DailyOverrideResponse])
def update_calendar(
    payload: CalendarUpdatePayload,
    host_id: UUID = Depends(get_current_user_id),
    service: CalendarService = Depends(get_calendar_service),
) -> list[DailyOverrideResponse]:
    """Upsert per-date price and availability overrides of a listing."""
    try:
        overrides = service.update_calendar(
            payload.listing_id,
            [
                CalendarUpdate(
                    date=day.date,
                    is_available=day.is_available,
                    custom_price=day.custom_price,
                    custom_hourly_price=day.custom_hourly_price,
                    note=day.note,
                )
                for day in payload.updates
            ],
            acting_user_id=host_id,
        )
        return [DailyOverrideResponse.model_validate(o) for o in overrides]

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("calendar_update_failed", listing_id=str(payload.listing_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
