from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from venue_booking.db.interfaces import BookingStore, VenueCatalog
from venue_booking.dependencies import (
    get_booking_service,
    get_booking_policy,
    get_booking_store,
    get_current_user_id,
    get_review_service,
    get_venue_catalog,
)
from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.errors import BookingError
from venue_booking.routes._booking_helpers import host_settings_for_listing, http_error_for
from venue_booking.schemas.reservations import (
    ReservationCancelPayload,
    ReservationCreatePayload,
    ReservationResponse,
    ReviewCreatePayload,
    ReviewResponse,
)
from venue_booking.services.booking import BookingService
from venue_booking.services.policy import BookingPolicy
from venue_booking.services.reviews import ReviewService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/reservations",
    status_code=status.HTTP_201_CREATED,
    response_model=ReservationResponse,
)
def create_reservation(
    payload: ReservationCreatePayload,
    user_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    """
    Book a listing for the calling guest.

    Args:
        payload: Listing, window, guest count and booking type
        user_id: Guest making the booking (X-User-Id)
        service: Booking service

    Returns:
        ReservationResponse: The new reservation in pending status
    """
    try:
        reservation = service.create_reservation(
            guest_id=user_id,
            listing_id=payload.listing_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
            guest_count=payload.guest_count,
            booking_type=payload.booking_type,
            special_requests=payload.special_requests,
        )
        return ReservationResponse.model_validate(reservation)

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("reservation_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations", response_model=list[ReservationResponse])
def list_my_reservations(
    status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
    user_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> list[ReservationResponse]:
    """List the calling guest's reservations, optionally filtered by status."""
    try:
        reservations = service.list_guest_reservations(user_id, status_filter)
        return [ReservationResponse.model_validate(r) for r in reservations]

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("reservation_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    """Fetch a reservation visible to its guest or the listing's host."""
    try:
        return ReservationResponse.model_validate(service.get_reservation(reservation_id, user_id))

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("reservation_fetch_failed", reservation_id=str(reservation_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: UUID,
    payload: Optional[ReservationCancelPayload] = None,
    user_id: UUID = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
    store: BookingStore = Depends(get_booking_store),
    venues: VenueCatalog = Depends(get_venue_catalog),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> ReservationResponse:
    """
    Cancel a reservation as its guest or as the listing's host.

    When the policy enforces cancellation windows, guests cannot cancel
    inside the host's window.

    Args:
        reservation_id: Reservation to cancel
        payload: Optional cancellation reason
        user_id: Guest or host cancelling (X-User-Id)

    Returns:
        ReservationResponse: The cancelled reservation
    """
    try:
        reservation = service.get_reservation(reservation_id, user_id)
        settings = (
            host_settings_for_listing(store, venues, reservation.listing_id)
            if policy.enforce_cancellation_window
            else None
        )

        cancelled = service.cancel_reservation(
            reservation_id,
            acting_user_id=user_id,
            reason=payload.reason if payload else None,
            settings=settings,
        )
        return ReservationResponse.model_validate(cancelled)

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception(
            "reservation_cancel_failed", reservation_id=str(reservation_id), error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/reservations/{reservation_id}/review",
    status_code=status.HTTP_201_CREATED,
    response_model=ReviewResponse,
)
def review_reservation(
    reservation_id: UUID,
    payload: ReviewCreatePayload,
    user_id: UUID = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    """Review a completed reservation of the calling guest."""
    try:
        review = service.create_review(user_id, reservation_id, payload.rating, payload.comment)
        return ReviewResponse.model_validate(review)

    except BookingError as e:
        raise http_error_for(e)
    except Exception as e:
        logger.exception("review_creation_failed", reservation_id=str(reservation_id), error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
