from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from venue_booking.domain.enums import (
    BookingType,
    ReservationSource,
    ReservationStatus,
    VenueType,
)


class ReservationCreatePayload(BaseModel):
    """
    Schema for a guest booking a listing online.
    """

    listing_id: UUID = Field(..., description="Listing to book")
    start_time: datetime = Field(..., description="Window start (inclusive, UTC)")
    end_time: datetime = Field(..., description="Window end (exclusive, UTC)")
    guest_count: int = Field(..., description="Number of guests")
    booking_type: BookingType = Field(..., description="hourly or daily")
    special_requests: Optional[str] = Field(None, max_length=2000, description="Guest notes")


class ReservationCancelPayload(BaseModel):
    reason: Optional[str] = Field(None, max_length=500, description="Cancellation reason")


class ReviewCreatePayload(BaseModel):
    rating: int = Field(..., description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, max_length=2000, description="Review text")


class ReservationResponse(BaseModel):
    """
    Reservation as returned to guests and hosts. Built from the domain dataclass.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    listing_id: UUID
    guest_id: UUID
    venue_type: VenueType
    booking_type: BookingType
    start_time: datetime
    end_time: datetime
    guest_count: int
    unit_price: Decimal
    unit_count: int
    total_price: Decimal
    discount_amount: Decimal
    final_price: Decimal
    currency: str
    status: ReservationStatus
    source: ReservationSource
    confirmation_number: str
    special_requests: Optional[str] = None
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    checked_in_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reservation_id: UUID
    listing_id: UUID
    guest_id: UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class AvailabilityResponse(BaseModel):
    listing_id: UUID
    start_time: datetime
    end_time: datetime
    available: bool
