from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from venue_booking.domain.enums import ReservationSource, ReservationStatus


class ManualReservationPayload(BaseModel):
    """
    Schema for a host booking on behalf of a phone or walk-in guest.
    """

    listing_id: UUID = Field(..., description="Listing to book; must belong to the host")
    guest_name: str = Field(..., min_length=1, max_length=200, description="Guest full name")
    guest_phone: str = Field(..., min_length=1, max_length=32, description="Guest phone number")
    start_time: datetime = Field(..., description="Window start (inclusive, UTC)")
    end_time: datetime = Field(..., description="Window end (exclusive, UTC)")
    guest_count: int = Field(..., description="Number of guests")
    source: ReservationSource = Field(
        ReservationSource.PHONE, description="phone or walk_in"
    )
    total_amount: Optional[Decimal] = Field(
        None, description="Negotiated total replacing the computed price (optional)"
    )
    special_requests: Optional[str] = Field(None, max_length=2000, description="Guest notes")


class StatusUpdatePayload(BaseModel):
    """
    Schema for moving a reservation through its lifecycle.
    """

    status: ReservationStatus = Field(..., description="Target status")
    reason: Optional[str] = Field(
        None, max_length=500, description="Reason recorded on cancellation or rejection"
    )
