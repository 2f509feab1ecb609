"""Domain models for the reservation & availability engine.

These are plain dataclasses with no persistence or API concerns.
SQLAlchemy tables live in venue_booking/models (persistence layer) and
pydantic payloads in venue_booking/schemas (transport layer).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from venue_booking.domain.enums import (
    BookingType,
    ReservationSource,
    ReservationStatus,
    VenueStatus,
    VenueType,
)


@dataclass(frozen=True)
class Venue:
    """Read-only snapshot of a bookable unit, owned by the external catalog."""

    id: UUID
    host_id: UUID
    type: VenueType
    max_guest_count: int
    base_price_per_hour: Decimal
    base_price_per_day: Decimal
    currency: str
    is_active: bool
    status: VenueStatus

    @property
    def accepts_reservations(self) -> bool:
        return self.is_active and self.status == VenueStatus.ACTIVE


@dataclass(frozen=True)
class DailyOverride:
    """Per-date exception to a venue's default price and availability."""

    listing_id: UUID
    date: date
    price: Decimal
    is_available: bool = True
    hourly_price: Optional[Decimal] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class HostSettings:
    """Business settings a host applies to every listing they own."""

    host_id: UUID
    auto_confirm_reservations: bool = False
    cancellation_window_hours: int = 24


@dataclass
class Reservation:
    """A guest's claim on a listing for the half-open window [start_time, end_time)."""

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
    final_price: Decimal
    currency: str
    confirmation_number: str
    created_at: datetime
    status: ReservationStatus = ReservationStatus.PENDING
    source: ReservationSource = ReservationSource.ONLINE
    discount_amount: Decimal = Decimal("0")
    special_requests: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    checked_in_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def overlaps(self, start_time: datetime, end_time: datetime) -> bool:
        return start_time < self.end_time and end_time > self.start_time


@dataclass(frozen=True)
class Review:
    """A verified guest review tied to a completed reservation."""

    reservation_id: UUID
    listing_id: UUID
    guest_id: UUID
    rating: int
    comment: Optional[str]
    created_at: datetime
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class CalendarDay:
    """Availability summary for one date of a listing's calendar."""

    date: date
    is_available: bool
    reservation_count: int
    custom_price: Optional[Decimal] = None


@dataclass(frozen=True)
class CalendarUpdate:
    """Operator edit for a single calendar date."""

    date: date
    is_available: bool
    custom_price: Optional[Decimal] = None
    custom_hourly_price: Optional[Decimal] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ManualReservationRequest:
    """Booking taken by a host on behalf of a phone or walk-in guest."""

    listing_id: UUID
    guest_name: str
    guest_phone: str
    start_time: datetime
    end_time: datetime
    guest_count: int
    source: ReservationSource = ReservationSource.PHONE
    total_amount: Optional[Decimal] = None
    special_requests: Optional[str] = None
