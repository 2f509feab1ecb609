"""
In-memory fakes of the store interfaces and shared fixtures for unit tests.

The fakes copy reservations on the way in and out, so services only ever see
what a real database round trip would give them.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional
from uuid import UUID, uuid4

import pytest

from venue_booking.db.interfaces import BookingStore, IdentityResolver, VenueCatalog
from venue_booking.domain.enums import ReservationStatus, VenueStatus, VenueType
from venue_booking.domain.errors import ConfirmationNumberCollisionError, SlotAlreadyBookedError
from venue_booking.domain.models import DailyOverride, HostSettings, Reservation, Review, Venue
from venue_booking.services.booking import BookingService
from venue_booking.services.calendar import CalendarService
from venue_booking.services.overlap import has_overlap
from venue_booking.services.policy import BookingPolicy
from venue_booking.services.reviews import ReviewService
from venue_booking.utils.phone import normalize_phone

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryVenueCatalog(VenueCatalog):
    def __init__(self, venues: Iterable[Venue] = ()) -> None:
        self.venues = {venue.id: venue for venue in venues}

    def add(self, venue: Venue) -> Venue:
        self.venues[venue.id] = venue
        return venue

    def get_venue(self, listing_id: UUID) -> Venue | None:
        return self.venues.get(listing_id)


class InMemoryIdentityResolver(IdentityResolver):
    def __init__(self) -> None:
        self.guests: dict[str, UUID] = {}

    def find_or_create_guest_by_phone(self, name: str, phone: str) -> UUID:
        return self.guests.setdefault(normalize_phone(phone), uuid4())


class InMemoryBookingStore(BookingStore):
    """
    BookingStore kept in dicts.

    A lock serializes the overlap check and insert the way the database
    exclusion constraint does.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reservations: dict[UUID, Reservation] = {}
        self.overrides: dict[tuple[UUID, date], DailyOverride] = {}
        self.settings: dict[UUID, HostSettings] = {}
        self.reviews: dict[UUID, Review] = {}

    def get_reservation(self, reservation_id: UUID) -> Reservation | None:
        stored = self.reservations.get(reservation_id)
        return replace(stored) if stored else None

    def has_overlap(
        self,
        listing_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> bool:
        return has_overlap(
            list(self.reservations.values()),
            listing_id,
            start_time,
            end_time,
            exclude_reservation_id,
        )

    def add_reservation(self, reservation: Reservation) -> Reservation:
        with self._lock:
            if any(
                r.confirmation_number == reservation.confirmation_number
                for r in self.reservations.values()
            ):
                raise ConfirmationNumberCollisionError(reservation.confirmation_number)
            if self.has_overlap(
                reservation.listing_id, reservation.start_time, reservation.end_time
            ):
                raise SlotAlreadyBookedError(reservation.listing_id)
            self.reservations[reservation.id] = replace(reservation)
        return reservation

    def update_reservation_status(
        self, reservation: Reservation, expected_status: ReservationStatus
    ) -> bool:
        with self._lock:
            stored = self.reservations.get(reservation.id)
            if stored is None or stored.status != expected_status:
                return False
            self.reservations[reservation.id] = replace(reservation)
            return True

    def list_reservations_by_listing(
        self,
        listing_id: UUID,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        status: Optional[ReservationStatus] = None,
    ) -> list[Reservation]:
        found = [
            replace(r)
            for r in self.reservations.values()
            if r.listing_id == listing_id
            and (status is None or r.status == status)
            and (start_time is None or r.end_time > start_time)
            and (end_time is None or r.start_time < end_time)
        ]
        return sorted(found, key=lambda r: r.start_time)

    def list_reservations_by_guest(
        self, guest_id: UUID, status: Optional[ReservationStatus] = None
    ) -> list[Reservation]:
        found = [
            replace(r)
            for r in self.reservations.values()
            if r.guest_id == guest_id and (status is None or r.status == status)
        ]
        return sorted(found, key=lambda r: r.start_time, reverse=True)

    def get_overrides(
        self, listing_id: UUID, start_date: date, end_date: date
    ) -> dict[date, DailyOverride]:
        return {
            day: override
            for (listing, day), override in self.overrides.items()
            if listing == listing_id and start_date <= day <= end_date
        }

    def upsert_overrides(self, overrides: list[DailyOverride]) -> None:
        for override in overrides:
            self.overrides[(override.listing_id, override.date)] = override

    def get_host_settings(self, host_id: UUID) -> HostSettings:
        return self.settings.get(host_id, HostSettings(host_id=host_id))

    def add_review(self, review: Review) -> Review:
        self.reviews[review.reservation_id] = review
        return review

    def has_review(self, reservation_id: UUID) -> bool:
        return reservation_id in self.reviews


def make_venue(
    host_id: UUID,
    venue_type: VenueType = VenueType.BEACH,
    max_guest_count: int = 6,
    price_per_hour: str = "40.00",
    price_per_day: str = "230.00",
    is_active: bool = True,
    status: VenueStatus = VenueStatus.ACTIVE,
) -> Venue:
    return Venue(
        id=uuid4(),
        host_id=host_id,
        type=venue_type,
        max_guest_count=max_guest_count,
        base_price_per_hour=Decimal(price_per_hour),
        base_price_per_day=Decimal(price_per_day),
        currency="USD",
        is_active=is_active,
        status=status,
    )


@pytest.fixture
def now() -> datetime:
    """Frozen 'current time' used by every service under test."""
    return NOW


@pytest.fixture
def host_id() -> UUID:
    return uuid4()


@pytest.fixture
def guest_id() -> UUID:
    return uuid4()


@pytest.fixture
def beach(host_id: UUID) -> Venue:
    """Beach with max 6 guests at 230/day and 40/hour."""
    return make_venue(host_id)


@pytest.fixture
def pool(host_id: UUID) -> Venue:
    """Pool billed hourly at 10/hour."""
    return make_venue(
        host_id, VenueType.POOL, max_guest_count=20, price_per_hour="10.00", price_per_day="80.00"
    )


@pytest.fixture
def yacht(host_id: UUID) -> Venue:
    return make_venue(
        host_id, VenueType.YACHT, max_guest_count=12, price_per_hour="150.00", price_per_day="900.00"
    )


@pytest.fixture
def catalog(beach: Venue, pool: Venue, yacht: Venue) -> InMemoryVenueCatalog:
    return InMemoryVenueCatalog([beach, pool, yacht])


@pytest.fixture
def add_venue(catalog: InMemoryVenueCatalog, host_id: UUID) -> Callable[..., Venue]:
    """Register an extra venue in the catalog; keyword arguments go to make_venue."""

    def _add(owner: Optional[UUID] = None, **kwargs: Any) -> Venue:
        return catalog.add(make_venue(owner or host_id, **kwargs))

    return _add


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def resolver() -> InMemoryIdentityResolver:
    return InMemoryIdentityResolver()


@pytest.fixture
def policy() -> BookingPolicy:
    return BookingPolicy()


@pytest.fixture
def booking_service(
    store: InMemoryBookingStore,
    catalog: InMemoryVenueCatalog,
    policy: BookingPolicy,
    now: datetime,
) -> BookingService:
    return BookingService(store, catalog, policy, clock=lambda: now)


@pytest.fixture
def calendar_service(
    store: InMemoryBookingStore, catalog: InMemoryVenueCatalog
) -> CalendarService:
    return CalendarService(store, catalog)


@pytest.fixture
def review_service(store: InMemoryBookingStore, now: datetime) -> ReviewService:
    return ReviewService(store, clock=lambda: now)
