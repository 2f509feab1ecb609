"""Store interfaces (repository pattern).

The booking services depend only on these interfaces. The SQL implementations
live in venue_booking/db/store.py; tests swap in in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.models import DailyOverride, HostSettings, Reservation, Review, Venue


class VenueCatalog(ABC):
    """Read-only access to venue snapshots owned by the external catalog."""

    @abstractmethod
    def get_venue(self, listing_id: UUID) -> Venue | None:
        """Return the venue snapshot, or None if the listing is unknown."""
        ...


class IdentityResolver(ABC):
    """Guest identity lookup for bookings taken on behalf of a guest."""

    @abstractmethod
    def find_or_create_guest_by_phone(self, name: str, phone: str) -> UUID:
        """Return the guest id registered for a phone number, creating it if needed."""
        ...


class BookingStore(ABC):
    """Interface for reservation, calendar, settings and review persistence."""

    @abstractmethod
    def get_reservation(self, reservation_id: UUID) -> Reservation | None:
        """Return a reservation by ID, or None if not found."""
        ...

    @abstractmethod
    def has_overlap(
        self,
        listing_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> bool:
        """Check whether an active reservation on the listing intersects the window."""
        ...

    @abstractmethod
    def add_reservation(self, reservation: Reservation) -> Reservation:
        """
        Atomically check for overlap and insert a reservation.

        Raises:
            SlotAlreadyBookedError: If an active reservation intersects the window,
                including one committed concurrently.
            ConfirmationNumberCollisionError: If the confirmation number is taken.
        """
        ...

    @abstractmethod
    def update_reservation_status(
        self, reservation: Reservation, expected_status: ReservationStatus
    ) -> bool:
        """
        Persist status fields of a reservation if its stored status is still expected_status.

        Returns:
            bool: False when the stored status changed in the meantime
        """
        ...

    @abstractmethod
    def list_reservations_by_listing(
        self,
        listing_id: UUID,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        status: Optional[ReservationStatus] = None,
    ) -> list[Reservation]:
        """Return reservations of a listing ordered by start_time, optionally within a window."""
        ...

    @abstractmethod
    def list_reservations_by_guest(
        self, guest_id: UUID, status: Optional[ReservationStatus] = None
    ) -> list[Reservation]:
        """Return a guest's reservations ordered by start_time descending."""
        ...

    @abstractmethod
    def get_overrides(
        self, listing_id: UUID, start_date: date, end_date: date
    ) -> dict[date, DailyOverride]:
        """Return overrides of a listing for dates in [start_date, end_date], keyed by date."""
        ...

    @abstractmethod
    def upsert_overrides(self, overrides: list[DailyOverride]) -> None:
        """Insert or replace overrides, one per (listing_id, date)."""
        ...

    @abstractmethod
    def get_host_settings(self, host_id: UUID) -> HostSettings:
        """Return a host's business settings, or defaults when none are stored."""
        ...

    @abstractmethod
    def add_review(self, review: Review) -> Review:
        """Insert a review."""
        ...

    @abstractmethod
    def has_review(self, reservation_id: UUID) -> bool:
        """Check if a reservation has already been reviewed."""
        ...
