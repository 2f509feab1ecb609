"""
Booking engine - all reservation business logic lives here.

Services:
- Depend only on interfaces (stores, catalog, identity resolver)
- Validate domain invariants before anything is written
- Drive status changes through the reservation state machine
- Raise domain errors; transports map them to their own error shapes
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional
from uuid import UUID

import structlog

from venue_booking.db.interfaces import BookingStore, IdentityResolver, VenueCatalog
from venue_booking.domain.enums import BookingType, ReservationSource, ReservationStatus
from venue_booking.domain.errors import (
    ConfirmationNumberCollisionError,
    InternalError,
    InvalidOperationError,
    ReservationNotFoundError,
    SlotAlreadyBookedError,
    UnauthorizedError,
    VenueNotFoundError,
)
from venue_booking.domain.models import (
    DailyOverride,
    HostSettings,
    ManualReservationRequest,
    Reservation,
    Venue,
)
from venue_booking.metrics import (
    booking_operation_duration,
    booking_rejections,
    reservation_transitions,
    reservations_created,
)
from venue_booking.services.confirmation import generate_confirmation_number
from venue_booking.services.policy import BookingPolicy
from venue_booking.services.pricing import CENTS, PriceQuote, calculate_price
from venue_booking.services.state_machine import apply_transition, assert_transition
from venue_booking.utils.datetime import covered_dates, ensure_utc, utc_now

logger = structlog.get_logger(__name__)

MANUAL_SOURCES = frozenset({ReservationSource.PHONE, ReservationSource.WALK_IN})


def _reject(reason: str, message: str) -> InvalidOperationError:
    booking_rejections.labels(reason=reason).inc()
    return InvalidOperationError(message)


class BookingService:
    """Creates reservations and moves them through their lifecycle."""

    def __init__(
        self,
        store: BookingStore,
        venues: VenueCatalog,
        policy: Optional[BookingPolicy] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._venues = venues
        self._policy = policy or BookingPolicy()
        self._clock = clock

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_reservation(
        self,
        guest_id: UUID,
        listing_id: UUID,
        start_time: datetime,
        end_time: datetime,
        guest_count: int,
        booking_type: BookingType,
        special_requests: Optional[str] = None,
    ) -> Reservation:
        """
        Book a listing for a guest.

        Args:
            guest_id: Guest making the booking
            listing_id: Listing to book
            start_time: Window start (inclusive, UTC)
            end_time: Window end (exclusive, UTC)
            guest_count: Number of guests
            booking_type: Hourly or daily, as requested by the guest
            special_requests: Free-text guest notes

        Returns:
            Reservation: The persisted reservation in Pending status

        Raises:
            VenueNotFoundError: If the listing is not in the catalog.
            InvalidOperationError: If the window, guest count, venue state,
                calendar or existing reservations forbid the booking.
        """
        with booking_operation_duration.labels(operation="create_reservation").time():
            start_time, end_time = self._validate_window(start_time, end_time)
            venue = self._get_bookable_venue(listing_id, guest_count)
            overrides = self._open_dates(listing_id, start_time, end_time)
            quote = self._quote(venue, start_time, end_time, guest_count, overrides)

            reservation = self._build_reservation(
                venue=venue,
                guest_id=guest_id,
                start_time=start_time,
                end_time=end_time,
                guest_count=guest_count,
                booking_type=booking_type,
                quote=quote,
                source=ReservationSource.ONLINE,
                special_requests=special_requests,
            )
            return self._persist_new(reservation)

    def create_manual_reservation(
        self,
        host_id: UUID,
        request: ManualReservationRequest,
        settings: HostSettings,
        identity_resolver: IdentityResolver,
    ) -> Reservation:
        """
        Book a listing on behalf of a phone or walk-in guest.

        The guest identity is resolved (or lazily created) by phone number, and
        the host's auto-confirm setting decides the initial status.

        Args:
            host_id: Host taking the booking; must own the listing
            request: Guest details, window and source
            settings: The host's business settings
            identity_resolver: Guest lookup/creation by phone

        Returns:
            Reservation: The persisted reservation (Pending or Confirmed)

        Raises:
            VenueNotFoundError: If the listing is not in the catalog.
            UnauthorizedError: If the host does not own the listing.
            InvalidOperationError: Same booking rules as create_reservation, plus
                an online source or a negative total amount.
        """
        with booking_operation_duration.labels(operation="create_manual_reservation").time():
            if request.source not in MANUAL_SOURCES:
                raise InvalidOperationError("Manual reservations must come from phone or walk-in.")
            if request.total_amount is not None and request.total_amount < 0:
                raise InvalidOperationError("Total amount cannot be negative.")

            start_time, end_time = self._validate_window(request.start_time, request.end_time)
            venue = self._get_bookable_venue(request.listing_id, request.guest_count)
            if venue.host_id != host_id:
                raise UnauthorizedError("You are not authorized to book this listing.")

            overrides = self._open_dates(venue.id, start_time, end_time)
            quote = self._quote(venue, start_time, end_time, request.guest_count, overrides)
            if request.total_amount is not None:
                total = request.total_amount.quantize(CENTS, rounding=ROUND_HALF_UP)
                quote = replace(
                    quote,
                    total_price=total,
                    unit_price=(total / quote.unit_count).quantize(CENTS, rounding=ROUND_HALF_UP),
                )

            guest_id = identity_resolver.find_or_create_guest_by_phone(
                request.guest_name, request.guest_phone
            )

            reservation = self._build_reservation(
                venue=venue,
                guest_id=guest_id,
                start_time=start_time,
                end_time=end_time,
                guest_count=request.guest_count,
                booking_type=quote.booking_type,
                quote=quote,
                source=request.source,
                special_requests=request.special_requests,
            )
            if settings.auto_confirm_reservations:
                reservation.status = ReservationStatus.CONFIRMED
                reservation.confirmed_at = reservation.created_at

            return self._persist_new(reservation)

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def check_availability(self, listing_id: UUID, start_time: datetime, end_time: datetime) -> bool:
        """
        Return True when the window can be booked right now.

        Read-only: nothing is reserved, so a later create_reservation may still
        lose the slot to a concurrent booking.
        """
        with booking_operation_duration.labels(operation="check_availability").time():
            start_time = ensure_utc(start_time)
            end_time = ensure_utc(end_time)
            if start_time >= end_time:
                raise InvalidOperationError("End time must be after start time.")

            if self._policy.enforce_calendar_blocks and self._blocked_dates(
                self._overrides_for(listing_id, start_time, end_time)
            ):
                return False
            return not self._store.has_overlap(listing_id, start_time, end_time)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cancel_reservation(
        self,
        reservation_id: UUID,
        acting_user_id: UUID,
        reason: Optional[str] = None,
        settings: Optional[HostSettings] = None,
    ) -> Reservation:
        """
        Cancel a reservation on behalf of its guest or the listing's host.

        Args:
            reservation_id: Reservation to cancel
            acting_user_id: Guest or host performing the cancellation
            reason: Optional cancellation reason
            settings: Host settings; when given, guests cannot cancel inside
                the host's cancellation window

        Returns:
            Reservation: The cancelled reservation

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
            UnauthorizedError: If the actor is neither guest nor host.
            InvalidOperationError: If the reservation can no longer be cancelled.
        """
        with booking_operation_duration.labels(operation="cancel_reservation").time():
            reservation = self._get_reservation(reservation_id)
            is_guest = reservation.guest_id == acting_user_id
            if not is_guest and not self._is_host_of(reservation.listing_id, acting_user_id):
                raise UnauthorizedError("You are not authorized to cancel this reservation.")

            if reservation.status in (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED):
                raise InvalidOperationError(
                    f"Reservation cannot be cancelled because it is already "
                    f"{reservation.status.value}."
                )
            assert_transition(reservation.status, ReservationStatus.CANCELLED)

            if settings is not None and is_guest:
                window = timedelta(hours=settings.cancellation_window_hours)
                if reservation.start_time - self._clock() < window:
                    raise InvalidOperationError(
                        f"Reservations cannot be cancelled less than "
                        f"{settings.cancellation_window_hours} hours before start."
                    )

            self._transition(reservation, ReservationStatus.CANCELLED, reason)
            logger.info(
                "reservation_cancelled",
                reservation_id=str(reservation.id),
                listing_id=str(reservation.listing_id),
                by_guest=is_guest,
            )
            return reservation

    def update_reservation_status(
        self,
        reservation_id: UUID,
        new_status: ReservationStatus,
        acting_user_id: Optional[UUID] = None,
        reason: Optional[str] = None,
    ) -> Reservation:
        """
        Apply a state machine transition to a reservation.

        Args:
            reservation_id: Reservation to update
            new_status: Target status
            acting_user_id: Host performing the change; skipped for trusted callers
            reason: Reason recorded on cancellation/rejection

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
            UnauthorizedError: If acting_user_id is given and is not the listing's host.
            InvalidOperationError: If the transition is not allowed.
        """
        with booking_operation_duration.labels(operation="update_reservation_status").time():
            reservation = self._get_reservation(reservation_id)
            if acting_user_id is not None and not self._is_host_of(
                reservation.listing_id, acting_user_id
            ):
                raise UnauthorizedError("You are not authorized to manage this reservation.")

            self._transition(reservation, new_status, reason)
            return reservation

    def confirm_reservation(
        self, reservation_id: UUID, acting_user_id: Optional[UUID] = None
    ) -> Reservation:
        return self.update_reservation_status(
            reservation_id, ReservationStatus.CONFIRMED, acting_user_id
        )

    def reject_reservation(
        self,
        reservation_id: UUID,
        acting_user_id: Optional[UUID] = None,
        reason: Optional[str] = None,
    ) -> Reservation:
        return self.update_reservation_status(
            reservation_id, ReservationStatus.REJECTED, acting_user_id, reason
        )

    def check_in_reservation(
        self, reservation_id: UUID, acting_user_id: Optional[UUID] = None
    ) -> Reservation:
        return self.update_reservation_status(
            reservation_id, ReservationStatus.IN_PROGRESS, acting_user_id
        )

    def complete_reservation(
        self, reservation_id: UUID, acting_user_id: Optional[UUID] = None
    ) -> Reservation:
        return self.update_reservation_status(
            reservation_id, ReservationStatus.COMPLETED, acting_user_id
        )

    def mark_no_show(
        self, reservation_id: UUID, acting_user_id: Optional[UUID] = None
    ) -> Reservation:
        return self.update_reservation_status(
            reservation_id, ReservationStatus.NO_SHOW, acting_user_id
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_reservation(self, reservation_id: UUID, acting_user_id: UUID) -> Reservation:
        """Return a reservation visible to its guest or the listing's host."""
        reservation = self._get_reservation(reservation_id)
        if reservation.guest_id != acting_user_id and not self._is_host_of(
            reservation.listing_id, acting_user_id
        ):
            raise UnauthorizedError("You are not authorized to view this reservation.")
        return reservation

    def list_guest_reservations(
        self, guest_id: UUID, status: Optional[ReservationStatus] = None
    ) -> list[Reservation]:
        return self._store.list_reservations_by_guest(guest_id, status)

    def list_listing_reservations(
        self,
        listing_id: UUID,
        acting_user_id: Optional[UUID] = None,
        status: Optional[ReservationStatus] = None,
    ) -> list[Reservation]:
        venue = self._get_venue(listing_id)
        if acting_user_id is not None and venue.host_id != acting_user_id:
            raise UnauthorizedError("You are not authorized to view this listing's reservations.")
        return self._store.list_reservations_by_listing(listing_id, status=status)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_venue(self, listing_id: UUID) -> Venue:
        venue = self._venues.get_venue(listing_id)
        if venue is None:
            booking_rejections.labels(reason="venue_not_found").inc()
            raise VenueNotFoundError(listing_id)
        return venue

    def _get_reservation(self, reservation_id: UUID) -> Reservation:
        reservation = self._store.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def _is_host_of(self, listing_id: UUID, user_id: UUID) -> bool:
        venue = self._venues.get_venue(listing_id)
        return venue is not None and venue.host_id == user_id

    def _validate_window(self, start_time: datetime, end_time: datetime) -> tuple[datetime, datetime]:
        start_time = ensure_utc(start_time)
        end_time = ensure_utc(end_time)
        if start_time >= end_time:
            raise _reject("invalid_window", "End time must be after start time.")
        if start_time < self._clock() - self._policy.grace_period:
            raise _reject("past_start", "Reservations cannot start in the past.")
        return start_time, end_time

    def _get_bookable_venue(self, listing_id: UUID, guest_count: int) -> Venue:
        if guest_count < 1:
            raise _reject("guest_count", "At least one guest is required.")
        venue = self._get_venue(listing_id)
        if not venue.accepts_reservations:
            raise _reject(
                "venue_inactive", "This listing is currently not accepting reservations."
            )
        if guest_count > venue.max_guest_count:
            raise _reject(
                "guest_count",
                f"Maximum guest count for this listing is {venue.max_guest_count}.",
            )
        return venue

    def _overrides_for(
        self, listing_id: UUID, start_time: datetime, end_time: datetime
    ) -> dict[date, DailyOverride]:
        dates = list(covered_dates(start_time, end_time))
        return self._store.get_overrides(listing_id, dates[0], dates[-1])

    @staticmethod
    def _blocked_dates(overrides: dict[date, DailyOverride]) -> list[date]:
        return sorted(d for d, override in overrides.items() if not override.is_available)

    def _open_dates(
        self, listing_id: UUID, start_time: datetime, end_time: datetime
    ) -> dict[date, DailyOverride]:
        """Load overrides for the window, rejecting it if any date is closed."""
        overrides = self._overrides_for(listing_id, start_time, end_time)
        if self._policy.enforce_calendar_blocks:
            blocked = self._blocked_dates(overrides)
            if blocked:
                raise _reject(
                    "date_blocked",
                    f"The listing is not available on {blocked[0].isoformat()}.",
                )
        return overrides

    def _quote(
        self,
        venue: Venue,
        start_time: datetime,
        end_time: datetime,
        guest_count: int,
        overrides: dict[date, DailyOverride],
    ) -> PriceQuote:
        return calculate_price(
            venue,
            start_time,
            end_time,
            guest_count,
            overrides=overrides,
            policy=self._policy.pricing_policy,
            guest_surcharge_rate=self._policy.guest_surcharge_rate,
        )

    def _build_reservation(
        self,
        venue: Venue,
        guest_id: UUID,
        start_time: datetime,
        end_time: datetime,
        guest_count: int,
        booking_type: BookingType,
        quote: PriceQuote,
        source: ReservationSource,
        special_requests: Optional[str],
    ) -> Reservation:
        now = self._clock()
        return Reservation(
            listing_id=venue.id,
            guest_id=guest_id,
            venue_type=venue.type,
            booking_type=booking_type,
            start_time=start_time,
            end_time=end_time,
            guest_count=guest_count,
            unit_price=quote.unit_price,
            unit_count=quote.unit_count,
            total_price=quote.total_price,
            discount_amount=Decimal("0"),
            final_price=quote.total_price,
            currency=venue.currency,
            confirmation_number=generate_confirmation_number(now),
            created_at=now,
            source=source,
            special_requests=(special_requests or "").strip() or None,
        )

    def _persist_new(self, reservation: Reservation) -> Reservation:
        """Insert a reservation, regenerating its confirmation number on collision."""
        for attempt in range(1, self._policy.confirmation_max_attempts + 1):
            try:
                saved = self._store.add_reservation(reservation)
            except ConfirmationNumberCollisionError:
                logger.warning(
                    "confirmation_number_collision",
                    confirmation_number=reservation.confirmation_number,
                    attempt=attempt,
                )
                reservation.confirmation_number = generate_confirmation_number(self._clock())
                continue
            except SlotAlreadyBookedError:
                booking_rejections.labels(reason="overlap").inc()
                logger.info(
                    "booking_conflict",
                    listing_id=str(reservation.listing_id),
                    start_time=reservation.start_time.isoformat(),
                    end_time=reservation.end_time.isoformat(),
                )
                raise

            reservations_created.labels(
                source=saved.source.value, status=saved.status.value
            ).inc()
            logger.info(
                "reservation_created",
                reservation_id=str(saved.id),
                listing_id=str(saved.listing_id),
                confirmation_number=saved.confirmation_number,
                status=saved.status.value,
                source=saved.source.value,
                total_price=str(saved.total_price),
            )
            return saved

        raise InternalError("Could not allocate a unique confirmation number.")

    def _transition(
        self,
        reservation: Reservation,
        target: ReservationStatus,
        reason: Optional[str] = None,
    ) -> None:
        previous = apply_transition(reservation, target, reason=reason, now=self._clock())
        if not self._store.update_reservation_status(reservation, expected_status=previous):
            raise InvalidOperationError(
                "Reservation was modified by another request; reload and try again."
            )
        reservation_transitions.labels(from_status=previous.value, to_status=target.value).inc()
        logger.info(
            "reservation_status_changed",
            reservation_id=str(reservation.id),
            from_status=previous.value,
            to_status=target.value,
        )
