"""
PostgreSQL-backed implementations of the store interfaces.

Each public method runs in its own short transaction. Reservation inserts
re-check for overlap inside the transaction and rely on the
ex_reservations_no_overlap exclusion constraint to reject the loser of a race
between two concurrent inserts.
"""

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from venue_booking.db.interfaces import BookingStore, IdentityResolver, VenueCatalog
from venue_booking.db.readers.guests import get_guest_id_by_phone
from venue_booking.db.readers.host_settings import get_host_settings
from venue_booking.db.readers.overrides import get_overrides
from venue_booking.db.readers.reservations import (
    get_reservation,
    has_overlapping_reservation,
    list_reservations_by_guest,
    list_reservations_by_listing,
)
from venue_booking.db.readers.reviews import review_exists
from venue_booking.db.readers.venues import get_venue
from venue_booking.db.writers.guests import insert_guest_if_absent
from venue_booking.db.writers.overrides import upsert_overrides
from venue_booking.db.writers.reservations import insert_reservation, update_reservation_status
from venue_booking.db.writers.reviews import insert_review
from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.errors import (
    ConfirmationNumberCollisionError,
    InternalError,
    InvalidOperationError,
    SlotAlreadyBookedError,
)
from venue_booking.domain.models import DailyOverride, HostSettings, Reservation, Review, Venue
from venue_booking.metrics import db_operations
from venue_booking.utils.phone import normalize_phone

logger = structlog.get_logger(__name__)

EXCLUSION_VIOLATION = "23P01"
OVERLAP_CONSTRAINT = "ex_reservations_no_overlap"
CONFIRMATION_CONSTRAINT = "uq_reservations_confirmation_number"
REVIEW_CONSTRAINT = "reviews_reservation_id_key"


def _sqlstate(error: SQLAlchemyError) -> Optional[str]:
    orig = getattr(error, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _constraint_name(error: SQLAlchemyError) -> str:
    """Name of the violated constraint, read from the driver diagnostics or message."""
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None) or ""
    if not name and orig is not None:
        message = str(orig)
        for candidate in (OVERLAP_CONSTRAINT, CONFIRMATION_CONSTRAINT, REVIEW_CONSTRAINT):
            if candidate in message:
                return candidate
    return name


@contextmanager
def translate_db_errors(
    listing_id: Optional[UUID] = None,
    confirmation_number: Optional[str] = None,
) -> Iterator[None]:
    """
    Map database errors raised inside the block to domain errors.

    Exclusion violations become SlotAlreadyBookedError, a duplicate
    confirmation number becomes ConfirmationNumberCollisionError and any other
    database failure becomes InternalError. Domain errors pass through.
    """
    try:
        yield
    except IntegrityError as e:
        constraint = _constraint_name(e)
        if _sqlstate(e) == EXCLUSION_VIOLATION or constraint == OVERLAP_CONSTRAINT:
            raise SlotAlreadyBookedError(listing_id) from e
        if constraint == CONFIRMATION_CONSTRAINT:
            raise ConfirmationNumberCollisionError(confirmation_number or "") from e
        if constraint == REVIEW_CONSTRAINT:
            raise InvalidOperationError("This reservation has already been reviewed.") from e
        logger.error("db_integrity_error", constraint=constraint, sqlstate=_sqlstate(e))
        raise InternalError("Database integrity error") from e
    except SQLAlchemyError as e:
        logger.error("db_error", error=str(e), error_type=type(e).__name__)
        raise InternalError("Database error") from e


class SqlVenueCatalog(VenueCatalog):
    """Venue catalog reading the venues table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_venue(self, listing_id: UUID) -> Venue | None:
        with translate_db_errors(), self._engine.connect() as conn:
            return get_venue(conn, listing_id)


class SqlIdentityResolver(IdentityResolver):
    """Resolves manual-booking guests to rows of the guests table by phone number."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def find_or_create_guest_by_phone(self, name: str, phone: str) -> UUID:
        try:
            normalized = normalize_phone(phone)
        except ValueError as e:
            raise InvalidOperationError(str(e)) from e

        with translate_db_errors(), self._engine.begin() as conn:
            guest_id = insert_guest_if_absent(conn, name.strip(), normalized)
            if guest_id is not None:
                db_operations.labels(operation="insert", table="guests").inc()
                logger.info("guest_registered", guest_id=str(guest_id))
                return guest_id

            existing = get_guest_id_by_phone(conn, normalized)

        if existing is None:
            raise InternalError("Guest lookup failed")
        return existing


class SqlBookingStore(BookingStore):
    """Booking store over the reservations, daily_overrides, host_settings and reviews tables."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_reservation(self, reservation_id: UUID) -> Reservation | None:
        with translate_db_errors(), self._engine.connect() as conn:
            return get_reservation(conn, reservation_id)

    def has_overlap(
        self,
        listing_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> bool:
        with translate_db_errors(), self._engine.connect() as conn:
            return has_overlapping_reservation(
                conn, listing_id, start_time, end_time, exclude_reservation_id
            )

    def add_reservation(self, reservation: Reservation) -> Reservation:
        with translate_db_errors(
            listing_id=reservation.listing_id,
            confirmation_number=reservation.confirmation_number,
        ):
            with self._engine.begin() as conn:
                if has_overlapping_reservation(
                    conn, reservation.listing_id, reservation.start_time, reservation.end_time
                ):
                    raise SlotAlreadyBookedError(reservation.listing_id)
                insert_reservation(conn, reservation)

        db_operations.labels(operation="insert", table="reservations").inc()
        return reservation

    def update_reservation_status(
        self, reservation: Reservation, expected_status: ReservationStatus
    ) -> bool:
        with translate_db_errors(listing_id=reservation.listing_id):
            with self._engine.begin() as conn:
                updated = update_reservation_status(conn, reservation, expected_status)

        db_operations.labels(operation="update", table="reservations").inc()
        return updated

    def list_reservations_by_listing(
        self,
        listing_id: UUID,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        status: Optional[ReservationStatus] = None,
    ) -> list[Reservation]:
        with translate_db_errors(), self._engine.connect() as conn:
            return list_reservations_by_listing(conn, listing_id, start_time, end_time, status)

    def list_reservations_by_guest(
        self, guest_id: UUID, status: Optional[ReservationStatus] = None
    ) -> list[Reservation]:
        with translate_db_errors(), self._engine.connect() as conn:
            return list_reservations_by_guest(conn, guest_id, status)

    def get_overrides(
        self, listing_id: UUID, start_date: date, end_date: date
    ) -> dict[date, DailyOverride]:
        with translate_db_errors(), self._engine.connect() as conn:
            return get_overrides(conn, listing_id, start_date, end_date)

    def upsert_overrides(self, overrides: list[DailyOverride]) -> None:
        if not overrides:
            return
        with translate_db_errors(), self._engine.begin() as conn:
            upsert_overrides(conn, overrides)
        db_operations.labels(operation="upsert", table="daily_overrides").inc()

    def get_host_settings(self, host_id: UUID) -> HostSettings:
        with translate_db_errors(), self._engine.connect() as conn:
            return get_host_settings(conn, host_id)

    def add_review(self, review: Review) -> Review:
        with translate_db_errors(), self._engine.begin() as conn:
            insert_review(conn, review)
        db_operations.labels(operation="insert", table="reviews").inc()
        return review

    def has_review(self, reservation_id: UUID) -> bool:
        with translate_db_errors(), self._engine.connect() as conn:
            return review_exists(conn, reservation_id)
