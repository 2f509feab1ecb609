"""Reservation state machine."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from venue_booking.domain.enums import ReservationStatus
from venue_booking.domain.errors import IllegalTransitionError
from venue_booking.domain.models import Reservation
from venue_booking.utils.datetime import utc_now

RESERVATION_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED, ReservationStatus.REJECTED}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.IN_PROGRESS, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}
    ),
    ReservationStatus.IN_PROGRESS: frozenset({ReservationStatus.COMPLETED}),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.REJECTED: frozenset(),
    ReservationStatus.NO_SHOW: frozenset(),
}


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    return target in RESERVATION_TRANSITIONS.get(current, frozenset())


def assert_transition(current: ReservationStatus, target: ReservationStatus) -> None:
    if not can_transition(current, target):
        raise IllegalTransitionError(current, target)


def apply_transition(
    reservation: Reservation,
    target: ReservationStatus,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ReservationStatus:
    """
    Move a reservation to a new status and stamp the matching timestamp.

    Args:
        reservation: Reservation to mutate in place
        target: Requested status
        reason: Cancellation/rejection reason, ignored for other targets
        now: Transition time (defaults to the current UTC time)

    Returns:
        ReservationStatus: The status the reservation had before the transition

    Raises:
        IllegalTransitionError: If target is not reachable from the current status
    """
    previous = reservation.status
    assert_transition(previous, target)

    now = now or utc_now()
    if target == ReservationStatus.CONFIRMED:
        reservation.confirmed_at = now
    elif target == ReservationStatus.IN_PROGRESS:
        reservation.checked_in_at = now
    elif target in (ReservationStatus.CANCELLED, ReservationStatus.REJECTED):
        reservation.cancelled_at = now
        reservation.cancellation_reason = reason

    reservation.status = target
    return previous
