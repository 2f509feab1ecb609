"""Domain error codes for the booking engine.

Callers distinguish failures by class (or by ``code``); the HTTP layer maps
codes to status codes.
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_OPERATION = "INVALID_OPERATION"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL = "INTERNAL"


class BookingError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(BookingError):
    code = ErrorCode.NOT_FOUND


class InvalidOperationError(BookingError):
    code = ErrorCode.INVALID_OPERATION


class UnauthorizedError(BookingError):
    code = ErrorCode.UNAUTHORIZED


class InternalError(BookingError):
    code = ErrorCode.INTERNAL


class VenueNotFoundError(NotFoundError):
    """Raised when a listing is not in the venue catalog."""

    def __init__(self, listing_id: UUID) -> None:
        super().__init__("Listing not found")
        self.listing_id = listing_id


class ReservationNotFoundError(NotFoundError):
    """Raised when a reservation does not exist."""

    def __init__(self, reservation_id: UUID) -> None:
        super().__init__("Reservation not found")
        self.reservation_id = reservation_id


class SlotAlreadyBookedError(InvalidOperationError):
    """Raised when the requested window intersects an active reservation."""

    def __init__(self, listing_id: UUID) -> None:
        super().__init__("The selected dates/times are already booked.")
        self.listing_id = listing_id


class IllegalTransitionError(InvalidOperationError):
    """Raised when a status change is not an edge of the reservation state machine."""

    def __init__(self, current: Enum, target: Enum) -> None:
        super().__init__(
            f"Reservation cannot move from {current.value} to {target.value}."
        )
        self.current = current
        self.target = target


class ConfirmationNumberCollisionError(InternalError):
    """Raised by stores when a generated confirmation number is already taken."""

    def __init__(self, confirmation_number: str) -> None:
        super().__init__("Confirmation number already in use")
        self.confirmation_number = confirmation_number
