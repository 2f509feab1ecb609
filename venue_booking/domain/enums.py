"""Closed sets of domain values.

Values are the lowercase strings used at the persistence and HTTP boundaries.
"""

from enum import Enum


class VenueType(str, Enum):
    BEACH = "beach"
    POOL = "pool"
    YACHT = "yacht"
    DAY_TRIP = "day_trip"


class VenueStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"


class BookingType(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"


class ReservationSource(str, Enum):
    ONLINE = "online"
    PHONE = "phone"
    WALK_IN = "walk_in"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    NO_SHOW = "no_show"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def occupies_slot(self) -> bool:
        """Whether a reservation in this status still holds its time window."""
        return self not in RELEASED_STATUSES


TERMINAL_STATUSES = frozenset(
    {
        ReservationStatus.COMPLETED,
        ReservationStatus.CANCELLED,
        ReservationStatus.REJECTED,
        ReservationStatus.NO_SHOW,
    }
)

RELEASED_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.REJECTED})


class PricingPolicy(str, Enum):
    PER_DATE = "per_date"
    FLAT = "flat"
