"""Booking rules passed explicitly into the booking services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from venue_booking import config
from venue_booking.domain.enums import PricingPolicy


@dataclass(frozen=True)
class BookingPolicy:
    """
    Engine-wide booking rules.

    Attributes:
        grace_period: How far in the past a start time may be and still be accepted
        pricing_policy: How calendar overrides price windows spanning several dates
        guest_surcharge_rate: Extra fraction per guest beyond the first (0 disables)
        enforce_calendar_blocks: Reject windows touching a date marked unavailable
        enforce_cancellation_window: Refuse guest cancellations inside the host's window
        confirmation_max_attempts: Confirmation numbers tried before giving up
    """

    grace_period: timedelta = timedelta(minutes=5)
    pricing_policy: PricingPolicy = PricingPolicy.PER_DATE
    guest_surcharge_rate: Decimal = Decimal("0")
    enforce_calendar_blocks: bool = True
    enforce_cancellation_window: bool = False
    confirmation_max_attempts: int = 5

    @classmethod
    def from_config(cls) -> "BookingPolicy":
        """Build the policy from environment configuration."""
        return cls(
            grace_period=timedelta(minutes=config.BOOKING_GRACE_MINUTES),
            pricing_policy=PricingPolicy(config.PRICING_POLICY),
            guest_surcharge_rate=config.GUEST_SURCHARGE_RATE,
            enforce_calendar_blocks=config.ENFORCE_CALENDAR_BLOCKS,
            enforce_cancellation_window=config.ENFORCE_CANCELLATION_WINDOW,
            confirmation_max_attempts=config.CONFIRMATION_MAX_ATTEMPTS,
        )
