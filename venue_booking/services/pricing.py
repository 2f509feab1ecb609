"""
Pricing calculator for reservation windows.

Billing rule:
    - Pool venues, and Beach venues booked for less than 24 hours, bill per hour.
    - Everything else bills per day.
    - Partial hours/days always round up (1.5 hours bills 2 hours).

Calendar overrides replace the venue base rate for the date a billed segment
starts on when the PER_DATE policy is active. The FLAT policy ignores
overrides and bills the venue base rate for the whole window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from venue_booking.domain.enums import BookingType, PricingPolicy, VenueType
from venue_booking.domain.errors import InvalidOperationError
from venue_booking.domain.models import DailyOverride, Venue
from venue_booking.utils.datetime import ensure_utc

CENTS = Decimal("0.01")
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


@dataclass(frozen=True)
class PriceLine:
    """Billed units that share a date and a rate."""

    date: date
    units: int
    rate: Decimal

    @property
    def amount(self) -> Decimal:
        return self.rate * self.units


@dataclass(frozen=True)
class PriceQuote:
    """Result of pricing a window."""

    booking_type: BookingType
    unit_count: int
    unit_price: Decimal
    total_price: Decimal
    lines: tuple[PriceLine, ...] = field(default_factory=tuple)


def billing_type_for(venue: Venue, duration: timedelta) -> BookingType:
    """Return how a venue bills a window of the given duration."""
    if venue.type == VenueType.POOL or (venue.type == VenueType.BEACH and duration < DAY):
        return BookingType.HOURLY
    return BookingType.DAILY


def ceil_units(duration: timedelta, unit: timedelta) -> int:
    """Count whole units in a duration, rounding any remainder up."""
    whole, remainder = divmod(duration, unit)
    return whole + (1 if remainder else 0)


def _segment_rate(
    venue: Venue,
    booking_type: BookingType,
    override: Optional[DailyOverride],
) -> Decimal:
    if booking_type == BookingType.HOURLY:
        if override is not None and override.hourly_price is not None:
            return override.hourly_price
        return venue.base_price_per_hour
    if override is not None:
        return override.price
    return venue.base_price_per_day


def calculate_price(
    venue: Venue,
    start_time: datetime,
    end_time: datetime,
    guest_count: int,
    overrides: Optional[Mapping[date, DailyOverride]] = None,
    policy: PricingPolicy = PricingPolicy.PER_DATE,
    guest_surcharge_rate: Decimal = Decimal("0"),
) -> PriceQuote:
    """
    Price a reservation window for a venue.

    Args:
        venue: Venue snapshot providing base rates and type
        start_time: Window start (inclusive)
        end_time: Window end (exclusive)
        guest_count: Number of guests (only used by the surcharge hook)
        overrides: Calendar overrides keyed by date, consulted under PER_DATE
        policy: How overrides apply to multi-date windows
        guest_surcharge_rate: Extra fraction per guest beyond the first (0 disables)

    Returns:
        PriceQuote: Billing type, unit count, unit price, total and per-date lines

    Raises:
        InvalidOperationError: If end_time is not after start_time

    Example:
        >>> quote = calculate_price(pool, start, start + timedelta(hours=2.5), 2)
        >>> quote.unit_count, quote.total_price
        (3, Decimal('30.00'))
    """
    start_time = ensure_utc(start_time)
    end_time = ensure_utc(end_time)
    duration = end_time - start_time
    if duration <= timedelta(0):
        raise InvalidOperationError("End time must be after start time.")

    booking_type = billing_type_for(venue, duration)
    unit = HOUR if booking_type == BookingType.HOURLY else DAY
    unit_count = ceil_units(duration, unit)

    applicable = overrides if (overrides and policy == PricingPolicy.PER_DATE) else {}

    # Segments sharing a date and rate collapse into one breakdown line
    grouped: dict[tuple[date, Decimal], int] = {}
    for index in range(unit_count):
        segment_date = (start_time + unit * index).date()
        rate = _segment_rate(venue, booking_type, applicable.get(segment_date))
        key = (segment_date, rate)
        grouped[key] = grouped.get(key, 0) + 1

    lines = tuple(PriceLine(date=d, units=units, rate=rate) for (d, rate), units in grouped.items())
    total = sum((line.amount for line in lines), Decimal("0"))

    if guest_surcharge_rate and guest_count > 1:
        total *= 1 + (guest_count - 1) * guest_surcharge_rate

    total = total.quantize(CENTS, rounding=ROUND_HALF_UP)
    unit_price = (total / unit_count).quantize(CENTS, rounding=ROUND_HALF_UP)

    return PriceQuote(
        booking_type=booking_type,
        unit_count=unit_count,
        unit_price=unit_price,
        total_price=total,
        lines=lines,
    )
