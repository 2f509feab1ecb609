"""Operator calendar: per-day availability and price overrides."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

import structlog

from venue_booking.db.interfaces import BookingStore, VenueCatalog
from venue_booking.domain.errors import (
    InvalidOperationError,
    UnauthorizedError,
    VenueNotFoundError,
)
from venue_booking.domain.models import CalendarDay, CalendarUpdate, DailyOverride, Venue
from venue_booking.metrics import calendar_days_updated
from venue_booking.utils.datetime import day_bounds, month_days

logger = structlog.get_logger(__name__)


class CalendarService:
    """Reads and edits a listing's calendar of daily overrides."""

    def __init__(self, store: BookingStore, venues: VenueCatalog) -> None:
        self._store = store
        self._venues = venues

    def get_calendar(
        self,
        listing_id: UUID,
        month: int,
        year: int,
        acting_user_id: Optional[UUID] = None,
    ) -> list[CalendarDay]:
        """
        Summarize every date of a month for a listing.

        A date's availability is its override when one exists; otherwise the
        date is available while the guests booked that day stay below the
        venue's capacity.

        Args:
            listing_id: Listing whose calendar is read
            month: Month number (1..12)
            year: Four-digit year
            acting_user_id: Host reading the calendar; skipped for trusted callers

        Returns:
            list[CalendarDay]: One entry per date, in order

        Raises:
            InvalidOperationError: If month or year is out of range.
            VenueNotFoundError: If the listing is not in the catalog.
            UnauthorizedError: If acting_user_id is not the listing's host.
        """
        try:
            days = month_days(year, month)
        except ValueError as e:
            raise InvalidOperationError(str(e)) from e
        try:
            month_start, _ = day_bounds(days[0])
            _, month_end = day_bounds(days[-1])
        except OverflowError as e:
            raise InvalidOperationError(f"Year {year} is out of range.") from e

        venue = self._get_owned_venue(listing_id, acting_user_id)

        reservations = [
            r
            for r in self._store.list_reservations_by_listing(listing_id, month_start, month_end)
            if r.status.occupies_slot
        ]
        overrides = self._store.get_overrides(listing_id, days[0], days[-1])

        calendar: list[CalendarDay] = []
        for day in days:
            day_start, day_end = day_bounds(day)
            booked = [r for r in reservations if r.overlaps(day_start, day_end)]
            override = overrides.get(day)

            if override is not None:
                is_available = override.is_available
            else:
                is_available = sum(r.guest_count for r in booked) < venue.max_guest_count

            calendar.append(
                CalendarDay(
                    date=day,
                    is_available=is_available,
                    reservation_count=len(booked),
                    custom_price=override.price if override is not None else None,
                )
            )
        return calendar

    def update_calendar(
        self,
        listing_id: UUID,
        updates: Iterable[CalendarUpdate],
        acting_user_id: Optional[UUID] = None,
    ) -> list[DailyOverride]:
        """
        Upsert daily overrides for a listing.

        Dates repeated within one call keep their last entry. A missing price
        falls back to the venue's base daily price.

        Returns:
            list[DailyOverride]: The overrides written, ordered by date

        Raises:
            VenueNotFoundError: If the listing is not in the catalog.
            UnauthorizedError: If acting_user_id is not the listing's host.
            InvalidOperationError: If a price is negative.
        """
        venue = self._get_owned_venue(listing_id, acting_user_id)

        by_date: dict[date, DailyOverride] = {}
        for update in updates:
            for price in (update.custom_price, update.custom_hourly_price):
                if price is not None and price < 0:
                    raise InvalidOperationError("Calendar prices cannot be negative.")
            by_date[update.date] = DailyOverride(
                listing_id=listing_id,
                date=update.date,
                price=(
                    update.custom_price
                    if update.custom_price is not None
                    else venue.base_price_per_day
                ),
                hourly_price=update.custom_hourly_price,
                is_available=update.is_available,
                note=update.note,
            )

        overrides = [by_date[d] for d in sorted(by_date)]
        if not overrides:
            logger.info("calendar_update_empty", listing_id=str(listing_id))
            return []

        self._store.upsert_overrides(overrides)
        calendar_days_updated.inc(len(overrides))
        logger.info(
            "calendar_updated",
            listing_id=str(listing_id),
            days=len(overrides),
            first_date=overrides[0].date.isoformat(),
            last_date=overrides[-1].date.isoformat(),
        )
        return overrides

    def _get_owned_venue(self, listing_id: UUID, acting_user_id: Optional[UUID]) -> Venue:
        venue = self._venues.get_venue(listing_id)
        if venue is None:
            raise VenueNotFoundError(listing_id)
        if acting_user_id is not None and venue.host_id != acting_user_id:
            raise UnauthorizedError("You are not authorized to manage this listing's calendar.")
        return venue
