"""
Unit tests for CalendarService.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest

from venue_booking.domain.enums import BookingType
from venue_booking.domain.errors import InvalidOperationError, UnauthorizedError, VenueNotFoundError
from venue_booking.domain.models import CalendarUpdate, Venue
from venue_booking.services.booking import BookingService
from venue_booking.services.calendar import CalendarService

JULY_1 = datetime(2026, 7, 1, tzinfo=timezone.utc)


@pytest.mark.unit
def test_empty_month_is_fully_available(calendar_service: CalendarService, beach: Venue) -> None:
    days = calendar_service.get_calendar(beach.id, 7, 2026)

    assert len(days) == 31
    assert days[0].date == date(2026, 7, 1)
    assert days[-1].date == date(2026, 7, 31)
    assert all(day.is_available and day.reservation_count == 0 for day in days)
    assert all(day.custom_price is None for day in days)


@pytest.mark.unit
def test_february_of_leap_year(calendar_service: CalendarService, beach: Venue) -> None:
    assert len(calendar_service.get_calendar(beach.id, 2, 2028)) == 29


@pytest.mark.unit
def test_full_capacity_day_is_unavailable(
    calendar_service: CalendarService, booking_service: BookingService, beach: Venue
) -> None:
    booking_service.create_reservation(
        uuid4(), beach.id, JULY_1, JULY_1 + timedelta(days=1), 6, BookingType.DAILY
    )

    days = {day.date: day for day in calendar_service.get_calendar(beach.id, 7, 2026)}

    assert days[date(2026, 7, 1)].reservation_count == 1
    assert not days[date(2026, 7, 1)].is_available
    assert days[date(2026, 7, 2)].reservation_count == 0
    assert days[date(2026, 7, 2)].is_available


@pytest.mark.unit
def test_partially_booked_day_stays_available(
    calendar_service: CalendarService, booking_service: BookingService, pool: Venue
) -> None:
    start = JULY_1 + timedelta(hours=10)
    booking_service.create_reservation(
        uuid4(), pool.id, start, start + timedelta(hours=2), 5, BookingType.HOURLY
    )

    july_1 = calendar_service.get_calendar(pool.id, 7, 2026)[0]

    assert july_1.reservation_count == 1
    assert july_1.is_available


@pytest.mark.unit
def test_cancelled_reservations_are_not_counted(
    calendar_service: CalendarService,
    booking_service: BookingService,
    beach: Venue,
    guest_id: UUID,
) -> None:
    reservation = booking_service.create_reservation(
        guest_id, beach.id, JULY_1, JULY_1 + timedelta(days=1), 6, BookingType.DAILY
    )
    booking_service.cancel_reservation(reservation.id, guest_id)

    july_1 = calendar_service.get_calendar(beach.id, 7, 2026)[0]

    assert july_1.reservation_count == 0
    assert july_1.is_available


@pytest.mark.unit
def test_multi_day_reservation_counts_on_each_day(
    calendar_service: CalendarService, booking_service: BookingService, beach: Venue
) -> None:
    booking_service.create_reservation(
        uuid4(), beach.id, JULY_1, JULY_1 + timedelta(days=3), 2, BookingType.DAILY
    )

    days = calendar_service.get_calendar(beach.id, 7, 2026)

    assert [day.reservation_count for day in days[:4]] == [1, 1, 1, 0]


@pytest.mark.unit
def test_override_decides_availability_and_price(
    calendar_service: CalendarService, beach: Venue
) -> None:
    calendar_service.update_calendar(
        beach.id,
        [
            CalendarUpdate(date=date(2026, 7, 4), is_available=False),
            CalendarUpdate(date=date(2026, 7, 5), is_available=True, custom_price=Decimal("300")),
        ],
    )

    days = {day.date: day for day in calendar_service.get_calendar(beach.id, 7, 2026)}

    assert not days[date(2026, 7, 4)].is_available
    assert days[date(2026, 7, 4)].custom_price == Decimal("230.00")
    assert days[date(2026, 7, 5)].is_available
    assert days[date(2026, 7, 5)].custom_price == Decimal("300")


@pytest.mark.unit
@pytest.mark.parametrize("month", [0, 13])
def test_invalid_month_is_rejected(
    calendar_service: CalendarService, beach: Venue, month: int
) -> None:
    with pytest.raises(InvalidOperationError):
        calendar_service.get_calendar(beach.id, month, 2026)


@pytest.mark.unit
def test_last_representable_month_is_rejected(
    calendar_service: CalendarService, beach: Venue
) -> None:
    with pytest.raises(InvalidOperationError, match="9999"):
        calendar_service.get_calendar(beach.id, 12, 9999)


@pytest.mark.unit
def test_unknown_listing_is_not_found(calendar_service: CalendarService) -> None:
    with pytest.raises(VenueNotFoundError):
        calendar_service.get_calendar(uuid4(), 7, 2026)


@pytest.mark.unit
def test_only_host_reads_or_edits_calendar(
    calendar_service: CalendarService, beach: Venue, host_id: UUID
) -> None:
    assert calendar_service.get_calendar(beach.id, 7, 2026, acting_user_id=host_id)

    with pytest.raises(UnauthorizedError):
        calendar_service.get_calendar(beach.id, 7, 2026, acting_user_id=uuid4())
    with pytest.raises(UnauthorizedError):
        calendar_service.update_calendar(
            beach.id, [CalendarUpdate(date=date(2026, 7, 1), is_available=False)], uuid4()
        )


@pytest.mark.unit
def test_duplicate_dates_keep_last_entry(
    calendar_service: CalendarService, beach: Venue, store: Any
) -> None:
    written = calendar_service.update_calendar(
        beach.id,
        [
            CalendarUpdate(date=date(2026, 7, 2), is_available=False),
            CalendarUpdate(date=date(2026, 7, 1), is_available=True, custom_price=Decimal("250")),
            CalendarUpdate(date=date(2026, 7, 2), is_available=True, custom_price=Decimal("275")),
        ],
    )

    assert [o.date for o in written] == [date(2026, 7, 1), date(2026, 7, 2)]
    assert store.overrides[(beach.id, date(2026, 7, 2))].price == Decimal("275")
    assert store.overrides[(beach.id, date(2026, 7, 2))].is_available


@pytest.mark.unit
def test_later_update_overwrites_earlier(
    calendar_service: CalendarService, beach: Venue, store: Any
) -> None:
    day = date(2026, 7, 1)
    calendar_service.update_calendar(beach.id, [CalendarUpdate(date=day, is_available=False)])
    calendar_service.update_calendar(
        beach.id, [CalendarUpdate(date=day, is_available=True, note="Reopened")]
    )

    assert store.overrides[(beach.id, day)].is_available
    assert store.overrides[(beach.id, day)].note == "Reopened"


@pytest.mark.unit
def test_negative_price_is_rejected(calendar_service: CalendarService, beach: Venue) -> None:
    with pytest.raises(InvalidOperationError):
        calendar_service.update_calendar(
            beach.id,
            [CalendarUpdate(date=date(2026, 7, 1), is_available=True, custom_price=Decimal("-1"))],
        )


@pytest.mark.unit
def test_empty_update_writes_nothing(
    calendar_service: CalendarService, beach: Venue, store: Any
) -> None:
    assert calendar_service.update_calendar(beach.id, []) == []
    assert store.overrides == {}
