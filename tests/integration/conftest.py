"""
Shared fixtures for PostgreSQL integration tests.

The booking schema is created once per session from the ORM metadata. Each
test gets its own host and venues, removed again afterwards.
"""

from __future__ import annotations

from typing import Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.schema import CreateSchema

from venue_booking.config import SCHEMA
from venue_booking.db.engine import check_engine_health, engine
from venue_booking.db.store import SqlBookingStore, SqlIdentityResolver, SqlVenueCatalog
from venue_booking.models.base import Base
from venue_booking.models.daily_overrides import DailyOverrideRow  # noqa: F401
from venue_booking.models.guests import GuestRow  # noqa: F401
from venue_booking.models.host_settings import HostSettingsRow  # noqa: F401
from venue_booking.models.reservations import ReservationRow  # noqa: F401
from venue_booking.models.reviews import ReviewRow  # noqa: F401
from venue_booking.models.venues import VenueRow  # noqa: F401


@pytest.fixture(scope="session")
def booking_schema() -> None:
    """Create the booking schema and tables if they do not exist yet."""
    if not check_engine_health():
        pytest.skip("PostgreSQL is not reachable at DATABASE_URL")

    with engine.begin() as conn:
        conn.execute(CreateSchema(SCHEMA, if_not_exists=True))
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))
    Base.metadata.create_all(engine)


@pytest.fixture
def test_host(booking_schema: None) -> Generator[UUID, None, None]:
    """
    Host id owning the venues created by a test.

    Cleans up every row that belongs to the host's venues after the test.
    """
    host_id = uuid4()

    yield host_id

    params = {"host_id": str(host_id)}
    venue_ids = f"SELECT id FROM {SCHEMA}.venues WHERE host_id = :host_id"
    with engine.begin() as conn:
        conn.execute(
            text(f"DELETE FROM {SCHEMA}.reviews WHERE listing_id IN ({venue_ids})"), params
        )
        conn.execute(
            text(f"DELETE FROM {SCHEMA}.reservations WHERE listing_id IN ({venue_ids})"), params
        )
        conn.execute(
            text(f"DELETE FROM {SCHEMA}.daily_overrides WHERE listing_id IN ({venue_ids})"),
            params,
        )
        conn.execute(text(f"DELETE FROM {SCHEMA}.venues WHERE host_id = :host_id"), params)
        conn.execute(text(f"DELETE FROM {SCHEMA}.host_settings WHERE host_id = :host_id"), params)


@pytest.fixture
def test_venue(test_host: UUID) -> UUID:
    """Active beach venue: 6 guests max, 230.00/day, 40.00/hour."""
    venue_id = uuid4()
    with engine.begin() as conn:
        conn.execute(
            text(
                f"""
                INSERT INTO {SCHEMA}.venues
                (id, host_id, type, max_guest_count, base_price_per_hour, base_price_per_day,
                 currency, is_active, status)
                VALUES (:id, :host_id, 'beach', 6, 40.00, 230.00, 'USD', true, 'active')
                """
            ),
            {"id": str(venue_id), "host_id": str(test_host)},
        )
    return venue_id


@pytest.fixture
def sql_store(booking_schema: None) -> SqlBookingStore:
    return SqlBookingStore(engine)


@pytest.fixture
def sql_catalog(booking_schema: None) -> SqlVenueCatalog:
    return SqlVenueCatalog(engine)


@pytest.fixture
def sql_resolver(booking_schema: None) -> SqlIdentityResolver:
    return SqlIdentityResolver(engine)
