"""
FastAPI dependency injection providers.

Routes receive their services through these providers so tests can swap the
PostgreSQL-backed stores for in-memory fakes with app.dependency_overrides.

Testing Example:
    >>> from fastapi.testclient import TestClient
    >>>
    >>> app.dependency_overrides[get_booking_store] = lambda: InMemoryBookingStore()
    >>> app.dependency_overrides[get_venue_catalog] = lambda: InMemoryVenueCatalog([venue])
    >>>
    >>> client = TestClient(app)
    >>> response = client.post("/reservations", json={...}, headers={"X-User-Id": str(guest_id)})
"""

from __future__ import annotations

from typing import Generator, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.engine import Engine

from venue_booking.db.engine import engine
from venue_booking.db.interfaces import BookingStore, IdentityResolver, VenueCatalog
from venue_booking.db.store import SqlBookingStore, SqlIdentityResolver, SqlVenueCatalog
from venue_booking.services.booking import BookingService
from venue_booking.services.calendar import CalendarService
from venue_booking.services.policy import BookingPolicy
from venue_booking.services.reviews import ReviewService


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine
    """
    yield engine


def get_booking_store(db_engine: Engine = Depends(get_db_engine)) -> BookingStore:
    return SqlBookingStore(db_engine)


def get_venue_catalog(db_engine: Engine = Depends(get_db_engine)) -> VenueCatalog:
    return SqlVenueCatalog(db_engine)


def get_identity_resolver(db_engine: Engine = Depends(get_db_engine)) -> IdentityResolver:
    return SqlIdentityResolver(db_engine)


def get_booking_policy() -> BookingPolicy:
    """Booking rules from environment configuration."""
    return BookingPolicy.from_config()


def get_booking_service(
    store: BookingStore = Depends(get_booking_store),
    venues: VenueCatalog = Depends(get_venue_catalog),
    policy: BookingPolicy = Depends(get_booking_policy),
) -> BookingService:
    return BookingService(store, venues, policy)


def get_calendar_service(
    store: BookingStore = Depends(get_booking_store),
    venues: VenueCatalog = Depends(get_venue_catalog),
) -> CalendarService:
    return CalendarService(store, venues)


def get_review_service(store: BookingStore = Depends(get_booking_store)) -> ReviewService:
    return ReviewService(store)


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> UUID:
    """
    Resolve the acting user from the X-User-Id header set by the auth gateway.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-Id header",
        )
