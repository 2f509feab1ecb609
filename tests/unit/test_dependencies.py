"""
Unit tests for FastAPI dependency injection.
"""

from __future__ import annotations

from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from venue_booking.db.store import SqlBookingStore, SqlIdentityResolver, SqlVenueCatalog
from venue_booking.dependencies import (
    get_booking_service,
    get_calendar_service,
    get_current_user_id,
    get_db_engine,
    get_identity_resolver,
    get_review_service,
)
from venue_booking.services.booking import BookingService
from venue_booking.services.calendar import CalendarService
from venue_booking.services.reviews import ReviewService


@pytest.mark.unit
def test_get_db_engine_dependency() -> None:
    engine = next(get_db_engine())

    assert isinstance(engine, Engine)


@pytest.mark.unit
def test_services_are_built_on_the_injected_engine() -> None:
    app = FastAPI()
    seen: dict[str, object] = {}

    @app.get("/wiring")
    def wiring(
        booking: BookingService = Depends(get_booking_service),
        calendar: CalendarService = Depends(get_calendar_service),
        reviews: ReviewService = Depends(get_review_service),
        resolver=Depends(get_identity_resolver),
    ) -> dict[str, str]:
        seen.update(booking=booking, calendar=calendar, reviews=reviews, resolver=resolver)
        return {"status": "ok"}

    mock_engine = Mock(spec=Engine)
    app.dependency_overrides[get_db_engine] = lambda: mock_engine

    assert TestClient(app).get("/wiring").status_code == 200
    booking = seen["booking"]
    assert isinstance(booking, BookingService)
    assert isinstance(booking._store, SqlBookingStore)
    assert isinstance(booking._venues, SqlVenueCatalog)
    assert booking._store._engine is mock_engine
    assert isinstance(seen["calendar"], CalendarService)
    assert isinstance(seen["reviews"], ReviewService)
    assert isinstance(seen["resolver"], SqlIdentityResolver)


@pytest.mark.unit
def test_current_user_comes_from_header() -> None:
    app = FastAPI()

    @app.get("/me")
    def me(user_id: UUID = Depends(get_current_user_id)) -> dict[str, str]:
        return {"user_id": str(user_id)}

    client = TestClient(app)
    user_id = uuid4()

    assert client.get("/me", headers={"X-User-Id": str(user_id)}).json() == {
        "user_id": str(user_id)
    }
    assert client.get("/me").status_code == 401
    assert client.get("/me", headers={"X-User-Id": "42"}).status_code == 401
