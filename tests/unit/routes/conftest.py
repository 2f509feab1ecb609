"""
Test client wired to the in-memory fakes through dependency overrides.
"""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from venue_booking.dependencies import (
    get_booking_policy,
    get_booking_service,
    get_booking_store,
    get_calendar_service,
    get_identity_resolver,
    get_review_service,
    get_venue_catalog,
)
from venue_booking.main import app
from venue_booking.services.booking import BookingService
from venue_booking.services.calendar import CalendarService
from venue_booking.services.policy import BookingPolicy
from venue_booking.services.reviews import ReviewService


@pytest.fixture
def client(
    store,
    catalog,
    resolver,
    policy: BookingPolicy,
    booking_service: BookingService,
    calendar_service: CalendarService,
    review_service: ReviewService,
) -> Generator[TestClient, None, None]:
    """FastAPI test client backed by in-memory stores and a frozen clock."""
    app.dependency_overrides[get_booking_store] = lambda: store
    app.dependency_overrides[get_venue_catalog] = lambda: catalog
    app.dependency_overrides[get_identity_resolver] = lambda: resolver
    app.dependency_overrides[get_booking_policy] = lambda: policy
    app.dependency_overrides[get_booking_service] = lambda: booking_service
    app.dependency_overrides[get_calendar_service] = lambda: calendar_service
    app.dependency_overrides[get_review_service] = lambda: review_service

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Build the X-User-Id header the auth gateway would set."""

    def _headers(user_id) -> dict[str, str]:
        return {"X-User-Id": str(user_id)}

    return _headers
