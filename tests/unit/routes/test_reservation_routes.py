"""
Unit tests for guest reservation endpoints.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from venue_booking.dependencies import get_booking_policy, get_booking_service
from venue_booking.domain.enums import BookingType
from venue_booking.domain.models import Venue
from venue_booking.main import app
from venue_booking.services.booking import BookingService
from venue_booking.services.policy import BookingPolicy


def _payload(venue: Venue, **overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "listing_id": str(venue.id),
        "start_time": "2026-07-01T00:00:00Z",
        "end_time": "2026-07-02T00:00:00Z",
        "guest_count": 6,
        "booking_type": "daily",
    }
    body.update(overrides)
    return body


@pytest.mark.unit
def test_create_reservation_returns_201(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    response = client.post("/reservations", json=_payload(beach), headers=as_user(guest_id))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["source"] == "online"
    assert body["guest_id"] == str(guest_id)
    assert body["total_price"] == "230.00"
    assert body["confirmation_number"].startswith("SW")
    assert "X-Request-ID" in response.headers


@pytest.mark.unit
def test_create_reservation_requires_user_header(client: TestClient, beach: Venue) -> None:
    response = client.post("/reservations", json=_payload(beach))

    assert response.status_code == 401


@pytest.mark.unit
def test_create_reservation_rejects_malformed_user_header(
    client: TestClient, beach: Venue
) -> None:
    response = client.post(
        "/reservations", json=_payload(beach), headers={"X-User-Id": "not-a-uuid"}
    )

    assert response.status_code == 401


@pytest.mark.unit
def test_overlapping_reservation_returns_409(
    client: TestClient, as_user: Callable, beach: Venue
) -> None:
    client.post("/reservations", json=_payload(beach), headers=as_user(uuid4()))

    response = client.post(
        "/reservations",
        json=_payload(beach, start_time="2026-07-01T12:00:00Z", end_time="2026-07-02T12:00:00Z"),
        headers=as_user(uuid4()),
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "The selected dates/times are already booked."


@pytest.mark.unit
def test_too_many_guests_returns_422(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    response = client.post(
        "/reservations", json=_payload(beach, guest_count=7), headers=as_user(guest_id)
    )

    assert response.status_code == 422
    assert "Maximum guest count" in response.json()["detail"]


@pytest.mark.unit
def test_unknown_listing_returns_404(client: TestClient, as_user: Callable, guest_id: UUID) -> None:
    body = {
        "listing_id": str(uuid4()),
        "start_time": "2026-07-01T00:00:00Z",
        "end_time": "2026-07-02T00:00:00Z",
        "guest_count": 2,
        "booking_type": "daily",
    }

    response = client.post("/reservations", json=body, headers=as_user(guest_id))

    assert response.status_code == 404


@pytest.mark.unit
def test_invalid_booking_type_fails_validation(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    response = client.post(
        "/reservations", json=_payload(beach, booking_type="weekly"), headers=as_user(guest_id)
    )

    assert response.status_code == 422


@pytest.mark.unit
def test_list_and_get_my_reservations(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    created = client.post("/reservations", json=_payload(beach), headers=as_user(guest_id)).json()

    listed = client.get("/reservations", headers=as_user(guest_id))
    fetched = client.get(f"/reservations/{created['id']}", headers=as_user(guest_id))
    filtered = client.get("/reservations?status=cancelled", headers=as_user(guest_id))

    assert [r["id"] for r in listed.json()] == [created["id"]]
    assert fetched.json()["confirmation_number"] == created["confirmation_number"]
    assert filtered.json() == []


@pytest.mark.unit
def test_get_someone_elses_reservation_returns_403(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    created = client.post("/reservations", json=_payload(beach), headers=as_user(guest_id)).json()

    response = client.get(f"/reservations/{created['id']}", headers=as_user(uuid4()))

    assert response.status_code == 403


@pytest.mark.unit
def test_cancel_reservation_frees_the_slot(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    created = client.post("/reservations", json=_payload(beach), headers=as_user(guest_id)).json()

    response = client.post(
        f"/reservations/{created['id']}/cancel",
        json={"reason": "Rain forecast"},
        headers=as_user(guest_id),
    )
    rebooked = client.post("/reservations", json=_payload(beach), headers=as_user(uuid4()))

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["cancellation_reason"] == "Rain forecast"
    assert rebooked.status_code == 201


@pytest.mark.unit
def test_guest_cancels_next_day_booking_without_host_window(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID, now: datetime
) -> None:
    start = (now + timedelta(days=1)).replace(hour=9)
    created = client.post(
        "/reservations",
        json=_payload(
            beach,
            start_time=start.isoformat(),
            end_time=(start + timedelta(days=1)).isoformat(),
        ),
        headers=as_user(guest_id),
    )

    reservation_id = created.json()["id"]
    response = client.post(f"/reservations/{reservation_id}/cancel", headers=as_user(guest_id))

    assert created.status_code == 201
    assert created.json()["final_price"] == "230.00"
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


@pytest.mark.unit
def test_cancel_inside_host_window_returns_422(
    client: TestClient, as_user: Callable, pool: Venue, guest_id: UUID, now: datetime
) -> None:
    app.dependency_overrides[get_booking_policy] = lambda: BookingPolicy(
        enforce_cancellation_window=True
    )
    start = now + timedelta(hours=2)
    created = client.post(
        "/reservations",
        json=_payload(
            pool,
            start_time=start.isoformat(),
            end_time=(start + timedelta(hours=2)).isoformat(),
            guest_count=2,
            booking_type="hourly",
        ),
        headers=as_user(guest_id),
    ).json()

    response = client.post(f"/reservations/{created['id']}/cancel", headers=as_user(guest_id))

    assert response.status_code == 422
    assert "24 hours" in response.json()["detail"]


@pytest.mark.unit
def test_cancel_twice_returns_422(
    client: TestClient, as_user: Callable, beach: Venue, guest_id: UUID
) -> None:
    created = client.post("/reservations", json=_payload(beach), headers=as_user(guest_id)).json()
    client.post(f"/reservations/{created['id']}/cancel", headers=as_user(guest_id))

    response = client.post(f"/reservations/{created['id']}/cancel", headers=as_user(guest_id))

    assert response.status_code == 422


@pytest.mark.unit
def test_review_completed_reservation(
    client: TestClient,
    as_user: Callable,
    booking_service: BookingService,
    beach: Venue,
    guest_id: UUID,
) -> None:
    created = client.post("/reservations", json=_payload(beach), headers=as_user(guest_id)).json()
    reservation_id = UUID(created["id"])
    booking_service.confirm_reservation(reservation_id)
    booking_service.check_in_reservation(reservation_id)
    booking_service.complete_reservation(reservation_id)

    response = client.post(
        f"/reservations/{reservation_id}/review",
        json={"rating": 5, "comment": "Great service"},
        headers=as_user(guest_id),
    )
    again = client.post(
        f"/reservations/{reservation_id}/review",
        json={"rating": 4},
        headers=as_user(guest_id),
    )

    assert response.status_code == 201
    assert response.json()["rating"] == 5
    assert again.status_code == 422


@pytest.mark.unit
def test_unexpected_failure_returns_500(as_user: Callable, beach: Venue) -> None:
    failing = Mock(spec=BookingService)
    failing.create_reservation.side_effect = RuntimeError("disk on fire")
    app.dependency_overrides[get_booking_service] = lambda: failing
    try:
        response = TestClient(app).post(
            "/reservations",
            json={
                "listing_id": str(beach.id),
                "start_time": "2026-07-01T00:00:00Z",
                "end_time": "2026-07-02T00:00:00Z",
                "guest_count": 2,
                "booking_type": BookingType.DAILY.value,
            },
            headers=as_user(uuid4()),
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
