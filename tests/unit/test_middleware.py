"""
Unit tests for middleware components.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from venue_booking.middleware import RequestIDMiddleware


@pytest.fixture
def app_with_middleware() -> FastAPI:
    """Create FastAPI app with RequestIDMiddleware for testing."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def test_endpoint(request: Request) -> dict[str, str]:
        """Echo the request ID from state and from the structlog context."""
        bound = structlog.contextvars.get_contextvars()
        return {"request_id": request.state.request_id, "logged_id": bound.get("request_id", "")}

    return app


@pytest.fixture
def middleware_client(app_with_middleware: FastAPI) -> TestClient:
    return TestClient(app_with_middleware)


@pytest.mark.unit
def test_request_id_header_matches_state(middleware_client: TestClient) -> None:
    response = middleware_client.get("/test")

    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 36  # UUID length
    assert response.json()["request_id"] == response.headers["X-Request-ID"]


@pytest.mark.unit
def test_request_id_is_bound_for_logging(middleware_client: TestClient) -> None:
    response = middleware_client.get("/test")

    assert response.json()["logged_id"] == response.headers["X-Request-ID"]


@pytest.mark.unit
def test_request_id_unique_per_request(middleware_client: TestClient) -> None:
    first = middleware_client.get("/test").headers["X-Request-ID"]
    second = middleware_client.get("/test").headers["X-Request-ID"]

    assert first != second


@pytest.mark.unit
def test_incoming_request_id_is_reused(middleware_client: TestClient) -> None:
    response = middleware_client.get("/test", headers={"X-Request-ID": "gateway-trace-42"})

    assert response.headers["X-Request-ID"] == "gateway-trace-42"
    assert response.json()["request_id"] == "gateway-trace-42"
